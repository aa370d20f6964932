"""
In-memory stand-ins for the access repositories and unit of work, plus
builders for the entities the unit tests need.
"""
from __future__ import annotations

from typing import Iterable, Optional
from uuid import UUID, uuid4

from access.domain.entities.account import Account, AccountType
from access.domain.entities.account_membership import AccountMembership
from access.domain.entities.domain_mapping import DomainMapping
from access.domain.entities.role_template import RoleTemplate
from access.domain.entities.system_role_assignment import SystemRoleAssignment
from access.domain.value_objects.permission import Permission
from access.domain.value_objects.scope import PermissionScope, RoleApplicability


# ─── Builders ───────────────────────────────────────────────────────────────

def make_account(
    name: str,
    account_type: AccountType = AccountType.ORGANIZATION,
    parent: Optional[Account] = None,
    legacy_domains: Optional[str] = None,
) -> Account:
    return Account(
        id=uuid4(),
        name=name,
        account_type=account_type,
        parent_id=parent.id if parent else None,
        legacy_domains=legacy_domains,
    )


def make_role(
    name: str,
    permissions: Iterable[str] = (),
    grants_all: bool = False,
    applicable_to: RoleApplicability = RoleApplicability.BOTH,
) -> RoleTemplate:
    return RoleTemplate(
        id=uuid4(),
        name=name,
        permissions={Permission.parse(p) for p in permissions},
        grants_all=grants_all,
        applicable_to=applicable_to,
    )


def make_membership(user_id: UUID, account: Account, *roles: tuple[RoleTemplate, PermissionScope]) -> AccountMembership:
    membership = AccountMembership(id=uuid4(), user_id=user_id, account_id=account.id)
    for role, scope in roles:
        membership.assign_role(role.id, scope)
    return membership


# ─── Repositories ───────────────────────────────────────────────────────────

class InMemoryAccountRepository:
    def __init__(self, accounts: Iterable[Account] = ()) -> None:
        self.items = {a.id: a for a in accounts}
        self.list_all_calls = 0
        self.locked_reads = 0
        self.updated: list[Account] = []

    async def get_by_id(self, account_id):
        return self.items.get(account_id)

    async def list_all(self, *, for_update=False):
        self.list_all_calls += 1
        self.locked_reads += for_update
        return list(self.items.values())

    async def list_children(self, parent_id):
        return [a for a in self.items.values() if a.parent_id == parent_id]

    async def find_with_legacy_domains(self):
        return sorted((a for a in self.items.values() if a.legacy_domains), key=lambda a: a.name)

    async def update(self, account):
        self.items[account.id] = account
        self.updated.append(account)
        return account


class InMemoryRoleTemplateRepository:
    def __init__(self, roles: Iterable[RoleTemplate] = ()) -> None:
        self.items = {r.id: r for r in roles}
        self.get_by_ids_calls = 0

    def add(self, role: RoleTemplate) -> RoleTemplate:
        self.items[role.id] = role
        return role

    async def get_by_id(self, role_id):
        return self.items.get(role_id)

    async def get_by_ids(self, role_ids):
        self.get_by_ids_calls += 1
        return [self.items[r] for r in role_ids if r in self.items]

    async def get_by_name(self, name):
        return next((r for r in self.items.values() if r.name == name), None)

    async def list_grants_all(self):
        return [r for r in self.items.values() if r.grants_all]


class InMemorySystemRoleAssignmentRepository:
    def __init__(self, roles: InMemoryRoleTemplateRepository) -> None:
        self.items: dict[UUID, SystemRoleAssignment] = {}
        self._roles = roles
        self.locked_reads = 0

    async def add(self, assignment):
        self.items[assignment.id] = assignment
        return assignment

    async def get_by_id(self, assignment_id):
        return self.items.get(assignment_id)

    async def find_by_user(self, user_id):
        return [a for a in self.items.values() if a.user_id == user_id]

    async def count_grants_all(self, *, for_update=False):
        self.locked_reads += for_update
        return sum(
            1 for a in self.items.values()
            if a.role_id in self._roles.items and self._roles.items[a.role_id].grants_all
        )

    async def delete(self, assignment_id):
        return self.items.pop(assignment_id, None) is not None


class InMemoryMembershipRepository:
    def __init__(self) -> None:
        self.items: dict[UUID, AccountMembership] = {}

    async def add(self, membership):
        self.items[membership.id] = membership
        return membership

    async def find_by_user(self, user_id):
        return [m for m in self.items.values() if m.user_id == user_id]

    async def get_for_user_and_account(self, user_id, account_id):
        return next(
            (m for m in self.items.values() if m.user_id == user_id and m.account_id == account_id),
            None,
        )

    async def update(self, membership):
        self.items[membership.id] = membership
        return membership


class InMemoryDomainMappingRepository:
    def __init__(self, mappings: Iterable[DomainMapping] = ()) -> None:
        self.items = {m.id: m for m in mappings}
        self.fail_with: Optional[Exception] = None
        self.loads = 0

    async def list_active(self):
        self.loads += 1
        if self.fail_with is not None:
            raise self.fail_with
        active = [m for m in self.items.values() if m.is_active]
        return sorted(active, key=lambda m: (-m.priority, m.domain))

    async def add(self, mapping):
        self.items[mapping.id] = mapping
        return mapping

    async def get_by_id(self, mapping_id):
        return self.items.get(mapping_id)

    async def get_by_domain(self, domain):
        return next((m for m in self.items.values() if m.domain == domain.lower()), None)

    async def list_all(self):
        return sorted(self.items.values(), key=lambda m: (-m.priority, m.domain))

    async def account_ids_with_mappings(self):
        return {m.account_id for m in self.items.values()}

    async def update(self, mapping):
        self.items[mapping.id] = mapping
        return mapping

    async def delete(self, mapping_id):
        return self.items.pop(mapping_id, None) is not None


# ─── Unit of work ───────────────────────────────────────────────────────────

class FakeUnitOfWork:
    """Counts commits; nothing is rolled back since the fakes write in place."""

    def __init__(self, accounts: Iterable[Account] = (), roles: Iterable[RoleTemplate] = ()) -> None:
        self.accounts = InMemoryAccountRepository(accounts)
        self.roles = InMemoryRoleTemplateRepository(roles)
        self.system_roles = InMemorySystemRoleAssignmentRepository(self.roles)
        self.memberships = InMemoryMembershipRepository()
        self.domain_mappings = InMemoryDomainMappingRepository()
        self.commits = 0

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        return None

    async def commit(self):
        self.commits += 1

    async def rollback(self):
        return None


class FakeClock:
    def __init__(self, now: float = 1000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds
