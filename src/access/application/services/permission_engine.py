"""
PermissionEngine - the single decision point for "may this user do X at Y?"
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Sequence
from uuid import UUID

from shared.infrastructure.observability.logger import get_logger

from access.application.services.role_catalog import RoleCatalog
from access.domain.entities.account_membership import AccountMembership
from access.domain.entities.role_template import RoleTemplate
from access.domain.exceptions import AccountNotFoundError
from access.domain.protocols.account_repository_protocol import IAccountRepository
from access.domain.protocols.membership_repository_protocol import IAccountMembershipRepository
from access.domain.protocols.system_role_assignment_repository_protocol import (
    ISystemRoleAssignmentRepository,
)
from access.domain.services.account_tree import AccountTree
from access.domain.value_objects.decision import PermissionDecision, PermissionRequest
from access.domain.value_objects.permission import Permission
from access.domain.value_objects.scope import PermissionScope

logger = get_logger(__name__)


@dataclass
class _Principal:
    """Everything one user holds, loaded once per user per request."""

    user_id: UUID
    system_roles: list[RoleTemplate]
    memberships: list[AccountMembership]
    templates: dict[UUID, RoleTemplate] = field(default_factory=dict)

    @property
    def is_super_admin(self) -> bool:
        return any(role.grants_all for role in self.system_roles)

    def membership_at(self, account_id: UUID) -> Optional[AccountMembership]:
        for membership in self.memberships:
            if membership.account_id == account_id:
                return membership
        return None


class PermissionEngine:
    """
    Evaluates permission checks against system roles and account memberships.

    Evaluation order (first match wins, grants are never merged):
        1. a system role whose template grants all  -> granted, scope account
        2. a system role containing the permission  -> granted, scope account
        3. the membership at the target account     -> granted, that role's scope
        4. a subsidiary role at an ancestor account -> granted, scope subsidiary
        5. otherwise                                -> denied, scope none

    Checks only read. A missing grant is a normal denied decision; unknown
    target accounts and dangling role references raise NotFoundError.
    """

    def __init__(
        self,
        catalog: RoleCatalog,
        system_roles: ISystemRoleAssignmentRepository,
        memberships: IAccountMembershipRepository,
        accounts: IAccountRepository,
    ) -> None:
        self._catalog = catalog
        self._system_roles = system_roles
        self._memberships = memberships
        self._accounts = accounts
        self._tree: Optional[AccountTree] = None

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def check(
        self,
        user_id: UUID,
        resource: str,
        action: str,
        target_account_id: Optional[UUID] = None,
    ) -> PermissionDecision:
        """Check one `resource:action` pair, optionally at a target account."""
        permission = Permission(resource, action)
        principal = await self._load_principal(user_id)
        return await self._evaluate(principal, permission, target_account_id)

    async def check_batch(self, requests: Sequence[PermissionRequest]) -> list[PermissionDecision]:
        """Evaluate many checks, returning decisions in request order."""
        principals: dict[UUID, _Principal] = {}
        decisions: list[PermissionDecision] = []
        for request in requests:
            principal = principals.get(request.user_id)
            if principal is None:
                principal = await self._load_principal(request.user_id)
                principals[request.user_id] = principal
            decisions.append(
                await self._evaluate(principal, request.permission, request.target_account_id)
            )
        return decisions

    async def is_super_admin(self, user_id: UUID) -> bool:
        assignments = await self._system_roles.find_by_user(user_id)
        if not assignments:
            return False
        templates = await self._catalog.get_many(a.role_id for a in assignments)
        return any(t.grants_all for t in templates.values())

    async def accessible_account_ids(self, user_id: UUID) -> set[UUID]:
        """
        Accounts the user may see: all of them for a super admin, otherwise
        each membership account plus the subtree under every account where
        the user holds a subsidiary-scoped role.
        """
        principal = await self._load_principal(user_id)
        tree = await self._get_tree()
        if principal.is_super_admin:
            return tree.all_ids()

        accessible: set[UUID] = set()
        for membership in principal.memberships:
            if membership.account_id not in tree:
                continue
            accessible.add(membership.account_id)
            if any(r.scope == PermissionScope.SUBSIDIARY for r in membership.roles):
                accessible |= tree.descendant_ids(membership.account_id)
        return accessible

    # ------------------------------------------------------------------
    # Evaluation
    # ------------------------------------------------------------------

    async def _evaluate(
        self,
        principal: _Principal,
        permission: Permission,
        target_account_id: Optional[UUID],
    ) -> PermissionDecision:
        if principal.is_super_admin:
            return self._granted(principal, permission, PermissionScope.ACCOUNT, "super_admin")

        if any(role.allows(permission) for role in principal.system_roles):
            return self._granted(principal, permission, PermissionScope.ACCOUNT, "system_role")

        if target_account_id is not None:
            await self._ensure_account_exists(target_account_id)

            membership = principal.membership_at(target_account_id)
            if membership is not None:
                for held in membership.roles:
                    if principal.templates[held.role_id].allows(permission):
                        return self._granted(principal, permission, held.scope, "account_role")

            decision = await self._check_subsidiary(principal, permission, target_account_id)
            if decision is not None:
                return decision

        logger.info(
            "Permission denied",
            user_id=str(principal.user_id),
            permission=permission.value,
            target_account_id=str(target_account_id) if target_account_id else None,
        )
        return PermissionDecision.deny()

    async def _check_subsidiary(
        self,
        principal: _Principal,
        permission: Permission,
        target_account_id: UUID,
    ) -> Optional[PermissionDecision]:
        candidates = [
            membership.account_id
            for membership in principal.memberships
            if membership.account_id != target_account_id
            and any(
                held.scope == PermissionScope.SUBSIDIARY
                and principal.templates[held.role_id].allows(permission)
                for held in membership.roles
            )
        ]
        if not candidates:
            return None

        tree = await self._get_tree()
        for account_id in candidates:
            if account_id not in tree:
                logger.warning(
                    "Membership references a missing account",
                    user_id=str(principal.user_id),
                    account_id=str(account_id),
                )
                continue
            if target_account_id in tree.descendant_ids(account_id):
                return self._granted(principal, permission, PermissionScope.SUBSIDIARY, "subsidiary_role")
        return None

    @staticmethod
    def _granted(
        principal: _Principal,
        permission: Permission,
        scope: PermissionScope,
        via: str,
    ) -> PermissionDecision:
        logger.debug(
            "Permission granted",
            user_id=str(principal.user_id),
            permission=permission.value,
            scope=scope.value,
            via=via,
        )
        return PermissionDecision.grant(scope)

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    async def _load_principal(self, user_id: UUID) -> _Principal:
        assignments = await self._system_roles.find_by_user(user_id)
        memberships = list(await self._memberships.find_by_user(user_id))

        role_ids = [a.role_id for a in assignments]
        for membership in memberships:
            role_ids.extend(membership.role_ids)
        templates = await self._catalog.get_many(role_ids) if role_ids else {}

        return _Principal(
            user_id=user_id,
            system_roles=[templates[a.role_id] for a in assignments],
            memberships=memberships,
            templates=templates,
        )

    async def _get_tree(self) -> AccountTree:
        if self._tree is None:
            self._tree = await AccountTree.load(self._accounts)
        return self._tree

    async def _ensure_account_exists(self, account_id: UUID) -> None:
        if self._tree is not None:
            exists = account_id in self._tree
        else:
            exists = await self._accounts.get_by_id(account_id) is not None
        if not exists:
            raise AccountNotFoundError(account_id)
