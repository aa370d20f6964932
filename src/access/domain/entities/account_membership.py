"""
AccountMembership Entity - a user's roles at one account
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, Optional
from uuid import UUID

from shared.domain.base_entity import BaseEntity

from access.domain.value_objects.scope import PermissionScope


@dataclass(frozen=True)
class MembershipRole:
    """One role held at the membership's account, with its own scope."""

    role_id: UUID
    scope: PermissionScope

    def __post_init__(self) -> None:
        if self.scope not in PermissionScope.assignable():
            raise ValueError(f"Membership roles cannot use scope {self.scope.value!r}")


class AccountMembership(BaseEntity):
    """
    A user's membership in an account.

    A user has at most one membership per account, holding any number of
    roles. Role order is preserved: when several roles at the same account
    match a check, the earliest one decides the returned scope.

    Attributes:
        user_id: Member
        account_id: Account the roles are held at
        roles: Ordered MembershipRole entries
    """

    def __init__(
        self,
        id: UUID,
        user_id: UUID,
        account_id: UUID,
        roles: Optional[Iterable[MembershipRole]] = None,
        created_at: Optional[datetime] = None,
        updated_at: Optional[datetime] = None,
    ) -> None:
        super().__init__(id, created_at=created_at, updated_at=updated_at)
        self.user_id = user_id
        self.account_id = account_id
        self._roles: list[MembershipRole] = list(roles or ())

    def assign_role(self, role_id: UUID, scope: PermissionScope) -> None:
        """Add a role, or change the scope of one already held in place."""
        new_role = MembershipRole(role_id=role_id, scope=PermissionScope(scope))
        for index, held in enumerate(self._roles):
            if held.role_id == role_id:
                self._roles[index] = new_role
                break
        else:
            self._roles.append(new_role)
        self.mark_updated()

    def remove_role(self, role_id: UUID) -> bool:
        before = len(self._roles)
        self._roles = [r for r in self._roles if r.role_id != role_id]
        if len(self._roles) != before:
            self.mark_updated()
            return True
        return False

    def holds(self, role_id: UUID) -> bool:
        return any(r.role_id == role_id for r in self._roles)

    @property
    def roles(self) -> tuple[MembershipRole, ...]:
        return tuple(self._roles)

    @property
    def role_ids(self) -> set[UUID]:
        return {r.role_id for r in self._roles}
