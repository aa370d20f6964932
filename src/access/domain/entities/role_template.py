"""
RoleTemplate Entity - named permission set
"""
from __future__ import annotations

from datetime import datetime
from typing import Iterable, Optional
from uuid import UUID

from shared.domain.base_entity import BaseEntity

from access.domain.value_objects.permission import Permission
from access.domain.value_objects.scope import PrincipalKind, RoleApplicability


class RoleTemplate(BaseEntity):
    """
    Role template shared by system assignments and account memberships.

    Templates are managed by ordinary CRUD outside the engine; the engine
    only reads them.

    Attributes:
        name: Unique template name (e.g. "Super Admin", "Account Manager")
        permissions: frozenset of Permission pairs
        grants_all: When True, permission matching is bypassed entirely
        applicable_to: Which principals the template may be assigned to
    """

    def __init__(
        self,
        id: UUID,
        name: str,
        permissions: Optional[Iterable[Permission]] = None,
        grants_all: bool = False,
        applicable_to: RoleApplicability = RoleApplicability.BOTH,
        description: Optional[str] = None,
        created_at: Optional[datetime] = None,
        updated_at: Optional[datetime] = None,
    ) -> None:
        super().__init__(id, created_at=created_at, updated_at=updated_at)
        self._name = name
        self._permissions = frozenset(permissions or ())
        self._grants_all = grants_all
        self._applicable_to = RoleApplicability(applicable_to)
        self._description = description

    def allows(self, permission: Permission) -> bool:
        """True if this template grants the permission, directly or through 'resource:*' or '*:*'."""
        if self._grants_all or permission in self._permissions:
            return True
        return any(w in self._permissions for w in permission.wildcards())

    def assignable_to(self, kind: PrincipalKind) -> bool:
        return self._applicable_to.allows(kind)

    @property
    def name(self) -> str:
        return self._name

    @property
    def permissions(self) -> frozenset[Permission]:
        return self._permissions

    @property
    def grants_all(self) -> bool:
        return self._grants_all

    @property
    def applicable_to(self) -> RoleApplicability:
        return self._applicable_to

    @property
    def description(self) -> Optional[str]:
        return self._description
