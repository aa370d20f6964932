"""
Permission decision returned by the engine
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional
from uuid import UUID

from access.domain.value_objects.permission import Permission
from access.domain.value_objects.scope import PermissionScope


@dataclass(frozen=True)
class PermissionDecision:
    """Outcome of a check: whether it is granted and how broadly."""

    granted: bool
    scope: PermissionScope

    @classmethod
    def grant(cls, scope: PermissionScope) -> PermissionDecision:
        return cls(granted=True, scope=scope)

    @classmethod
    def deny(cls) -> PermissionDecision:
        return cls(granted=False, scope=PermissionScope.NONE)


@dataclass(frozen=True)
class PermissionRequest:
    """One entry of a batch check."""

    user_id: UUID
    permission: Permission
    target_account_id: Optional[UUID] = None
