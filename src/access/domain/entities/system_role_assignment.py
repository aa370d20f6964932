"""
SystemRoleAssignment Entity - platform-wide role grant
"""
from __future__ import annotations

from datetime import datetime
from typing import Optional
from uuid import UUID

from shared.domain.base_entity import BaseEntity


class SystemRoleAssignment(BaseEntity):
    """
    Grants a role template to a user across the whole platform.

    Not tied to any account. Removing one that references a grants-all
    template is subject to the last-super-admin rule.
    """

    def __init__(
        self,
        id: UUID,
        user_id: UUID,
        role_id: UUID,
        created_at: Optional[datetime] = None,
        updated_at: Optional[datetime] = None,
    ) -> None:
        super().__init__(id, created_at=created_at, updated_at=updated_at)
        self.user_id = user_id
        self.role_id = role_id

    def __repr__(self) -> str:
        return f"SystemRoleAssignment(user_id={self.user_id}, role_id={self.role_id})"
