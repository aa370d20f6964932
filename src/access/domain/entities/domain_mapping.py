"""
DomainMapping Entity - email domain to account routing rule
"""
from __future__ import annotations

from datetime import datetime
from typing import Optional
from uuid import UUID

from shared.domain.base_entity import BaseEntity


class DomainMapping(BaseEntity):
    """
    Routes mail from `domain` (and its subdomains) to `account_id`.

    Domains are stored lowercase and are unique across all accounts.
    `priority` decides between matches at different suffix levels.
    """

    def __init__(
        self,
        id: UUID,
        domain: str,
        account_id: UUID,
        priority: int = 0,
        is_active: bool = True,
        created_at: Optional[datetime] = None,
        updated_at: Optional[datetime] = None,
    ) -> None:
        super().__init__(id, created_at=created_at, updated_at=updated_at)
        self.domain = domain.lower()
        self.account_id = account_id
        self.priority = priority
        self.is_active = is_active

    def change(
        self,
        *,
        domain: Optional[str] = None,
        account_id: Optional[UUID] = None,
        priority: Optional[int] = None,
        is_active: Optional[bool] = None,
    ) -> None:
        if domain is not None:
            self.domain = domain.lower()
        if account_id is not None:
            self.account_id = account_id
        if priority is not None:
            self.priority = priority
        if is_active is not None:
            self.is_active = is_active
        self.mark_updated()

    def __repr__(self) -> str:
        return f"DomainMapping(domain={self.domain!r}, account_id={self.account_id}, priority={self.priority})"
