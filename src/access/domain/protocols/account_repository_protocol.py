"""
Account Repository Protocol (Interface)
"""
from __future__ import annotations

from typing import Optional, Protocol, Sequence
from uuid import UUID

from access.domain.entities.account import Account


class IAccountRepository(Protocol):
    """Account repository interface"""

    async def get_by_id(self, account_id: UUID) -> Optional[Account]:
        ...

    async def list_all(self, *, for_update: bool = False) -> Sequence[Account]:
        """Every account; used to build the per-request AccountTree. for_update locks the rows."""
        ...

    async def list_children(self, parent_id: UUID) -> Sequence[Account]:
        ...

    async def find_with_legacy_domains(self) -> Sequence[Account]:
        """Accounts whose deprecated domain field is non-empty"""
        ...

    async def update(self, account: Account) -> Account:
        ...
