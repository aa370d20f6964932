"""
Account Membership Repository Protocol (Interface)
"""
from __future__ import annotations

from typing import Optional, Protocol, Sequence
from uuid import UUID

from access.domain.entities.account_membership import AccountMembership


class IAccountMembershipRepository(Protocol):
    """Account membership interface (memberships carry their roles)"""

    async def add(self, membership: AccountMembership) -> AccountMembership:
        ...

    async def find_by_user(self, user_id: UUID) -> Sequence[AccountMembership]:
        ...

    async def get_for_user_and_account(
        self,
        user_id: UUID,
        account_id: UUID,
    ) -> Optional[AccountMembership]:
        ...

    async def update(self, membership: AccountMembership) -> AccountMembership:
        """Persist the membership including its role list"""
        ...
