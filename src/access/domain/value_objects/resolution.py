"""
Domain resolution result
"""
from __future__ import annotations

from dataclasses import dataclass, replace
from uuid import UUID


@dataclass(frozen=True)
class Resolution:
    """
    Which account owns an email domain.

    Attributes:
        account_id: Owning account
        domain: The registered domain that matched (may be a parent domain)
        priority: Priority of the matching mapping
        exact_match: False when found through suffix fallback
    """

    account_id: UUID
    domain: str
    priority: int
    exact_match: bool = True

    def as_suffix_match(self) -> Resolution:
        return replace(self, exact_match=False)
