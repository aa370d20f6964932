"""
Account Entity - node of the tenant hierarchy
"""
from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Optional
from uuid import UUID

from shared.domain.base_entity import BaseEntity


class AccountType(str, Enum):
    ORGANIZATION = "ORGANIZATION"
    SUBSIDIARY = "SUBSIDIARY"
    INDIVIDUAL = "INDIVIDUAL"


class Account(BaseEntity):
    """
    A tenant in the account forest.

    An account can be:
    - ORGANIZATION: a company, usually a root
    - SUBSIDIARY: part of an organization; always has a non-individual parent
    - INDIVIDUAL: a single customer; never parents organizations or subsidiaries

    Parent and type are only changed through `reparent`, after
    HierarchyGuard has approved the change.

    Attributes:
        name: Display name
        account_type: AccountType
        parent_id: Parent account, None for roots
        legacy_domains: Deprecated comma-separated domain list
    """

    def __init__(
        self,
        id: UUID,
        name: str,
        account_type: AccountType,
        parent_id: Optional[UUID] = None,
        legacy_domains: Optional[str] = None,
        created_at: Optional[datetime] = None,
        updated_at: Optional[datetime] = None,
    ) -> None:
        super().__init__(id, created_at=created_at, updated_at=updated_at)
        if not name or not name.strip():
            raise ValueError("Account name cannot be empty")
        self._name = name.strip()
        self._account_type = AccountType(account_type)
        self._parent_id = parent_id
        self._legacy_domains = legacy_domains

    def reparent(self, parent_id: Optional[UUID], account_type: Optional[AccountType] = None) -> None:
        """Apply an already-validated parent/type change."""
        self._parent_id = parent_id
        if account_type is not None:
            self._account_type = AccountType(account_type)
        self.mark_updated()

    def rename(self, name: str) -> None:
        if not name or not name.strip():
            raise ValueError("Account name cannot be empty")
        if len(name.strip()) > 100:
            raise ValueError("Account name cannot exceed 100 characters")
        self._name = name.strip()
        self.mark_updated()

    def is_individual(self) -> bool:
        return self._account_type == AccountType.INDIVIDUAL

    def is_root(self) -> bool:
        return self._parent_id is None

    @property
    def name(self) -> str:
        return self._name

    @property
    def account_type(self) -> AccountType:
        return self._account_type

    @property
    def parent_id(self) -> Optional[UUID]:
        return self._parent_id

    @property
    def legacy_domains(self) -> Optional[str]:
        return self._legacy_domains
