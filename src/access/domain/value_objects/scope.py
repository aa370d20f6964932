"""
Permission scope and principal kinds
"""
from __future__ import annotations

from enum import Enum


class PermissionScope(str, Enum):
    """
    Breadth of a grant.

    OWN, ACCOUNT and SUBSIDIARY are held by membership roles; NONE only
    appears in denied decisions. Callers turn the scope of a decision into
    a query filter:

    - OWN: rows the user created or is assigned to
    - ACCOUNT: rows where account_id == target account
    - SUBSIDIARY: rows where account_id is in the target's subtree
    """

    OWN = "own"
    ACCOUNT = "account"
    SUBSIDIARY = "subsidiary"
    NONE = "none"

    @classmethod
    def assignable(cls) -> tuple["PermissionScope", ...]:
        return (cls.OWN, cls.ACCOUNT, cls.SUBSIDIARY)


class PrincipalKind(str, Enum):
    """Who a role template may be assigned to."""

    SYSTEM = "system"
    ACCOUNT = "account"


class RoleApplicability(str, Enum):
    SYSTEM = "system"
    ACCOUNT = "account"
    BOTH = "both"

    def allows(self, kind: PrincipalKind) -> bool:
        return self is RoleApplicability.BOTH or self.value == kind.value
