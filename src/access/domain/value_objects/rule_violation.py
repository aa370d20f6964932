"""
Hierarchy rule violations
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ViolationCode(str, Enum):
    SELF_PARENT = "self_parent"
    CYCLE = "cycle"
    SUBSIDIARY_REQUIRES_PARENT = "subsidiary_requires_parent"
    INCOMPATIBLE_PARENT_TYPE = "incompatible_parent_type"
    INCOMPATIBLE_CHILD_TYPE = "incompatible_child_type"
    LAST_SUPER_ADMIN = "last_super_admin"


@dataclass(frozen=True)
class RuleViolation:
    """
    A rejected mutation: machine-readable code plus a message that is
    safe to show to an end user.
    """

    code: ViolationCode
    message: str
    details: dict[str, Any] = field(default_factory=dict, compare=False)

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"
