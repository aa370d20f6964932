"""
Permission Value Object
"""
from __future__ import annotations

import re
from typing import Final

from shared.domain.base_value_object import BaseValueObject

from access.domain.exceptions import InvalidPermissionError


# Each half of 'resource:action' (e.g. 'tickets:view', 'time-entries:approve')
PERMISSION_PART_REGEX: Final = re.compile(r"^[a-z][a-z0-9_-]*$")

WILDCARD: Final = "*"


class Permission(BaseValueObject):
    """
    Permission value object: a (resource, action) pair compared by value.

    Administrators author permissions as 'resource:action' strings; they are
    parsed once at the edge with `Permission.parse` so the engine never
    matches raw strings.

    Examples:
        - tickets:view
        - time-entries:approve
        - billing:update
        - tickets:*  (every action on tickets)
        - *:*        (everything)
    """

    def __init__(self, resource: str, action: str) -> None:
        resource = resource.strip().lower()
        action = action.strip().lower()

        if resource == WILDCARD and action != WILDCARD:
            raise InvalidPermissionError(
                f"Invalid permission '{resource}:{action}': a wildcard resource needs a wildcard action"
            )

        for part in (resource, action):
            if part != WILDCARD and not PERMISSION_PART_REGEX.match(part):
                raise InvalidPermissionError(
                    f"Invalid permission '{resource}:{action}': resource and action must be "
                    "lowercase words (letters, digits, '-' or '_')"
                )

        self._resource = resource
        self._action = action
        self._finalize_init()

    @classmethod
    def parse(cls, value: str) -> Permission:
        """Parse an authored 'resource:action' string."""
        resource, sep, action = value.partition(":")
        if not sep:
            raise InvalidPermissionError(f"Invalid permission '{value}': expected 'resource:action'")
        return cls(resource, action)

    def wildcards(self) -> tuple[Permission, Permission]:
        """Grants that also cover this permission: 'resource:*' and '*:*'."""
        return Permission(self._resource, WILDCARD), Permission(WILDCARD, WILDCARD)

    @property
    def resource(self) -> str:
        return self._resource

    @property
    def action(self) -> str:
        return self._action

    @property
    def value(self) -> str:
        return f"{self._resource}:{self._action}"

    def __str__(self) -> str:
        return self.value

    def _get_equality_components(self) -> tuple:
        return (self._resource, self._action)
