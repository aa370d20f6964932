"""
Role Template Repository Protocol (Interface)
"""
from __future__ import annotations

from typing import Optional, Protocol, Sequence
from uuid import UUID

from access.domain.entities.role_template import RoleTemplate


class IRoleTemplateRepository(Protocol):
    """Read-side role template interface"""

    async def get_by_id(self, role_id: UUID) -> Optional[RoleTemplate]:
        ...

    async def get_by_ids(self, role_ids: Sequence[UUID]) -> Sequence[RoleTemplate]:
        """Templates for the given ids; unknown ids are skipped"""
        ...

    async def get_by_name(self, name: str) -> Optional[RoleTemplate]:
        ...

    async def list_grants_all(self) -> Sequence[RoleTemplate]:
        ...
