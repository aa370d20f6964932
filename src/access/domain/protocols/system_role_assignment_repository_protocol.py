"""
System Role Assignment Repository Protocol (Interface)
"""
from __future__ import annotations

from typing import Optional, Protocol, Sequence
from uuid import UUID

from access.domain.entities.system_role_assignment import SystemRoleAssignment


class ISystemRoleAssignmentRepository(Protocol):
    """System role assignment interface"""

    async def add(self, assignment: SystemRoleAssignment) -> SystemRoleAssignment:
        ...

    async def get_by_id(self, assignment_id: UUID) -> Optional[SystemRoleAssignment]:
        ...

    async def find_by_user(self, user_id: UUID) -> Sequence[SystemRoleAssignment]:
        ...

    async def count_grants_all(self, *, for_update: bool = False) -> int:
        """Number of assignments whose template has grants_all. for_update locks the counted rows."""
        ...

    async def delete(self, assignment_id: UUID) -> bool:
        ...
