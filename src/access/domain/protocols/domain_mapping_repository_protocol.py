"""
Domain Mapping Repository Protocols (Interface)
"""
from __future__ import annotations

from typing import Optional, Protocol, Sequence
from uuid import UUID

from access.domain.entities.domain_mapping import DomainMapping


class IDomainMappingSource(Protocol):
    """What the resolver needs: a snapshot of the active mappings"""

    async def list_active(self) -> Sequence[DomainMapping]:
        """Active mappings ordered by (priority desc, domain asc)"""
        ...


class IDomainMappingRepository(IDomainMappingSource, Protocol):
    """Domain mapping interface"""

    async def add(self, mapping: DomainMapping) -> DomainMapping:
        ...

    async def get_by_id(self, mapping_id: UUID) -> Optional[DomainMapping]:
        ...

    async def get_by_domain(self, domain: str) -> Optional[DomainMapping]:
        """Case-insensitive lookup"""
        ...

    async def list_all(self) -> Sequence[DomainMapping]:
        ...

    async def account_ids_with_mappings(self) -> set[UUID]:
        ...

    async def update(self, mapping: DomainMapping) -> DomainMapping:
        ...

    async def delete(self, mapping_id: UUID) -> bool:
        ...
