"""
DomainMapping Repository Implementation
"""
from __future__ import annotations

from typing import Optional, Sequence
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from shared.infrastructure.database.sqlalchemy_repository import SQLAlchemyRepository

from access.domain.entities.domain_mapping import DomainMapping
from access.infrastructure.persistence.models.domain_mapping_model import DomainMappingModel


class DomainMappingRepository(SQLAlchemyRepository[DomainMapping, DomainMappingModel]):
    def __init__(self, session: AsyncSession) -> None:
        super().__init__(
            session=session,
            model_class=DomainMappingModel,
            entity_class=DomainMapping,
        )

    def _to_entity(self, model: DomainMappingModel) -> DomainMapping:
        return DomainMapping(
            id=model.id,
            domain=model.domain,
            account_id=model.account_id,
            priority=model.priority,
            is_active=model.is_active,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    def _to_model(self, entity: DomainMapping) -> DomainMappingModel:
        return DomainMappingModel(
            id=entity.id,
            domain=entity.domain.lower(),
            account_id=entity.account_id,
            priority=entity.priority,
            is_active=entity.is_active,
            created_at=entity.created_at,
            updated_at=entity.updated_at,
        )

    async def list_active(self) -> Sequence[DomainMapping]:
        """Active mappings ordered by priority desc, then domain asc."""
        stmt = (
            select(DomainMappingModel)
            .where(DomainMappingModel.is_active.is_(True))
            .order_by(DomainMappingModel.priority.desc(), DomainMappingModel.domain.asc())
        )
        result = await self.session.execute(stmt)
        return [self._to_entity(m) for m in result.scalars().all()]

    async def list_all(self) -> Sequence[DomainMapping]:
        stmt = select(DomainMappingModel).order_by(
            DomainMappingModel.priority.desc(), DomainMappingModel.domain.asc()
        )
        result = await self.session.execute(stmt)
        return [self._to_entity(m) for m in result.scalars().all()]

    async def get_by_domain(self, domain: str) -> Optional[DomainMapping]:
        stmt = select(DomainMappingModel).where(func.lower(DomainMappingModel.domain) == domain.lower())
        result = await self.session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def account_ids_with_mappings(self) -> set[UUID]:
        result = await self.session.execute(select(DomainMappingModel.account_id).distinct())
        return set(result.scalars().all())


class SessionDomainMappingSource:
    """
    Mapping source for the long-lived DomainResolver.

    Each load opens its own short session so the resolver never holds on to
    a request's session.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def list_active(self) -> Sequence[DomainMapping]:
        async with self._session_factory() as session:
            return await DomainMappingRepository(session).list_active()
