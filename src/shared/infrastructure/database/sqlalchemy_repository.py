"""
SQLAlchemy Implementation of Generic Repository
Concrete async repository using SQLAlchemy 2.x
"""
from __future__ import annotations

from typing import Any, Generic, Sequence, Type, TypeVar
from uuid import UUID

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from shared.domain.base_entity import BaseEntity
from shared.infrastructure.database.base_model import Base
from shared.infrastructure.observability.logger import get_logger

logger = get_logger(__name__)

TEntity = TypeVar("TEntity", bound=BaseEntity)
TModel = TypeVar("TModel", bound=Base)


class SQLAlchemyRepository(Generic[TEntity, TModel]):
    """
    Generic async SQLAlchemy repository implementation.

    Maps domain entities to/from ORM models and provides the CRUD
    operations every repository shares. Subclasses add the queries their
    protocol needs.

    Type Parameters:
        TEntity: Domain entity type
        TModel: SQLAlchemy ORM model type
    """

    def __init__(
        self,
        session: AsyncSession,
        model_class: Type[TModel],
        entity_class: Type[TEntity],
    ) -> None:
        self.session = session
        self.model_class = model_class
        self.entity_class = entity_class

    def _to_entity(self, model: TModel) -> TEntity:
        """Convert ORM model to domain entity."""
        raise NotImplementedError("Subclass must implement _to_entity")

    def _to_model(self, entity: TEntity) -> TModel:
        """Convert domain entity to ORM model."""
        raise NotImplementedError("Subclass must implement _to_model")

    async def add(self, entity: TEntity) -> TEntity:
        """
        Add a new entity to the repository.

        Args:
            entity: Domain entity to persist

        Returns:
            The persisted entity
        """
        try:
            model = self._to_model(entity)
            self.session.add(model)
            await self.session.flush()
            await self.session.refresh(model)
        except Exception as e:
            logger.error(
                f"Failed to add {self.entity_class.__name__}",
                error=str(e),
                entity_id=str(entity.id),
            )
            raise

        logger.debug(f"Added {self.entity_class.__name__}", entity_id=str(entity.id))
        return self._to_entity(model)

    async def get_by_id(self, entity_id: UUID) -> TEntity | None:
        """
        Retrieve entity by its unique identifier.

        Returns:
            Entity if found, None otherwise
        """
        stmt = select(self.model_class).where(self.model_class.id == entity_id)
        result = await self.session.execute(stmt)
        model = result.scalar_one_or_none()

        if model is None:
            logger.debug(
                f"{self.entity_class.__name__} not found",
                entity_id=str(entity_id),
            )
            return None

        return self._to_entity(model)

    async def get_by_ids(self, entity_ids: Sequence[UUID]) -> Sequence[TEntity]:
        """Retrieve multiple entities by their IDs (missing ids are skipped)."""
        if not entity_ids:
            return []
        stmt = select(self.model_class).where(self.model_class.id.in_(list(entity_ids)))
        result = await self.session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars().all()]

    async def find_all(self, order_by: str | None = None, **filters: Any) -> Sequence[TEntity]:
        """
        Find all entities matching equality filters.

        Args:
            order_by: Column name to order by
            **filters: Column filters
        """
        stmt = select(self.model_class)

        for key, value in filters.items():
            if hasattr(self.model_class, key):
                stmt = stmt.where(getattr(self.model_class, key) == value)

        if order_by and hasattr(self.model_class, order_by):
            stmt = stmt.order_by(getattr(self.model_class, order_by))

        result = await self.session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars().all()]

    async def update(self, entity: TEntity) -> TEntity:
        """
        Update an existing entity.

        Args:
            entity: Domain entity with updated values

        Returns:
            The updated entity
        """
        try:
            model = self._to_model(entity)
            merged = await self.session.merge(model)
            await self.session.flush()
            await self.session.refresh(merged)
        except Exception as e:
            logger.error(
                f"Failed to update {self.entity_class.__name__}",
                error=str(e),
                entity_id=str(entity.id),
            )
            raise

        logger.debug(f"Updated {self.entity_class.__name__}", entity_id=str(entity.id))
        return self._to_entity(merged)

    async def delete(self, entity_id: UUID) -> bool:
        """
        Delete entity by ID.

        Returns:
            True if deleted, False if not found
        """
        stmt = delete(self.model_class).where(self.model_class.id == entity_id)
        result = await self.session.execute(stmt)
        await self.session.flush()

        deleted = result.rowcount > 0
        if deleted:
            logger.debug(f"Deleted {self.entity_class.__name__}", entity_id=str(entity_id))
        return deleted

    async def count(self, **filters: Any) -> int:
        """Count entities matching equality filters."""
        stmt = select(func.count()).select_from(self.model_class)

        for key, value in filters.items():
            if hasattr(self.model_class, key):
                stmt = stmt.where(getattr(self.model_class, key) == value)

        result = await self.session.execute(stmt)
        return result.scalar_one()

    async def exists(self, entity_id: UUID) -> bool:
        """Check if entity exists by ID."""
        stmt = select(func.count()).select_from(self.model_class).where(
            self.model_class.id == entity_id
        )
        result = await self.session.execute(stmt)
        return result.scalar_one() > 0
