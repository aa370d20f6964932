"""
RoleTemplate Repository Implementation
"""
from __future__ import annotations

from typing import Optional, Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from shared.infrastructure.database.sqlalchemy_repository import SQLAlchemyRepository

from access.domain.entities.role_template import RoleTemplate
from access.domain.value_objects.permission import Permission
from access.domain.value_objects.scope import RoleApplicability
from access.infrastructure.persistence.models.role_template_model import RoleTemplateModel


class RoleTemplateRepository(SQLAlchemyRepository[RoleTemplate, RoleTemplateModel]):
    """Role template persistence; permission strings are parsed on load."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(
            session=session,
            model_class=RoleTemplateModel,
            entity_class=RoleTemplate,
        )

    def _to_entity(self, model: RoleTemplateModel) -> RoleTemplate:
        return RoleTemplate(
            id=model.id,
            name=model.name,
            permissions={Permission.parse(p) for p in model.permissions or []},
            grants_all=model.grants_all,
            applicable_to=RoleApplicability(model.applicable_to),
            description=model.description,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    def _to_model(self, entity: RoleTemplate) -> RoleTemplateModel:
        return RoleTemplateModel(
            id=entity.id,
            name=entity.name,
            description=entity.description,
            permissions=sorted(p.value for p in entity.permissions),
            grants_all=entity.grants_all,
            applicable_to=entity.applicable_to.value,
            created_at=entity.created_at,
            updated_at=entity.updated_at,
        )

    async def get_by_name(self, name: str) -> Optional[RoleTemplate]:
        stmt = select(RoleTemplateModel).where(RoleTemplateModel.name == name)
        result = await self.session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def list_grants_all(self) -> Sequence[RoleTemplate]:
        stmt = select(RoleTemplateModel).where(RoleTemplateModel.grants_all.is_(True))
        result = await self.session.execute(stmt)
        return [self._to_entity(m) for m in result.scalars().all()]
