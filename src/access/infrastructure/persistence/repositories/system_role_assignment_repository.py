"""
SystemRoleAssignment Repository Implementation
"""
from __future__ import annotations

from typing import Sequence
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from shared.infrastructure.database.sqlalchemy_repository import SQLAlchemyRepository

from access.domain.entities.system_role_assignment import SystemRoleAssignment
from access.infrastructure.persistence.models.role_template_model import RoleTemplateModel
from access.infrastructure.persistence.models.system_role_assignment_model import (
    SystemRoleAssignmentModel,
)


class SystemRoleAssignmentRepository(SQLAlchemyRepository[SystemRoleAssignment, SystemRoleAssignmentModel]):
    def __init__(self, session: AsyncSession) -> None:
        super().__init__(
            session=session,
            model_class=SystemRoleAssignmentModel,
            entity_class=SystemRoleAssignment,
        )

    def _to_entity(self, model: SystemRoleAssignmentModel) -> SystemRoleAssignment:
        return SystemRoleAssignment(
            id=model.id,
            user_id=model.user_id,
            role_id=model.role_id,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    def _to_model(self, entity: SystemRoleAssignment) -> SystemRoleAssignmentModel:
        return SystemRoleAssignmentModel(
            id=entity.id,
            user_id=entity.user_id,
            role_id=entity.role_id,
            created_at=entity.created_at,
            updated_at=entity.updated_at,
        )

    async def find_by_user(self, user_id: UUID) -> Sequence[SystemRoleAssignment]:
        stmt = (
            select(SystemRoleAssignmentModel)
            .where(SystemRoleAssignmentModel.user_id == user_id)
            .order_by(SystemRoleAssignmentModel.created_at)
        )
        result = await self.session.execute(stmt)
        return [self._to_entity(m) for m in result.scalars().all()]

    async def count_grants_all(self, *, for_update: bool = False) -> int:
        """
        Number of assignments, across all users, whose template grants all.

        With for_update the counted assignment rows are locked, so two removals
        of different super admins cannot both see a count of two.
        """
        if not for_update:
            stmt = (
                select(func.count())
                .select_from(SystemRoleAssignmentModel)
                .join(RoleTemplateModel, RoleTemplateModel.id == SystemRoleAssignmentModel.role_id)
                .where(RoleTemplateModel.grants_all.is_(True))
            )
            return (await self.session.execute(stmt)).scalar_one()

        # Aggregates cannot be locked; lock the rows and count them here.
        stmt = (
            select(SystemRoleAssignmentModel.id)
            .join(RoleTemplateModel, RoleTemplateModel.id == SystemRoleAssignmentModel.role_id)
            .where(RoleTemplateModel.grants_all.is_(True))
            .with_for_update(of=SystemRoleAssignmentModel)
        )
        return len((await self.session.execute(stmt)).scalars().all())
