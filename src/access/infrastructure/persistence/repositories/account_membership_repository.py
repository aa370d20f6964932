"""
AccountMembership Repository Implementation
"""
from __future__ import annotations

from typing import Optional, Sequence
from uuid import UUID, uuid4

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from shared.infrastructure.database.sqlalchemy_repository import SQLAlchemyRepository
from shared.infrastructure.observability.logger import get_logger

from access.domain.entities.account_membership import AccountMembership, MembershipRole
from access.domain.value_objects.scope import PermissionScope
from access.infrastructure.persistence.models.account_membership_model import (
    AccountMembershipModel,
    MembershipRoleModel,
)

logger = get_logger(__name__)


class AccountMembershipRepository(SQLAlchemyRepository[AccountMembership, AccountMembershipModel]):
    """
    Membership persistence.

    Roles live in membership_roles and are loaded eagerly with their
    membership; `position` preserves the order they were assigned in.
    """

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(
            session=session,
            model_class=AccountMembershipModel,
            entity_class=AccountMembership,
        )

    def _to_entity(self, model: AccountMembershipModel) -> AccountMembership:
        return AccountMembership(
            id=model.id,
            user_id=model.user_id,
            account_id=model.account_id,
            roles=[
                MembershipRole(role_id=r.role_id, scope=PermissionScope(r.scope))
                for r in sorted(model.roles, key=lambda r: r.position)
            ],
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    def _to_model(self, entity: AccountMembership) -> AccountMembershipModel:
        return AccountMembershipModel(
            id=entity.id,
            user_id=entity.user_id,
            account_id=entity.account_id,
            roles=[
                MembershipRoleModel(id=uuid4(), role_id=r.role_id, scope=r.scope.value, position=i)
                for i, r in enumerate(entity.roles)
            ],
            created_at=entity.created_at,
            updated_at=entity.updated_at,
        )

    async def add(self, entity: AccountMembership) -> AccountMembership:
        self.session.add(self._to_model(entity))
        await self.session.flush()
        logger.debug("Added AccountMembership", entity_id=str(entity.id))
        return entity

    async def update(self, entity: AccountMembership) -> AccountMembership:
        """Sync the stored roles with the entity's, keeping existing rows where possible."""
        stmt = select(AccountMembershipModel).where(AccountMembershipModel.id == entity.id)
        model = (await self.session.execute(stmt)).scalar_one()

        existing = {r.role_id: r for r in model.roles}
        synced: list[MembershipRoleModel] = []
        for position, role in enumerate(entity.roles):
            row = existing.get(role.role_id)
            if row is None:
                row = MembershipRoleModel(id=uuid4(), role_id=role.role_id)
            row.scope = role.scope.value
            row.position = position
            synced.append(row)

        model.roles = synced
        model.updated_at = entity.updated_at
        await self.session.flush()
        logger.debug("Updated AccountMembership", entity_id=str(entity.id), roles=len(synced))
        return entity

    async def find_by_user(self, user_id: UUID) -> Sequence[AccountMembership]:
        stmt = (
            select(AccountMembershipModel)
            .where(AccountMembershipModel.user_id == user_id)
            .order_by(AccountMembershipModel.created_at)
        )
        result = await self.session.execute(stmt)
        return [self._to_entity(m) for m in result.scalars().all()]

    async def get_for_user_and_account(self, user_id: UUID, account_id: UUID) -> Optional[AccountMembership]:
        stmt = select(AccountMembershipModel).where(
            AccountMembershipModel.user_id == user_id,
            AccountMembershipModel.account_id == account_id,
        )
        model = (await self.session.execute(stmt)).scalar_one_or_none()
        return self._to_entity(model) if model else None
