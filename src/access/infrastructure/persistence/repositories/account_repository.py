"""
Account Repository Implementation
"""
from __future__ import annotations

from typing import Sequence
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from shared.infrastructure.database.sqlalchemy_repository import SQLAlchemyRepository

from access.domain.entities.account import Account, AccountType
from access.infrastructure.persistence.models.account_model import AccountModel


class AccountRepository(SQLAlchemyRepository[Account, AccountModel]):
    """Account persistence. Accounts are only read and re-parented here."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(
            session=session,
            model_class=AccountModel,
            entity_class=Account,
        )

    def _to_entity(self, model: AccountModel) -> Account:
        return Account(
            id=model.id,
            name=model.name,
            account_type=AccountType(model.account_type),
            parent_id=model.parent_id,
            legacy_domains=model.legacy_domains,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    def _to_model(self, entity: Account) -> AccountModel:
        return AccountModel(
            id=entity.id,
            name=entity.name,
            account_type=entity.account_type.value,
            parent_id=entity.parent_id,
            legacy_domains=entity.legacy_domains,
            created_at=entity.created_at,
            updated_at=entity.updated_at,
        )

    async def list_all(self, *, for_update: bool = False) -> Sequence[Account]:
        """
        Every account; the snapshot an AccountTree is built from.

        With for_update the rows stay locked until the transaction ends, so two
        concurrent moves cannot both validate against the same stale tree.
        """
        stmt = select(AccountModel)
        if for_update:
            stmt = stmt.with_for_update().execution_options(populate_existing=True)
        result = await self.session.execute(stmt)
        return [self._to_entity(m) for m in result.scalars().all()]

    async def list_children(self, parent_id: UUID) -> Sequence[Account]:
        stmt = select(AccountModel).where(AccountModel.parent_id == parent_id).order_by(AccountModel.name)
        result = await self.session.execute(stmt)
        return [self._to_entity(m) for m in result.scalars().all()]

    async def find_with_legacy_domains(self) -> Sequence[Account]:
        stmt = (
            select(AccountModel)
            .where(AccountModel.legacy_domains.is_not(None))
            .where(AccountModel.legacy_domains != "")
            .order_by(AccountModel.name)
        )
        result = await self.session.execute(stmt)
        return [self._to_entity(m) for m in result.scalars().all()]
