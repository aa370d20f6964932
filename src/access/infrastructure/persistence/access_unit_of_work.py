"""
Access Unit of Work
SQLAlchemyUnitOfWork exposing the access repositories on one session
"""
from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession

from shared.infrastructure.database.sqlalchemy_unit_of_work import SQLAlchemyUnitOfWork

from access.infrastructure.persistence.repositories.account_membership_repository import (
    AccountMembershipRepository,
)
from access.infrastructure.persistence.repositories.account_repository import AccountRepository
from access.infrastructure.persistence.repositories.domain_mapping_repository import DomainMappingRepository
from access.infrastructure.persistence.repositories.role_template_repository import RoleTemplateRepository
from access.infrastructure.persistence.repositories.system_role_assignment_repository import (
    SystemRoleAssignmentRepository,
)


class AccessUnitOfWork(SQLAlchemyUnitOfWork):
    """
    Checks that guard a write read with row locks inside the same transaction:
    reparenting loads the account tree FOR UPDATE and removing a system role
    counts the grants-all assignments FOR UPDATE. The locks are released on
    commit or rollback. SQLite ignores FOR UPDATE and serialises writers itself.

    Usage:
        async with AccessUnitOfWork(session) as uow:
            account = await uow.accounts.get_by_id(account_id)
            ...
            await uow.commit()
    """

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)
        self.accounts = AccountRepository(session)
        self.roles = RoleTemplateRepository(session)
        self.system_roles = SystemRoleAssignmentRepository(session)
        self.memberships = AccountMembershipRepository(session)
        self.domain_mappings = DomainMappingRepository(session)

    async def __aenter__(self) -> "AccessUnitOfWork":
        await super().__aenter__()
        return self
