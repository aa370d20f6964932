"""
Access Unit of Work Protocol (Interface)
"""
from __future__ import annotations

from typing import Protocol

from shared.infrastructure.database.unit_of_work import IUnitOfWork

from access.domain.protocols.account_repository_protocol import IAccountRepository
from access.domain.protocols.domain_mapping_repository_protocol import IDomainMappingRepository
from access.domain.protocols.membership_repository_protocol import IAccountMembershipRepository
from access.domain.protocols.role_template_repository_protocol import IRoleTemplateRepository
from access.domain.protocols.system_role_assignment_repository_protocol import (
    ISystemRoleAssignmentRepository,
)


class IAccessUnitOfWork(IUnitOfWork, Protocol):
    """Transaction boundary exposing every access repository"""

    accounts: IAccountRepository
    roles: IRoleTemplateRepository
    system_roles: ISystemRoleAssignmentRepository
    memberships: IAccountMembershipRepository
    domain_mappings: IDomainMappingRepository

    async def __aenter__(self) -> "IAccessUnitOfWork":
        ...
