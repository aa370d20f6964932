from access.domain.protocols.account_repository_protocol import IAccountRepository
from access.domain.protocols.domain_mapping_repository_protocol import (
    IDomainMappingRepository,
    IDomainMappingSource,
)
from access.domain.protocols.membership_repository_protocol import IAccountMembershipRepository
from access.domain.protocols.role_template_repository_protocol import IRoleTemplateRepository
from access.domain.protocols.system_role_assignment_repository_protocol import (
    ISystemRoleAssignmentRepository,
)
from access.domain.protocols.unit_of_work_protocol import IAccessUnitOfWork

__all__ = [
    "IAccessUnitOfWork",
    "IAccountRepository",
    "IAccountMembershipRepository",
    "IDomainMappingRepository",
    "IDomainMappingSource",
    "IRoleTemplateRepository",
    "ISystemRoleAssignmentRepository",
]
