from access.infrastructure.persistence.repositories.account_membership_repository import (
    AccountMembershipRepository,
)
from access.infrastructure.persistence.repositories.account_repository import AccountRepository
from access.infrastructure.persistence.repositories.domain_mapping_repository import (
    DomainMappingRepository,
    SessionDomainMappingSource,
)
from access.infrastructure.persistence.repositories.role_template_repository import RoleTemplateRepository
from access.infrastructure.persistence.repositories.system_role_assignment_repository import (
    SystemRoleAssignmentRepository,
)

__all__ = [
    "AccountMembershipRepository",
    "AccountRepository",
    "DomainMappingRepository",
    "RoleTemplateRepository",
    "SessionDomainMappingSource",
    "SystemRoleAssignmentRepository",
]
