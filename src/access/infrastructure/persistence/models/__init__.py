"""
Access ORM models.

Importing this package registers every table on the shared declarative Base.
"""
from access.infrastructure.persistence.models.account_membership_model import (
    AccountMembershipModel,
    MembershipRoleModel,
)
from access.infrastructure.persistence.models.account_model import AccountModel
from access.infrastructure.persistence.models.domain_mapping_model import DomainMappingModel
from access.infrastructure.persistence.models.role_template_model import RoleTemplateModel
from access.infrastructure.persistence.models.system_role_assignment_model import (
    SystemRoleAssignmentModel,
)

__all__ = [
    "AccountMembershipModel",
    "AccountModel",
    "DomainMappingModel",
    "MembershipRoleModel",
    "RoleTemplateModel",
    "SystemRoleAssignmentModel",
]
