from access.domain.entities.account import Account, AccountType
from access.domain.entities.account_membership import AccountMembership, MembershipRole
from access.domain.entities.domain_mapping import DomainMapping
from access.domain.entities.role_template import RoleTemplate
from access.domain.entities.system_role_assignment import SystemRoleAssignment

__all__ = [
    "Account",
    "AccountType",
    "AccountMembership",
    "MembershipRole",
    "DomainMapping",
    "RoleTemplate",
    "SystemRoleAssignment",
]
