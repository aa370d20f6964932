from access.application.commands.assign_by_email_domain_command import (
    AssignByEmailDomainCommand,
    AssignByEmailDomainCommandHandler,
    DomainAssignmentResult,
)
from access.application.commands.assign_membership_role_command import (
    AssignMembershipRoleCommand,
    AssignMembershipRoleCommandHandler,
)
from access.application.commands.assign_system_role_command import (
    AssignSystemRoleCommand,
    AssignSystemRoleCommandHandler,
)
from access.application.commands.remove_system_role_command import (
    RemoveSystemRoleCommand,
    RemoveSystemRoleCommandHandler,
)
from access.application.commands.reparent_account_command import (
    ReparentAccountCommand,
    ReparentAccountCommandHandler,
)

__all__ = [
    "AssignByEmailDomainCommand",
    "AssignByEmailDomainCommandHandler",
    "AssignMembershipRoleCommand",
    "AssignMembershipRoleCommandHandler",
    "AssignSystemRoleCommand",
    "AssignSystemRoleCommandHandler",
    "DomainAssignmentResult",
    "RemoveSystemRoleCommand",
    "RemoveSystemRoleCommandHandler",
    "ReparentAccountCommand",
    "ReparentAccountCommandHandler",
]
