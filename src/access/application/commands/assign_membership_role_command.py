"""
Assign Membership Role Command
Grants a role at one account, creating the membership when needed
"""
from __future__ import annotations

from dataclasses import dataclass
from uuid import UUID, uuid4

from shared.application.base_command import BaseCommand
from shared.application.command_handler import CommandHandler
from shared.exceptions import ValidationError
from shared.infrastructure.observability.logger import get_logger

from access.domain.entities.account_membership import AccountMembership
from access.domain.exceptions import AccountNotFoundError, RoleNotAssignableError, RoleNotFoundError
from access.domain.protocols.unit_of_work_protocol import IAccessUnitOfWork
from access.domain.value_objects.scope import PermissionScope, PrincipalKind

logger = get_logger(__name__)


@dataclass(frozen=True)
class AssignMembershipRoleCommand(BaseCommand):
    user_id: UUID
    account_id: UUID
    role_id: UUID
    scope: PermissionScope = PermissionScope.ACCOUNT


async def grant_membership_role(
    uow: IAccessUnitOfWork,
    user_id: UUID,
    account_id: UUID,
    role_id: UUID,
    scope: PermissionScope,
) -> AccountMembership:
    """
    Add (or re-scope) a role in the user's membership at an account.

    Must run inside an open unit of work; the caller commits.
    """
    if await uow.accounts.get_by_id(account_id) is None:
        raise AccountNotFoundError(account_id)

    role = await uow.roles.get_by_id(role_id)
    if role is None:
        raise RoleNotFoundError(role_id)
    if not role.assignable_to(PrincipalKind.ACCOUNT):
        raise RoleNotAssignableError(
            f"Role '{role.name}' cannot be assigned at an account",
            details={"role_id": str(role.id), "applicable_to": role.applicable_to.value},
        )

    membership = await uow.memberships.get_for_user_and_account(user_id, account_id)
    if membership is None:
        membership = AccountMembership(id=uuid4(), user_id=user_id, account_id=account_id)
        membership.assign_role(role_id, scope)
        return await uow.memberships.add(membership)

    membership.assign_role(role_id, scope)
    return await uow.memberships.update(membership)


class AssignMembershipRoleCommandHandler(CommandHandler[AssignMembershipRoleCommand, AccountMembership]):
    def __init__(self, uow: IAccessUnitOfWork) -> None:
        self.uow = uow

    async def handle(self, command: AssignMembershipRoleCommand) -> AccountMembership:
        scope = PermissionScope(command.scope)
        if scope not in PermissionScope.assignable():
            raise ValidationError(
                f"Scope '{scope.value}' cannot be assigned",
                details={"scope": scope.value},
            )

        async with self.uow:
            membership = await grant_membership_role(
                self.uow, command.user_id, command.account_id, command.role_id, scope
            )
            await self.uow.commit()

        logger.info(
            "Membership role assigned",
            user_id=str(command.user_id),
            account_id=str(command.account_id),
            role_id=str(command.role_id),
            scope=scope.value,
        )
        return membership
