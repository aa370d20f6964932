"""
Assign System Role Command
"""
from __future__ import annotations

from dataclasses import dataclass
from uuid import UUID, uuid4

from shared.application.base_command import BaseCommand
from shared.application.command_handler import CommandHandler
from shared.infrastructure.observability.logger import get_logger

from access.domain.entities.system_role_assignment import SystemRoleAssignment
from access.domain.exceptions import RoleNotAssignableError, RoleNotFoundError
from access.domain.protocols.unit_of_work_protocol import IAccessUnitOfWork
from access.domain.value_objects.scope import PrincipalKind

logger = get_logger(__name__)


@dataclass(frozen=True)
class AssignSystemRoleCommand(BaseCommand):
    user_id: UUID
    role_id: UUID


class AssignSystemRoleCommandHandler(CommandHandler[AssignSystemRoleCommand, SystemRoleAssignment]):
    """
    Grants a system-wide role. Assigning a role the user already holds
    returns the existing assignment.

    Raises:
        RoleNotFoundError: If the template does not exist
        RoleNotAssignableError: If the template is account-only
    """

    def __init__(self, uow: IAccessUnitOfWork) -> None:
        self.uow = uow

    async def handle(self, command: AssignSystemRoleCommand) -> SystemRoleAssignment:
        async with self.uow:
            role = await self.uow.roles.get_by_id(command.role_id)
            if role is None:
                raise RoleNotFoundError(command.role_id)
            if not role.assignable_to(PrincipalKind.SYSTEM):
                raise RoleNotAssignableError(
                    f"Role '{role.name}' cannot be assigned as a system role",
                    details={"role_id": str(role.id), "applicable_to": role.applicable_to.value},
                )

            for existing in await self.uow.system_roles.find_by_user(command.user_id):
                if existing.role_id == command.role_id:
                    return existing

            assignment = await self.uow.system_roles.add(
                SystemRoleAssignment(id=uuid4(), user_id=command.user_id, role_id=command.role_id)
            )
            await self.uow.commit()

        logger.info(
            "System role assigned",
            user_id=str(command.user_id),
            role=role.name,
            grants_all=role.grants_all,
        )
        return assignment
