"""
Remove System Role Command
"""
from __future__ import annotations

from dataclasses import dataclass
from uuid import UUID

from shared.application.base_command import BaseCommand
from shared.application.command_handler import CommandHandler
from shared.domain.result import Failure, Result, Success
from shared.infrastructure.observability.logger import get_logger

from access.domain.exceptions import AssignmentNotFoundError
from access.domain.protocols.unit_of_work_protocol import IAccessUnitOfWork
from access.domain.services.hierarchy_guard import HierarchyGuard
from access.domain.value_objects.rule_violation import RuleViolation

logger = get_logger(__name__)


@dataclass(frozen=True)
class RemoveSystemRoleCommand(BaseCommand):
    assignment_id: UUID


class RemoveSystemRoleCommandHandler(CommandHandler[RemoveSystemRoleCommand, Result[None, RuleViolation]]):
    """Deletes a system role assignment unless it is the last super admin."""

    def __init__(self, uow: IAccessUnitOfWork) -> None:
        self.uow = uow

    async def handle(self, command: RemoveSystemRoleCommand) -> Result[None, RuleViolation]:
        async with self.uow:
            guard = HierarchyGuard(self.uow.accounts, self.uow.system_roles, self.uow.roles)
            result = await guard.validate_role_removal(command.assignment_id)
            if result.is_failure():
                return Failure(result.error)

            if not await self.uow.system_roles.delete(command.assignment_id):
                raise AssignmentNotFoundError(command.assignment_id)
            await self.uow.commit()

        logger.info("System role removed", assignment_id=str(command.assignment_id))
        return Success(None)
