"""
Reparent Account Command
Moves an account in the hierarchy, optionally changing its type and name
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional
from uuid import UUID

from shared.application.base_command import BaseCommand
from shared.application.command_handler import CommandHandler
from shared.domain.result import Failure, Result, Success
from shared.exceptions import ValidationError
from shared.infrastructure.observability.logger import get_logger

from access.domain.entities.account import Account, AccountType
from access.domain.protocols.unit_of_work_protocol import IAccessUnitOfWork
from access.domain.services.account_tree import AccountTree
from access.domain.services.hierarchy_guard import HierarchyGuard
from access.domain.value_objects.rule_violation import RuleViolation

logger = get_logger(__name__)


@dataclass(frozen=True)
class ReparentAccountCommand(BaseCommand):
    account_id: UUID
    new_parent_id: Optional[UUID]
    new_type: Optional[AccountType] = None
    name: Optional[str] = None


class ReparentAccountCommandHandler(CommandHandler[ReparentAccountCommand, Result[Account, RuleViolation]]):
    """
    Validates the move with HierarchyGuard and writes it only if every rule
    passes. Validation and the write share one unit of work.
    """

    def __init__(self, uow: IAccessUnitOfWork) -> None:
        self.uow = uow

    async def handle(self, command: ReparentAccountCommand) -> Result[Account, RuleViolation]:
        async with self.uow:
            tree = await AccountTree.load(self.uow.accounts, for_update=True)
            guard = HierarchyGuard(self.uow.accounts, self.uow.system_roles, self.uow.roles)

            result = await guard.validate_reparent(
                command.account_id,
                command.new_parent_id,
                command.new_type,
                tree=tree,
            )
            if result.is_failure():
                return Failure(result.error)

            account = tree.get(command.account_id)
            account.reparent(command.new_parent_id, command.new_type)
            if command.name is not None:
                try:
                    account.rename(command.name)
                except ValueError as e:
                    raise ValidationError(str(e), details={"field": "name"}) from e

            updated = await self.uow.accounts.update(account)
            await self.uow.commit()

        logger.info(
            "Account reparented",
            account_id=str(command.account_id),
            parent_id=str(command.new_parent_id) if command.new_parent_id else None,
            account_type=updated.account_type.value,
            issued_by=str(command.issued_by) if command.issued_by else None,
        )
        return Success(updated)
