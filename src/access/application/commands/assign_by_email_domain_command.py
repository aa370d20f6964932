"""
Assign By Email Domain Command
Places a user in the account that owns their email domain
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional
from uuid import UUID, uuid4

from shared.application.base_command import BaseCommand
from shared.application.command_handler import CommandHandler
from shared.infrastructure.observability.logger import get_logger

from access.application.commands.assign_membership_role_command import grant_membership_role
from access.application.services.domain_resolver import DomainResolver
from access.domain.entities.account_membership import AccountMembership
from access.domain.protocols.unit_of_work_protocol import IAccessUnitOfWork
from access.domain.value_objects.resolution import Resolution
from access.domain.value_objects.scope import PermissionScope

logger = get_logger(__name__)


@dataclass(frozen=True)
class AssignByEmailDomainCommand(BaseCommand):
    user_id: UUID
    email: str
    default_role_id: Optional[UUID] = None
    scope: PermissionScope = PermissionScope.ACCOUNT


@dataclass(frozen=True)
class DomainAssignmentResult:
    assigned: bool
    resolution: Optional[Resolution] = None
    membership: Optional[AccountMembership] = None

    @property
    def account_id(self) -> Optional[UUID]:
        return self.resolution.account_id if self.resolution else None


class AssignByEmailDomainCommandHandler(CommandHandler[AssignByEmailDomainCommand, DomainAssignmentResult]):
    """
    Resolves the user's email domain and, on a match, gives them a membership
    at the resolved account. Without a default role the membership is created
    with no roles; an existing membership is left as it is.
    """

    def __init__(self, uow: IAccessUnitOfWork, resolver: DomainResolver) -> None:
        self.uow = uow
        self._resolver = resolver

    async def handle(self, command: AssignByEmailDomainCommand) -> DomainAssignmentResult:
        resolution = await self._resolver.resolve(command.email)
        if resolution is None:
            logger.info("No account owns email domain", user_id=str(command.user_id))
            return DomainAssignmentResult(assigned=False)

        async with self.uow:
            if command.default_role_id is not None:
                membership = await grant_membership_role(
                    self.uow,
                    command.user_id,
                    resolution.account_id,
                    command.default_role_id,
                    PermissionScope(command.scope),
                )
            else:
                membership = await self.uow.memberships.get_for_user_and_account(
                    command.user_id, resolution.account_id
                )
                if membership is None:
                    membership = await self.uow.memberships.add(AccountMembership(
                        id=uuid4(), user_id=command.user_id, account_id=resolution.account_id
                    ))
            await self.uow.commit()

        logger.info(
            "User assigned by email domain",
            user_id=str(command.user_id),
            account_id=str(resolution.account_id),
            domain=resolution.domain,
            exact_match=resolution.exact_match,
        )
        return DomainAssignmentResult(assigned=True, resolution=resolution, membership=membership)
