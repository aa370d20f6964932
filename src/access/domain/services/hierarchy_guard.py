"""
HierarchyGuard - validates account-tree mutations and role removals
"""
from __future__ import annotations

from typing import Optional
from uuid import UUID

from shared.domain.result import Failure, Result, Success
from shared.infrastructure.observability.logger import get_logger

from access.domain.entities.account import AccountType
from access.domain.exceptions import AssignmentNotFoundError, RoleNotFoundError
from access.domain.protocols.account_repository_protocol import IAccountRepository
from access.domain.protocols.role_template_repository_protocol import IRoleTemplateRepository
from access.domain.protocols.system_role_assignment_repository_protocol import (
    ISystemRoleAssignmentRepository,
)
from access.domain.services.account_tree import AccountTree
from access.domain.value_objects.rule_violation import RuleViolation, ViolationCode

logger = get_logger(__name__)


def check_reparent(
    tree: AccountTree,
    account_id: UUID,
    new_parent_id: Optional[UUID],
    new_type: Optional[AccountType] = None,
) -> Result[None, RuleViolation]:
    """
    Apply the reparent rules, in order, against one tree snapshot.

    1. an account cannot be its own parent
    2. the new parent cannot be a descendant of the account
    3. an effective SUBSIDIARY needs a parent, and that parent is not INDIVIDUAL
    4. an account becoming INDIVIDUAL cannot keep ORGANIZATION/SUBSIDIARY children

    The first failing rule is returned.

    Raises:
        AccountNotFoundError: If the account or the proposed parent is unknown
    """
    account = tree.get(account_id)
    details = {"account_id": str(account_id)}
    if new_parent_id is not None:
        details["new_parent_id"] = str(new_parent_id)

    if new_parent_id is not None and new_parent_id == account_id:
        return Failure(RuleViolation(
            ViolationCode.SELF_PARENT,
            "Account cannot be its own parent",
            details,
        ))

    parent = tree.get(new_parent_id) if new_parent_id is not None else None

    if parent is not None and tree.is_descendant_of(parent.id, account_id):
        return Failure(RuleViolation(
            ViolationCode.CYCLE,
            "This would create a circular reference in the account hierarchy",
            details,
        ))

    effective_type = AccountType(new_type) if new_type is not None else account.account_type

    if effective_type == AccountType.SUBSIDIARY:
        if parent is None:
            return Failure(RuleViolation(
                ViolationCode.SUBSIDIARY_REQUIRES_PARENT,
                "Subsidiary accounts must have a parent account",
                details,
            ))
        if not tree.type_compatible(effective_type, parent.account_type):
            return Failure(RuleViolation(
                ViolationCode.INCOMPATIBLE_PARENT_TYPE,
                "Subsidiary accounts cannot have Individual accounts as parents",
                details,
            ))

    if new_type == AccountType.INDIVIDUAL and not tree.children_compatible(account_id, new_type):
        return Failure(RuleViolation(
            ViolationCode.INCOMPATIBLE_CHILD_TYPE,
            "Individual accounts cannot have Organization or Subsidiary child accounts",
            details,
        ))

    return Success(None)


class HierarchyGuard:
    """
    Gatekeeper for account parent/type changes and system-role removal.

    Pure validation: nothing is written here. Callers run validate-then-write
    inside one unit of work and are already authorized to make the change.
    """

    def __init__(
        self,
        accounts: IAccountRepository,
        assignments: ISystemRoleAssignmentRepository,
        roles: IRoleTemplateRepository,
    ) -> None:
        self._accounts = accounts
        self._assignments = assignments
        self._roles = roles

    async def validate_reparent(
        self,
        account_id: UUID,
        new_parent_id: Optional[UUID],
        new_type: Optional[AccountType] = None,
        *,
        tree: Optional[AccountTree] = None,
    ) -> Result[None, RuleViolation]:
        """
        Validate moving `account_id` under `new_parent_id` (None = make root),
        optionally changing its type.

        Args:
            tree: Snapshot to validate against; loaded from the store if omitted

        Returns:
            Success(None) or Failure(RuleViolation) naming the first rule that fired
        """
        if tree is None:
            tree = await AccountTree.load(self._accounts)

        result = check_reparent(tree, account_id, new_parent_id, new_type)
        if result.is_failure():
            logger.warning(
                "Reparent rejected",
                rule=result.error.code.value,
                account_id=str(account_id),
                new_parent_id=str(new_parent_id) if new_parent_id else None,
            )
        return result

    async def validate_role_removal(self, assignment_id: UUID) -> Result[None, RuleViolation]:
        """
        Refuse to remove the last system assignment of a grants-all template.

        Raises:
            AssignmentNotFoundError: If the assignment does not exist
            RoleNotFoundError: If its template does not exist
        """
        assignment = await self._assignments.get_by_id(assignment_id)
        if assignment is None:
            raise AssignmentNotFoundError(assignment_id)

        role = await self._roles.get_by_id(assignment.role_id)
        if role is None:
            raise RoleNotFoundError(assignment.role_id)

        if not role.grants_all:
            return Success(None)

        remaining = await self._assignments.count_grants_all(for_update=True)
        if remaining <= 1:
            logger.warning(
                "Role removal rejected",
                rule=ViolationCode.LAST_SUPER_ADMIN.value,
                assignment_id=str(assignment_id),
            )
            return Failure(RuleViolation(
                ViolationCode.LAST_SUPER_ADMIN,
                "Cannot remove the last super admin role assignment",
                {"assignment_id": str(assignment_id), "role": role.name},
            ))

        return Success(None)
