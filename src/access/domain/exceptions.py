from __future__ import annotations

"""
Domain-level exception hierarchy for the access context.

These subclass the shared exception classes so they map onto the standard
error contract ({code, message, details}) at the HTTP edge.
"""

from typing import Optional
from uuid import UUID

from shared.exceptions import (
    ConflictError,
    DomainError,
    NotFoundError,
    ServiceUnavailableError,
    ValidationError,
)


class AccessError(DomainError):
    """Base for all exceptions in the access context."""


# ─── Not found ─────────────────────────────────────────────────────────────

class AccountNotFoundError(AccessError, NotFoundError):
    code = "account_not_found"

    def __init__(self, account_id: UUID) -> None:
        super().__init__(f"Account not found: {account_id}", details={"account_id": str(account_id)})
        self.account_id = account_id


class RoleNotFoundError(AccessError, NotFoundError):
    code = "role_not_found"

    def __init__(self, role_id: UUID) -> None:
        super().__init__(f"Role template not found: {role_id}", details={"role_id": str(role_id)})
        self.role_id = role_id


class AssignmentNotFoundError(AccessError, NotFoundError):
    code = "assignment_not_found"

    def __init__(self, assignment_id: UUID) -> None:
        super().__init__(
            f"Role assignment not found: {assignment_id}",
            details={"assignment_id": str(assignment_id)},
        )
        self.assignment_id = assignment_id


class DomainMappingNotFoundError(AccessError, NotFoundError):
    code = "domain_mapping_not_found"

    def __init__(self, mapping_id: UUID) -> None:
        super().__init__(
            f"Domain mapping not found: {mapping_id}",
            details={"mapping_id": str(mapping_id)},
        )
        self.mapping_id = mapping_id


# ─── Validation ────────────────────────────────────────────────────────────

class InvalidPermissionError(AccessError, ValidationError):
    code = "invalid_permission"


class InvalidDomainError(AccessError, ValidationError):
    code = "invalid_domain"

    def __init__(self, domain: str) -> None:
        super().__init__(f"Invalid domain format: {domain!r}", details={"domain": domain})
        self.domain = domain


class DuplicateDomainError(AccessError, ValidationError):
    code = "duplicate_domain"

    def __init__(self, domain: str) -> None:
        super().__init__(f"Domain mapping already exists for {domain}", details={"domain": domain})
        self.domain = domain


class RoleNotAssignableError(AccessError, ValidationError):
    code = "role_not_assignable"


# ─── Rules & availability ──────────────────────────────────────────────────

class RuleViolationError(AccessError, ConflictError):
    """
    HTTP-edge wrapper for a RuleViolation returned by HierarchyGuard.

    The guard itself never raises this; handlers convert a Failure into it
    when they need to unwind a request.
    """

    def __init__(self, violation, *, message: Optional[str] = None) -> None:
        super().__init__(
            message or violation.message,
            code=violation.code.value,
            details={"rule": violation.code.value, **violation.details},
        )
        self.violation = violation


class StoreUnavailableError(AccessError, ServiceUnavailableError):
    code = "store_unavailable"
