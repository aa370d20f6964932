"""
Access API Schemas
"""
from __future__ import annotations

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from access.application.services.domain_mapping_service import SkipReason
from access.domain.entities.account import AccountType
from access.domain.value_objects.scope import PermissionScope

MAX_BATCH_CHECKS = 100


# ─── Permissions ────────────────────────────────────────────────────────────

class PermissionCheckRequest(BaseModel):
    """Single check; `permission` is written as 'resource:action'."""
    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)

    user_id: UUID = Field(..., description="Authenticated user")
    permission: str = Field(..., min_length=3, description="e.g. 'tickets:view'")
    target_account_id: Optional[UUID] = Field(default=None, description="Account the action applies to")


class PermissionDecisionResponse(BaseModel):
    model_config = ConfigDict(extra="forbid")

    granted: bool
    scope: PermissionScope


class BatchPermissionCheckRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    checks: list[PermissionCheckRequest] = Field(..., min_length=1, max_length=MAX_BATCH_CHECKS)


class BatchPermissionResult(BaseModel):
    model_config = ConfigDict(extra="forbid")

    user_id: UUID
    permission: str
    target_account_id: Optional[UUID] = None
    granted: bool
    scope: PermissionScope


class BatchPermissionCheckResponse(BaseModel):
    model_config = ConfigDict(extra="forbid")

    results: list[BatchPermissionResult]


class AccessibleAccountsResponse(BaseModel):
    model_config = ConfigDict(extra="forbid")

    user_id: UUID
    account_ids: list[UUID]


# ─── Domain resolution ──────────────────────────────────────────────────────

class ResolutionSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    account_id: UUID
    domain: str = Field(..., description="Registered domain that matched")
    priority: int
    exact_match: bool


class ResolveResponse(BaseModel):
    address: str
    resolution: Optional[ResolutionSchema] = None


class CacheStatsSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    size: int
    expires_in: float
    is_expired: bool


class ResolutionDiagnosticsResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    address: str
    domain: Optional[str] = None
    resolution: Optional[ResolutionSchema] = None
    cache: CacheStatsSchema
    error: Optional[str] = None


# ─── Domain mappings ────────────────────────────────────────────────────────

class DomainMappingCreateRequest(BaseModel):
    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)

    domain: str = Field(..., min_length=1, max_length=253)
    account_id: UUID
    priority: int = Field(default=0)
    is_active: bool = Field(default=True)


class DomainMappingUpdateRequest(BaseModel):
    """Only the fields that are sent are changed."""
    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)

    domain: Optional[str] = Field(default=None, min_length=1, max_length=253)
    account_id: Optional[UUID] = None
    priority: Optional[int] = None
    is_active: Optional[bool] = None


class DomainMappingResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    domain: str
    account_id: UUID
    priority: int
    is_active: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class ImportedDomainSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    account_id: UUID
    account_name: str
    domain: str
    mapping_id: UUID


class SkippedDomainSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    account_id: UUID
    account_name: str
    domain: str
    reason: SkipReason


class LegacyImportResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    accounts_scanned: int
    imported: list[ImportedDomainSchema]
    skipped: list[SkippedDomainSchema]


# ─── Accounts & roles ───────────────────────────────────────────────────────

class ReparentAccountRequest(BaseModel):
    """`parent_id` is required; send null to make the account a root."""
    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)

    parent_id: Optional[UUID] = Field(...)
    account_type: Optional[AccountType] = None
    name: Optional[str] = Field(default=None, min_length=1, max_length=100)


class AccountResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    account_type: AccountType
    parent_id: Optional[UUID] = None


class AssignSystemRoleRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    user_id: UUID
    role_id: UUID


class SystemRoleAssignmentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    user_id: UUID
    role_id: UUID


class AssignMembershipRoleRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    user_id: UUID
    account_id: UUID
    role_id: UUID
    scope: PermissionScope = PermissionScope.ACCOUNT


class MembershipRoleSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    role_id: UUID
    scope: PermissionScope


class MembershipResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    user_id: UUID
    account_id: UUID
    roles: list[MembershipRoleSchema]


class AssignByEmailDomainRequest(BaseModel):
    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)

    user_id: UUID
    email: str = Field(..., min_length=3, max_length=320)
    default_role_id: Optional[UUID] = None
    scope: PermissionScope = PermissionScope.ACCOUNT


class DomainAssignmentResponse(BaseModel):
    assigned: bool
    account_id: Optional[UUID] = None
    resolution: Optional[ResolutionSchema] = None
    membership: Optional[MembershipResponse] = None
