"""
Access Routes
Permission checks, domain resolution, domain mappings and hierarchy changes
"""
from __future__ import annotations

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Query, Response, status

from shared.infrastructure.observability.logger import get_logger

from access.api.dependencies import (
    ActorDep,
    DomainMappingServiceDep,
    PermissionEngineDep,
    ResolverDep,
    UnitOfWorkDep,
    require_permission,
    require_super_admin,
)
from access.api.schemas import (
    AccessibleAccountsResponse,
    AccountResponse,
    AssignByEmailDomainRequest,
    AssignMembershipRoleRequest,
    AssignSystemRoleRequest,
    BatchPermissionCheckRequest,
    BatchPermissionCheckResponse,
    BatchPermissionResult,
    CacheStatsSchema,
    DomainAssignmentResponse,
    DomainMappingCreateRequest,
    DomainMappingResponse,
    DomainMappingUpdateRequest,
    LegacyImportResponse,
    MembershipResponse,
    PermissionCheckRequest,
    PermissionDecisionResponse,
    ReparentAccountRequest,
    ResolutionDiagnosticsResponse,
    ResolutionSchema,
    ResolveResponse,
    SystemRoleAssignmentResponse,
)
from access.application.commands import (
    AssignByEmailDomainCommand,
    AssignByEmailDomainCommandHandler,
    AssignMembershipRoleCommand,
    AssignMembershipRoleCommandHandler,
    AssignSystemRoleCommand,
    AssignSystemRoleCommandHandler,
    RemoveSystemRoleCommand,
    RemoveSystemRoleCommandHandler,
    ReparentAccountCommand,
    ReparentAccountCommandHandler,
)
from access.domain.exceptions import RuleViolationError
from access.domain.value_objects.decision import PermissionRequest
from access.domain.value_objects.permission import Permission

logger = get_logger(__name__)

router = APIRouter(prefix="/access", tags=["Access"])

# Permissions required of the acting user (X-User-ID) for admin writes
EMAIL_ADMIN = ("email", "admin-global")
ACCOUNT_EDIT = ("accounts", "edit")
USER_EDIT = ("users", "edit")


# ─── Permissions ────────────────────────────────────────────────────────────

@router.post(
    "/permissions/check",
    response_model=PermissionDecisionResponse,
    summary="Check Permission",
)
async def check_permission(
    body: PermissionCheckRequest,
    engine: PermissionEngineDep,
) -> PermissionDecisionResponse:
    permission = Permission.parse(body.permission)
    decision = await engine.check(
        body.user_id,
        permission.resource,
        permission.action,
        body.target_account_id,
    )
    return PermissionDecisionResponse(granted=decision.granted, scope=decision.scope)


@router.post(
    "/permissions/check-batch",
    response_model=BatchPermissionCheckResponse,
    summary="Check Permissions In Bulk",
)
async def check_permissions_batch(
    body: BatchPermissionCheckRequest,
    engine: PermissionEngineDep,
) -> BatchPermissionCheckResponse:
    requests = [
        PermissionRequest(
            user_id=check.user_id,
            permission=Permission.parse(check.permission),
            target_account_id=check.target_account_id,
        )
        for check in body.checks
    ]
    decisions = await engine.check_batch(requests)
    return BatchPermissionCheckResponse(results=[
        BatchPermissionResult(
            user_id=request.user_id,
            permission=request.permission.value,
            target_account_id=request.target_account_id,
            granted=decision.granted,
            scope=decision.scope,
        )
        for request, decision in zip(requests, decisions)
    ])


@router.get(
    "/users/{user_id}/accessible-accounts",
    response_model=AccessibleAccountsResponse,
    summary="List Accessible Accounts",
)
async def accessible_accounts(user_id: UUID, engine: PermissionEngineDep) -> AccessibleAccountsResponse:
    account_ids = await engine.accessible_account_ids(user_id)
    return AccessibleAccountsResponse(user_id=user_id, account_ids=sorted(account_ids, key=str))


# ─── Domain resolution ──────────────────────────────────────────────────────

@router.get(
    "/domains/resolve",
    response_model=ResolveResponse,
    summary="Resolve Email Domain",
)
async def resolve_domain(
    resolver: ResolverDep,
    address: Annotated[str, Query(min_length=1, max_length=320)],
) -> ResolveResponse:
    resolution = await resolver.resolve(address)
    return ResolveResponse(
        address=address,
        resolution=ResolutionSchema.model_validate(resolution) if resolution else None,
    )


@router.get(
    "/domains/test",
    response_model=ResolutionDiagnosticsResponse,
    summary="Diagnose Domain Resolution",
)
async def test_domain_resolution(
    resolver: ResolverDep,
    address: Annotated[str, Query(max_length=320)] = "",
) -> ResolutionDiagnosticsResponse:
    diagnostics = await resolver.test_resolution(address)
    return ResolutionDiagnosticsResponse.model_validate(diagnostics)


@router.get("/domains/cache", response_model=CacheStatsSchema, summary="Domain Cache Stats")
async def domain_cache_stats(resolver: ResolverDep) -> CacheStatsSchema:
    return CacheStatsSchema.model_validate(resolver.cache_stats())


@router.post(
    "/domains/cache/invalidate",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Invalidate Domain Cache",
)
async def invalidate_domain_cache(
    resolver: ResolverDep,
    engine: PermissionEngineDep,
    actor_id: ActorDep,
) -> Response:
    await require_permission(engine, actor_id, *EMAIL_ADMIN)
    resolver.invalidate_cache()
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# ─── Domain mappings ────────────────────────────────────────────────────────

@router.get(
    "/domain-mappings",
    response_model=list[DomainMappingResponse],
    summary="List Domain Mappings",
)
async def list_domain_mappings(
    service: DomainMappingServiceDep,
    engine: PermissionEngineDep,
    actor_id: ActorDep,
) -> list[DomainMappingResponse]:
    await require_permission(engine, actor_id, *EMAIL_ADMIN)
    return [DomainMappingResponse.model_validate(m) for m in await service.list_all()]


@router.post(
    "/domain-mappings",
    response_model=DomainMappingResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create Domain Mapping",
)
async def create_domain_mapping(
    body: DomainMappingCreateRequest,
    service: DomainMappingServiceDep,
    engine: PermissionEngineDep,
    actor_id: ActorDep,
) -> DomainMappingResponse:
    await require_permission(engine, actor_id, *EMAIL_ADMIN)
    mapping = await service.create(
        domain=body.domain,
        account_id=body.account_id,
        priority=body.priority,
        is_active=body.is_active,
    )
    return DomainMappingResponse.model_validate(mapping)


@router.post(
    "/domain-mappings/import-legacy",
    response_model=LegacyImportResponse,
    summary="Import Legacy Domains",
)
async def import_legacy_domains(
    service: DomainMappingServiceDep,
    engine: PermissionEngineDep,
    actor_id: ActorDep,
) -> LegacyImportResponse:
    await require_permission(engine, actor_id, *EMAIL_ADMIN)
    report = await service.import_legacy_domains()
    return LegacyImportResponse.model_validate(report)


@router.patch(
    "/domain-mappings/{mapping_id}",
    response_model=DomainMappingResponse,
    summary="Update Domain Mapping",
)
async def update_domain_mapping(
    mapping_id: UUID,
    body: DomainMappingUpdateRequest,
    service: DomainMappingServiceDep,
    engine: PermissionEngineDep,
    actor_id: ActorDep,
) -> DomainMappingResponse:
    await require_permission(engine, actor_id, *EMAIL_ADMIN)
    mapping = await service.update(mapping_id, **body.model_dump(exclude_unset=True))
    return DomainMappingResponse.model_validate(mapping)


@router.delete(
    "/domain-mappings/{mapping_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete Domain Mapping",
)
async def delete_domain_mapping(
    mapping_id: UUID,
    service: DomainMappingServiceDep,
    engine: PermissionEngineDep,
    actor_id: ActorDep,
) -> Response:
    await require_permission(engine, actor_id, *EMAIL_ADMIN)
    await service.delete(mapping_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# ─── Hierarchy & roles ──────────────────────────────────────────────────────

@router.patch(
    "/accounts/{account_id}/parent",
    response_model=AccountResponse,
    summary="Move Account",
    description="Change an account's parent (and optionally its type and name)",
)
async def reparent_account(
    account_id: UUID,
    body: ReparentAccountRequest,
    uow: UnitOfWorkDep,
    engine: PermissionEngineDep,
    actor_id: ActorDep,
) -> AccountResponse:
    await require_permission(engine, actor_id, *ACCOUNT_EDIT, account_id=account_id)
    handler = ReparentAccountCommandHandler(uow)
    result = await handler(ReparentAccountCommand(
        account_id=account_id,
        new_parent_id=body.parent_id,
        new_type=body.account_type,
        name=body.name,
        issued_by=actor_id,
    ))
    if result.is_failure():
        raise RuleViolationError(result.error)
    return AccountResponse.model_validate(result.value)


@router.post(
    "/system-roles",
    response_model=SystemRoleAssignmentResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Assign System Role",
)
async def assign_system_role(
    body: AssignSystemRoleRequest,
    uow: UnitOfWorkDep,
    engine: PermissionEngineDep,
    actor_id: ActorDep,
) -> SystemRoleAssignmentResponse:
    await require_super_admin(engine, actor_id)
    handler = AssignSystemRoleCommandHandler(uow)
    assignment = await handler(AssignSystemRoleCommand(
        user_id=body.user_id,
        role_id=body.role_id,
        issued_by=actor_id,
    ))
    return SystemRoleAssignmentResponse.model_validate(assignment)


@router.delete(
    "/system-roles/{assignment_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Remove System Role",
)
async def remove_system_role(
    assignment_id: UUID,
    uow: UnitOfWorkDep,
    engine: PermissionEngineDep,
    actor_id: ActorDep,
) -> Response:
    await require_super_admin(engine, actor_id)
    handler = RemoveSystemRoleCommandHandler(uow)
    result = await handler(RemoveSystemRoleCommand(assignment_id=assignment_id, issued_by=actor_id))
    if result.is_failure():
        raise RuleViolationError(result.error)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    "/memberships/roles",
    response_model=MembershipResponse,
    summary="Assign Membership Role",
)
async def assign_membership_role(
    body: AssignMembershipRoleRequest,
    uow: UnitOfWorkDep,
    engine: PermissionEngineDep,
    actor_id: ActorDep,
) -> MembershipResponse:
    await require_permission(engine, actor_id, *USER_EDIT, account_id=body.account_id)
    handler = AssignMembershipRoleCommandHandler(uow)
    membership = await handler(AssignMembershipRoleCommand(
        user_id=body.user_id,
        account_id=body.account_id,
        role_id=body.role_id,
        scope=body.scope,
        issued_by=actor_id,
    ))
    return MembershipResponse.model_validate(membership)


@router.post(
    "/memberships/assign-by-email",
    response_model=DomainAssignmentResponse,
    summary="Assign User By Email Domain",
    description="Requires users:edit through a system role, since the target account is not known up front",
)
async def assign_by_email_domain(
    body: AssignByEmailDomainRequest,
    uow: UnitOfWorkDep,
    resolver: ResolverDep,
    engine: PermissionEngineDep,
    actor_id: ActorDep,
) -> DomainAssignmentResponse:
    await require_permission(engine, actor_id, *USER_EDIT)
    handler = AssignByEmailDomainCommandHandler(uow, resolver)
    result = await handler(AssignByEmailDomainCommand(
        user_id=body.user_id,
        email=body.email,
        default_role_id=body.default_role_id,
        scope=body.scope,
        issued_by=actor_id,
    ))
    return DomainAssignmentResponse(
        assigned=result.assigned,
        account_id=result.account_id,
        resolution=ResolutionSchema.model_validate(result.resolution) if result.resolution else None,
        membership=MembershipResponse.model_validate(result.membership) if result.membership else None,
    )
