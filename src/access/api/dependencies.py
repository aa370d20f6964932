"""
FastAPI dependencies for the access API.

Wiring objects (session factory, unit-of-work class, resolver) are placed on
`app.state` by `access.main.create_app`; this module only reads them.
"""
from __future__ import annotations

from typing import Annotated, AsyncGenerator, Optional
from uuid import UUID

from fastapi import Depends, Header, Request
from sqlalchemy.ext.asyncio import AsyncSession

from shared.exceptions import ForbiddenError, UnauthorizedError
from shared.infrastructure.observability.logger import get_logger

from access.application.services.domain_mapping_service import DomainMappingService
from access.application.services.domain_resolver import DomainResolver
from access.application.services.permission_engine import PermissionEngine
from access.application.services.role_catalog import RoleCatalog
from access.domain.protocols.unit_of_work_protocol import IAccessUnitOfWork

logger = get_logger(__name__)


async def get_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    async with request.app.state.db.create_session() as session:
        yield session


def get_uow(
    request: Request,
    session: Annotated[AsyncSession, Depends(get_session)],
) -> IAccessUnitOfWork:
    return request.app.state.uow_factory(session)


def get_domain_resolver(request: Request) -> DomainResolver:
    return request.app.state.domain_resolver


def get_permission_engine(uow: Annotated[IAccessUnitOfWork, Depends(get_uow)]) -> PermissionEngine:
    return PermissionEngine(
        catalog=RoleCatalog(uow.roles),
        system_roles=uow.system_roles,
        memberships=uow.memberships,
        accounts=uow.accounts,
    )


def get_domain_mapping_service(
    uow: Annotated[IAccessUnitOfWork, Depends(get_uow)],
    resolver: Annotated[DomainResolver, Depends(get_domain_resolver)],
) -> DomainMappingService:
    return DomainMappingService(uow, resolver)


def get_actor_id(
    x_user_id: Annotated[Optional[UUID], Header(alias="X-User-ID")] = None,
) -> UUID:
    """Id of the already-authenticated user making the request."""
    if x_user_id is None:
        raise UnauthorizedError("X-User-ID header is required")
    return x_user_id


async def require_permission(
    engine: PermissionEngine,
    actor_id: UUID,
    resource: str,
    action: str,
    account_id: Optional[UUID] = None,
) -> None:
    decision = await engine.check(actor_id, resource, action, account_id)
    if not decision.granted:
        logger.warning(
            "Forbidden request",
            actor_id=str(actor_id),
            permission=f"{resource}:{action}",
            account_id=str(account_id) if account_id else None,
        )
        raise ForbiddenError(
            f"Missing permission {resource}:{action}",
            details={"permission": f"{resource}:{action}"},
        )


async def require_super_admin(engine: PermissionEngine, actor_id: UUID) -> None:
    if not await engine.is_super_admin(actor_id):
        logger.warning("Forbidden request", actor_id=str(actor_id), requires="super_admin")
        raise ForbiddenError("Only super administrators can manage system roles")


UnitOfWorkDep = Annotated[IAccessUnitOfWork, Depends(get_uow)]
ResolverDep = Annotated[DomainResolver, Depends(get_domain_resolver)]
PermissionEngineDep = Annotated[PermissionEngine, Depends(get_permission_engine)]
DomainMappingServiceDep = Annotated[DomainMappingService, Depends(get_domain_mapping_service)]
ActorDep = Annotated[UUID, Depends(get_actor_id)]
