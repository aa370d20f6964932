"""
FastAPI application factory for the access service.

    uvicorn --factory access.main:create_app
"""
from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from fastapi import FastAPI

from shared.api.middleware import CorrelationIdMiddleware
from shared.config import Settings, get_settings
from shared.exceptions import register_exception_handlers
from shared.infrastructure.database.session import DatabaseSessionFactory
from shared.infrastructure.observability.logger import configure_logging, get_logger

from access.api.routes import router as access_router
from access.application.services.domain_resolver import DomainResolver
from access.infrastructure.persistence import AccessUnitOfWork, SessionDomainMappingSource

logger = get_logger(__name__)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings.log_level, json_logs=settings.log_json)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        db = DatabaseSessionFactory(
            settings.database_url,
            echo=settings.database_echo,
            pool_size=settings.database_pool_size,
            max_overflow=settings.database_max_overflow,
        )
        if settings.create_schema_on_startup:
            await db.create_schema()

        app.state.db = db
        app.state.uow_factory = AccessUnitOfWork
        app.state.domain_resolver = DomainResolver(
            SessionDomainMappingSource(db.session_factory),
            ttl_seconds=settings.domain_cache_ttl_seconds,
            retry_seconds=settings.domain_cache_retry_seconds,
        )
        logger.info("Access service started", settings=settings.safe_dict())
        try:
            yield
        finally:
            await db.close()
            logger.info("Access service stopped")

    app = FastAPI(
        title="Helpdesk Access API",
        version="1.0.0",
        debug=settings.debug,
        lifespan=lifespan,
    )
    app.add_middleware(CorrelationIdMiddleware)
    app.include_router(access_router)
    register_exception_handlers(app)

    @app.get("/health", tags=["Health"])
    async def health() -> dict:
        return {"status": "ok", "environment": settings.environment}

    return app
