"""
Database Session Factory
Creates async SQLAlchemy sessions with proper configuration
"""
from __future__ import annotations

from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from shared.infrastructure.database.base_model import Base
from shared.infrastructure.observability.logger import get_logger

logger = get_logger(__name__)


class DatabaseSessionFactory:
    """
    Factory for creating async database sessions.

    Owns the async engine and session maker. Pool sizing only applies to
    server databases; SQLite uses SQLAlchemy's default pool for its driver.
    """

    def __init__(
        self,
        database_url: str,
        echo: bool = False,
        pool_size: int = 20,
        max_overflow: int = 10,
    ) -> None:
        """
        Args:
            database_url: Async connection string (postgresql+asyncpg / sqlite+aiosqlite)
            echo: Whether to log SQL statements (debug mode)
            pool_size: Connection pool size
            max_overflow: Max overflow connections beyond pool_size
        """
        self.database_url = database_url
        self.echo = echo

        engine_kwargs: dict = {"echo": echo}
        if not database_url.startswith("sqlite"):
            engine_kwargs.update(
                pool_size=pool_size,
                max_overflow=max_overflow,
                pool_pre_ping=True,
                pool_recycle=3600,
            )

        self.engine: AsyncEngine = create_async_engine(database_url, **engine_kwargs)

        self.session_factory: async_sessionmaker[AsyncSession] = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )

        logger.info(
            "Database session factory initialized",
            driver=database_url.split("://", 1)[0],
        )

    def create_session(self) -> AsyncSession:
        """Create a new async session; the caller closes it."""
        return self.session_factory()

    async def get_session(self) -> AsyncGenerator[AsyncSession, None]:
        """
        Yield a session for dependency injection and close it afterwards.

        Yields:
            AsyncSession instance
        """
        async with self.session_factory() as session:
            yield session

    async def create_schema(self) -> None:
        """Create all tables registered on the declarative Base (idempotent)."""
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database schema ensured", tables=len(Base.metadata.tables))

    async def close(self) -> None:
        """Dispose the engine and its connection pool."""
        await self.engine.dispose()
        logger.info("Database engine disposed")
