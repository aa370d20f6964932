"""
SQLAlchemy Implementation of Unit of Work
Manages database transactions with async SQLAlchemy sessions
"""
from __future__ import annotations

from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from shared.infrastructure.observability.logger import get_logger

logger = get_logger(__name__)


class SQLAlchemyUnitOfWork:
    """
    SQLAlchemy-based Unit of Work implementation.

    Everything done through the session inside the context is atomic:
    it is committed by `commit()` or rolled back on exit.

    Attributes:
        session: Async SQLAlchemy session
        _committed: Flag tracking if transaction was committed
    """

    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self._committed = False

    async def __aenter__(self) -> "SQLAlchemyUnitOfWork":
        self._committed = False
        if not self.session.in_transaction():
            await self.session.begin()

        logger.debug("UnitOfWork transaction started")
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        if exc_type is not None:
            await self.rollback()
            logger.error("UnitOfWork rolled back due to exception", exception=str(exc_val))
        elif not self._committed:
            await self.rollback()
            logger.debug("UnitOfWork rolled back (not committed)")

    async def commit(self) -> None:
        """
        Commit the current transaction.

        Raises:
            Exception: If commit fails (after rolling back)
        """
        try:
            await self.session.commit()
        except Exception as e:
            await self.rollback()
            logger.error("UnitOfWork commit failed", error=str(e))
            raise

        self._committed = True
        logger.debug("UnitOfWork transaction committed")

    async def rollback(self) -> None:
        """Discard all changes made within this UoW context."""
        await self.session.rollback()
        self._committed = False
        logger.debug("UnitOfWork transaction rolled back")
