"""
Shared Infrastructure Layer
Database plumbing and observability
"""

from shared.infrastructure.database import (
    Base,
    DatabaseSessionFactory,
    IUnitOfWork,
    SQLAlchemyRepository,
    SQLAlchemyUnitOfWork,
)
from shared.infrastructure.observability import (
    bind_context,
    clear_context,
    configure_logging,
    get_logger,
)

__all__ = [
    "Base",
    "DatabaseSessionFactory",
    "IUnitOfWork",
    "SQLAlchemyRepository",
    "SQLAlchemyUnitOfWork",
    "configure_logging",
    "get_logger",
    "bind_context",
    "clear_context",
]
