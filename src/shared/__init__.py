"""
Shared Layer - Cross-Cutting Concerns
Domain contracts, persistence plumbing, configuration and logging
"""

from shared.domain import (
    BaseEntity,
    BaseValueObject,
    Failure,
    Result,
    Success,
)
from shared.infrastructure import (
    Base,
    DatabaseSessionFactory,
    IUnitOfWork,
    SQLAlchemyRepository,
    SQLAlchemyUnitOfWork,
    bind_context,
    clear_context,
    configure_logging,
    get_logger,
)
from shared.application import (
    BaseCommand,
    CommandHandler,
)

__all__ = [
    # Domain
    "BaseEntity",
    "BaseValueObject",
    "Success",
    "Failure",
    "Result",
    # Infrastructure
    "Base",
    "DatabaseSessionFactory",
    "IUnitOfWork",
    "SQLAlchemyRepository",
    "SQLAlchemyUnitOfWork",
    "configure_logging",
    "get_logger",
    "bind_context",
    "clear_context",
    # Application
    "BaseCommand",
    "CommandHandler",
]
