"""
Access persistence: ORM models, repositories and the unit of work.
"""
from access.infrastructure.persistence import models  # noqa: F401  (registers tables)
from access.infrastructure.persistence.access_unit_of_work import AccessUnitOfWork
from access.infrastructure.persistence.repositories import SessionDomainMappingSource

__all__ = ["AccessUnitOfWork", "SessionDomainMappingSource"]
