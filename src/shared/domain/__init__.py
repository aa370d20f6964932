"""
Shared Domain Layer
Base contracts for entities, value objects and operation results
"""

from shared.domain.base_entity import BaseEntity
from shared.domain.base_value_object import BaseValueObject
from shared.domain.result import Failure, Result, Success

__all__ = [
    "BaseEntity",
    "BaseValueObject",
    "Success",
    "Failure",
    "Result",
]
