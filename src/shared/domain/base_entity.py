"""
Base Entity Contract for Domain Layer
Provides UUID-based identity, equality, and audit fields
"""
from __future__ import annotations

from abc import ABC
from datetime import datetime, timezone
from uuid import UUID, uuid4


def utcnow() -> datetime:
    """Timezone-aware current UTC time."""
    return datetime.now(timezone.utc)


class BaseEntity(ABC):
    """
    Abstract base class for all domain entities.
    
    Entities are defined by their identity (id), not their attributes.
    Two entities are equal if they have the same id, regardless of other
    attributes, so an account loaded twice in one request compares equal.
    
    Attributes:
        id: Unique identifier (UUID)
        created_at: Timestamp of creation
        updated_at: Timestamp of last update
    """
    
    def __init__(
        self,
        id: UUID | None = None,
        created_at: datetime | None = None,
        updated_at: datetime | None = None,
    ) -> None:
        self.id: UUID = id or uuid4()
        self.created_at: datetime = created_at or utcnow()
        self.updated_at: datetime = updated_at or self.created_at
    
    def __eq__(self, other: object) -> bool:
        if not isinstance(other, self.__class__):
            return False
        return self.id == other.id
    
    def __hash__(self) -> int:
        return hash(self.id)
    
    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(id={self.id})"
    
    def mark_updated(self) -> None:
        """Update the updated_at timestamp to current time."""
        self.updated_at = utcnow()
