"""
DomainMapping ORM Model
Maps to the domain_mappings table
"""
from uuid import UUID

from sqlalchemy import Boolean, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from shared.infrastructure.database.base_model import Base


class DomainMappingModel(Base):
    """Email domain routed to an account. Domains are stored lowercase."""

    __tablename__ = "domain_mappings"

    domain: Mapped[str] = mapped_column(String(253), unique=True, nullable=False)
    account_id: Mapped[UUID] = mapped_column(
        ForeignKey("accounts.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    priority: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    def __repr__(self) -> str:
        return f"<DomainMappingModel(domain={self.domain}, account_id={self.account_id}, priority={self.priority})>"
