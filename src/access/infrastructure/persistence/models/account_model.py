"""
Account ORM Model
Maps to the accounts table
"""
from uuid import UUID

from sqlalchemy import ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from shared.infrastructure.database.base_model import Base


class AccountModel(Base):
    """
    SQLAlchemy model for the accounts table.

    Self-referencing forest: parent_id points at another account or is NULL.
    """

    __tablename__ = "accounts"

    name: Mapped[str] = mapped_column(String(100), nullable=False)
    account_type: Mapped[str] = mapped_column(String(20), nullable=False, default="ORGANIZATION")
    parent_id: Mapped[UUID | None] = mapped_column(
        ForeignKey("accounts.id", ondelete="RESTRICT"),
        nullable=True,
        index=True,
    )

    # Deprecated comma-separated domains, superseded by domain_mappings
    legacy_domains: Mapped[str | None] = mapped_column(Text, nullable=True)

    def __repr__(self) -> str:
        return f"<AccountModel(id={self.id}, name={self.name}, type={self.account_type})>"
