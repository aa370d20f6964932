"""
RoleTemplate ORM Model
Maps to the role_templates table
"""
from sqlalchemy import JSON, Boolean, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from shared.infrastructure.database.base_model import Base


class RoleTemplateModel(Base):
    """
    SQLAlchemy model for the role_templates table.

    Permissions are stored as a JSON array of 'resource:action' strings.
    """

    __tablename__ = "role_templates"

    name: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    permissions: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    grants_all: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    applicable_to: Mapped[str] = mapped_column(String(10), nullable=False, default="both")

    def __repr__(self) -> str:
        return f"<RoleTemplateModel(id={self.id}, name={self.name}, grants_all={self.grants_all})>"
