"""
SystemRoleAssignment ORM Model
Maps to the system_role_assignments table
"""
from uuid import UUID

from sqlalchemy import ForeignKey, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from shared.infrastructure.database.base_model import Base


class SystemRoleAssignmentModel(Base):
    """System-wide role held by a user, not tied to any account."""

    __tablename__ = "system_role_assignments"
    __table_args__ = (UniqueConstraint("user_id", "role_id", name="uq_system_role_user_role"),)

    user_id: Mapped[UUID] = mapped_column(nullable=False, index=True)
    role_id: Mapped[UUID] = mapped_column(
        ForeignKey("role_templates.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )

    def __repr__(self) -> str:
        return f"<SystemRoleAssignmentModel(user_id={self.user_id}, role_id={self.role_id})>"
