"""
AccountMembership ORM Models
Maps to the account_memberships and membership_roles tables
"""
from uuid import UUID

from sqlalchemy import ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from shared.infrastructure.database.base_model import Base


class MembershipRoleModel(Base):
    """One role held inside a membership; `position` keeps assignment order."""

    __tablename__ = "membership_roles"
    __table_args__ = (UniqueConstraint("membership_id", "role_id", name="uq_membership_role"),)

    membership_id: Mapped[UUID] = mapped_column(
        ForeignKey("account_memberships.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    role_id: Mapped[UUID] = mapped_column(
        ForeignKey("role_templates.id", ondelete="RESTRICT"),
        nullable=False,
    )
    scope: Mapped[str] = mapped_column(String(20), nullable=False, default="account")
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)


class AccountMembershipModel(Base):
    """A user's membership in one account (one row per user and account)."""

    __tablename__ = "account_memberships"
    __table_args__ = (UniqueConstraint("user_id", "account_id", name="uq_membership_user_account"),)

    user_id: Mapped[UUID] = mapped_column(nullable=False, index=True)
    account_id: Mapped[UUID] = mapped_column(
        ForeignKey("accounts.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    roles: Mapped[list[MembershipRoleModel]] = relationship(
        MembershipRoleModel,
        order_by=MembershipRoleModel.position,
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    def __repr__(self) -> str:
        return f"<AccountMembershipModel(user_id={self.user_id}, account_id={self.account_id})>"
