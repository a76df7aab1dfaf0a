"""SQLAlchemy model for the memberships table.

Memberships join users to accounts and carry the user's role in that
account.
"""

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, String, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from helpful.infrastructure.persistence.database import Base

OWNER_ROLE = "owner"
MEMBER_ROLE = "member"


class MembershipModel(Base):
    """SQLAlchemy model for the memberships table.

    Attributes:
        id: Primary key (UUID string).
        account_id: Account the user belongs to.
        user_id: Member user.
        role: ``owner`` or ``member``.
    """

    __tablename__ = "memberships"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    account_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("accounts.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    user_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    role: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=MEMBER_ROLE,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

    account: Mapped["AccountModel"] = relationship(  # noqa: F821
        "AccountModel",
        back_populates="memberships",
    )
    user: Mapped["UserModel"] = relationship(  # noqa: F821
        "UserModel",
        back_populates="memberships",
    )

    __table_args__ = (
        UniqueConstraint("account_id", "user_id", name="uq_memberships_account_user"),
    )

    def __repr__(self) -> str:
        return (
            f"<Membership(account_id={self.account_id}, user_id={self.user_id}, "
            f"role={self.role})>"
        )
