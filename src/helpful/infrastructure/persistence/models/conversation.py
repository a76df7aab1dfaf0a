"""SQLAlchemy model for the conversations table."""

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, String, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from helpful.infrastructure.persistence.database import Base


class ConversationModel(Base):
    """A support conversation, owned by one account.

    Attributes:
        id: Primary key (UUID string).
        account_id: Owning account.
        subject: Subject line of the first message.
        status: ``open`` or ``closed``.
    """

    __tablename__ = "conversations"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    account_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("accounts.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    subject: Mapped[str | None] = mapped_column(String(500), nullable=True)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="open")
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )

    account: Mapped["AccountModel"] = relationship(  # noqa: F821
        "AccountModel",
        back_populates="conversations",
    )

    def __repr__(self) -> str:
        return f"<Conversation(id={self.id}, account_id={self.account_id})>"
