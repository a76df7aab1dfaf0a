"""SQLAlchemy model for the webhooks table."""

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, String, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from helpful.infrastructure.persistence.database import Base


class WebhookModel(Base):
    """An outbound webhook endpoint registered by an account.

    Payloads are signed with the owning account's ``webhook_secret``.
    """

    __tablename__ = "webhooks"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    account_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("accounts.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    url: Mapped[str] = mapped_column(String(1024), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

    account: Mapped["AccountModel"] = relationship(  # noqa: F821
        "AccountModel",
        back_populates="webhooks",
    )

    def __repr__(self) -> str:
        return f"<Webhook(id={self.id}, url={self.url})>"
