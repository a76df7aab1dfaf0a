"""SQLAlchemy model for the accounts table.

An account is one help-desk customer. Its slug doubles as the local part
of the account's incoming mailbox address.
"""

from datetime import datetime
from typing import Any

from sqlalchemy import DateTime, ForeignKey, Integer, String, func
from sqlalchemy.orm import Mapped, mapped_column, relationship, validates

from helpful.core.exceptions import AccountValidationError
from helpful.infrastructure.persistence.database import Base


class AccountModel(Base):
    """SQLAlchemy model for the accounts table.

    Attributes:
        id: Primary key (UUID string).
        slug: Friendly identifier derived from the name, unique across accounts.
        name: Display name, also used as the mailbox display name.
        webhook_secret: 32 hex character secret, generated once before insert.
        chargify_customer_id: Chargify customer reference, re-synced on refresh.
        chargify_subscription_id: Chargify subscription, set once and kept.
        billing_status: Subscription state mirrored from Chargify.
        billing_plan_id: Foreign key to billing_plans.
        chargify_portal_url: Cached self-service portal link.
        chargify_portal_valid_until: Expiry of the cached portal link.
    """

    __tablename__ = "accounts"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        comment="Account ID (UUID)",
    )
    slug: Mapped[str] = mapped_column(
        String(64),
        nullable=False,
        unique=True,
        index=True,
        comment="Friendly identifier and mailbox local part",
    )
    name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Display name for the account",
    )
    webhook_secret: Mapped[str] = mapped_column(
        String(32),
        nullable=False,
        comment="Secret shared with webhook receivers",
    )
    chargify_customer_id: Mapped[int | None] = mapped_column(
        Integer,
        nullable=True,
    )
    chargify_subscription_id: Mapped[int | None] = mapped_column(
        Integer,
        nullable=True,
    )
    billing_status: Mapped[str | None] = mapped_column(
        String(50),
        nullable=True,
        comment="Subscription state reported by Chargify",
    )
    billing_plan_id: Mapped[int | None] = mapped_column(
        ForeignKey("billing_plans.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    chargify_portal_url: Mapped[str | None] = mapped_column(
        String(1024),
        nullable=True,
    )
    chargify_portal_valid_until: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )
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

    # Relationships
    billing_plan: Mapped["BillingPlanModel | None"] = relationship(  # noqa: F821
        "BillingPlanModel",
        back_populates="accounts",
    )
    conversations: Mapped[list["ConversationModel"]] = relationship(  # noqa: F821
        "ConversationModel",
        back_populates="account",
        passive_deletes=True,
    )
    people: Mapped[list["PersonModel"]] = relationship(  # noqa: F821
        "PersonModel",
        back_populates="account",
        passive_deletes=True,
    )
    memberships: Mapped[list["MembershipModel"]] = relationship(  # noqa: F821
        "MembershipModel",
        back_populates="account",
        passive_deletes=True,
    )
    webhooks: Mapped[list["WebhookModel"]] = relationship(  # noqa: F821
        "WebhookModel",
        back_populates="account",
        passive_deletes=True,
    )
    users: Mapped[list["UserModel"]] = relationship(  # noqa: F821
        "UserModel",
        secondary="memberships",
        viewonly=True,
    )

    @validates("name", "slug")
    def _validate_required(self, key: str, value: str | None) -> str:
        if value is None or not str(value).strip():
            raise AccountValidationError(key, "can't be blank")
        return value

    @validates("webhook_secret", "chargify_subscription_id")
    def _validate_write_once(self, key: str, value: Any) -> Any:
        # Only look at already loaded state; never trigger a load here
        current = self.__dict__.get(key)
        if current is not None and value != current:
            raise AccountValidationError(key, "can't be changed once set")
        return value

    def __repr__(self) -> str:
        return f"<Account(id={self.id}, slug={self.slug})>"
