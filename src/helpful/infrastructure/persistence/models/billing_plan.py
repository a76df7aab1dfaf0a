"""SQLAlchemy model for the billing_plans table.

Billing plans mirror Chargify products. The plan slug equals the
product handle reported by Chargify.
"""

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from helpful.infrastructure.persistence.database import Base


class BillingPlanModel(Base):
    """SQLAlchemy model for the billing_plans table.

    Attributes:
        id: Auto-incrementing primary key.
        slug: Chargify product handle, unique.
        name: Human readable plan name.
    """

    __tablename__ = "billing_plans"

    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
    )
    slug: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
        unique=True,
        index=True,
        comment="Chargify product handle",
    )
    name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )

    accounts: Mapped[list["AccountModel"]] = relationship(  # noqa: F821
        "AccountModel",
        back_populates="billing_plan",
    )

    def __repr__(self) -> str:
        return f"<BillingPlan(id={self.id}, slug={self.slug})>"
