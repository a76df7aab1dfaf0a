"""SQLAlchemy model for the people table.

People are the customers an account talks to, not the account's staff.
"""

from sqlalchemy import ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from helpful.infrastructure.persistence.database import Base


class PersonModel(Base):
    __tablename__ = "people"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    account_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("accounts.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True, index=True)

    account: Mapped["AccountModel"] = relationship(  # noqa: F821
        "AccountModel",
        back_populates="people",
    )

    def __repr__(self) -> str:
        return f"<Person(id={self.id}, email={self.email})>"
