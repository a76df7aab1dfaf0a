"""Account repository for database operations."""

from typing import Any

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from helpful.infrastructure.persistence.models import (
    AccountModel,
    ConversationModel,
    MembershipModel,
    PersonModel,
    UserModel,
    WebhookModel,
)

# Rows owned by an account, deleted with it
OWNED_MODELS = (ConversationModel, PersonModel, MembershipModel, WebhookModel)


class AccountRepository:
    """Repository for account database operations."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize the repository.

        Args:
            session: SQLAlchemy async session.
        """
        self.session = session

    async def create(self, account: AccountModel) -> AccountModel:
        """Add a new account and flush it.

        Args:
            account: Account model to create.

        Returns:
            Created account model.
        """
        self.session.add(account)
        await self.session.flush()
        return account

    async def get_by_id(self, account_id: str) -> AccountModel | None:
        """Get an account by ID.

        Args:
            account_id: Account UUID.

        Returns:
            Account model if found, None otherwise.
        """
        result = await self.session.execute(
            select(AccountModel).where(AccountModel.id == account_id)
        )
        return result.scalar_one_or_none()

    async def get_by_slug(self, slug: str) -> AccountModel | None:
        """Get the first account with the given slug.

        Args:
            slug: Friendly account identifier.

        Returns:
            Account model if found, None otherwise.
        """
        result = await self.session.execute(
            select(AccountModel).where(AccountModel.slug == slug).limit(1)
        )
        return result.scalars().first()

    async def slug_exists(self, slug: str) -> bool:
        """Check if an account slug is already taken.

        Args:
            slug: Slug to check.

        Returns:
            True if slug exists, False otherwise.
        """
        result = await self.session.execute(
            select(AccountModel.id).where(AccountModel.slug == slug).limit(1)
        )
        return result.scalar_one_or_none() is not None

    async def list_all(self) -> list[AccountModel]:
        """Get every account ordered by name."""
        result = await self.session.execute(select(AccountModel).order_by(AccountModel.name))
        return list(result.scalars().all())

    async def list_users(self, account_id: str) -> list[UserModel]:
        """Get the users that hold a membership in an account.

        Args:
            account_id: Account UUID.

        Returns:
            Users ordered by email.
        """
        result = await self.session.execute(
            select(UserModel)
            .join(MembershipModel, MembershipModel.user_id == UserModel.id)
            .where(MembershipModel.account_id == account_id)
            .order_by(UserModel.email)
        )
        return list(result.scalars().all())

    async def update(self, account: AccountModel, **fields: Any) -> AccountModel:
        """Assign the given fields and flush them as one UPDATE.

        Args:
            account: Account model to update.
            **fields: Column or relationship values to assign.

        Returns:
            Updated account model.

        Raises:
            AccountValidationError: If a blank name or slug is assigned, or a
                write-once field already holds a different value.
        """
        for key, value in fields.items():
            setattr(account, key, value)
        await self.session.flush()
        return account

    async def delete(self, account: AccountModel) -> dict[str, int]:
        """Delete an account together with the rows it owns.

        Conversations, people, memberships and webhooks are removed first,
        then the account itself. Users and billing plans are left in place.

        Args:
            account: Account model to delete.

        Returns:
            Number of deleted rows per owned table.
        """
        deleted: dict[str, int] = {}
        for model in OWNED_MODELS:
            result = await self.session.execute(
                delete(model).where(model.account_id == account.id)
            )
            deleted[model.__tablename__] = result.rowcount or 0

        await self.session.execute(delete(AccountModel).where(AccountModel.id == account.id))
        await self.session.flush()
        return deleted
