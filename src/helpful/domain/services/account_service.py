"""Account service for business logic.

Covers the account lifecycle (creation with an owner, rename, deletion of
everything the account owns) and routing of incoming mail to accounts.
"""

import secrets
import uuid
from email.headerregistry import Address

from sqlalchemy import inspect
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from helpful.core.exceptions import (
    AccountNotFoundError,
    AccountValidationError,
    OwnerAssignmentError,
)
from helpful.core.logging import get_logger
from helpful.domain.services.mailbox import build_mailbox, extract_mailbox_slug
from helpful.domain.services.slug_generator import SlugGenerator
from helpful.infrastructure.persistence.models import OWNER_ROLE, AccountModel, UserModel
from helpful.infrastructure.persistence.repositories import (
    AccountRepository,
    MembershipRepository,
    UserRepository,
)

logger = get_logger(__name__)


def generate_webhook_secret() -> str:
    """Return a new random webhook secret (32 hex characters)."""
    return secrets.token_hex(16)


class AccountService:
    """Service for account management business logic."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize the account service.

        Args:
            session: SQLAlchemy async session.
        """
        self.session = session
        self.account_repo = AccountRepository(session)
        self.user_repo = UserRepository(session)
        self.membership_repo = MembershipRepository(session)

    async def create_account(
        self,
        name: str,
        owner: UserModel | None = None,
        slug: str | None = None,
    ) -> AccountModel:
        """Create an account and, optionally, its owner.

        The account, the owner user (when not yet saved) and the owner
        membership are committed together. If any of them fails the session
        is rolled back, so no account is left without its owner.

        Args:
            name: Account name.
            owner: User that becomes the account owner.
            slug: Explicit slug. Derived from ``name`` when omitted.

        Returns:
            Created account model.

        Raises:
            AccountValidationError: If the name is blank or the slug is
                invalid or taken.
            OwnerAssignmentError: If the owner has no email, or the owner or
                membership could not be saved.
        """
        name = (name or "").strip()
        if not name:
            raise AccountValidationError("name", "can't be blank")

        if slug:
            errors = SlugGenerator.validate(slug)
            if errors:
                raise AccountValidationError("slug", errors[0].message)
            if await self.account_repo.slug_exists(slug):
                raise AccountValidationError("slug", f"'{slug}' has already been taken")
        else:
            slug = await SlugGenerator.generate_unique(name, self.account_repo.slug_exists)

        if owner is not None and not (owner.email or "").strip():
            raise OwnerAssignmentError(f"Owner of account '{slug}' has no email address")

        account = AccountModel(
            id=str(uuid.uuid4()),
            slug=slug,
            name=name,
            webhook_secret=generate_webhook_secret(),
        )

        try:
            await self.account_repo.create(account)
        except IntegrityError as e:
            await self.session.rollback()
            raise AccountValidationError("slug", f"'{slug}' has already been taken") from e

        if owner is not None:
            try:
                await self._save_owner(account, owner)
            except SQLAlchemyError as e:
                await self.session.rollback()
                logger.warning(
                    "Account creation rolled back, owner could not be saved",
                    slug=slug,
                    owner_email=owner.email,
                    error=str(e),
                )
                raise OwnerAssignmentError(
                    f"Could not assign owner '{owner.email}' to account '{slug}'"
                ) from e

        await self.session.commit()
        logger.info("Account created", account_id=account.id, slug=account.slug)
        return account

    async def _save_owner(self, account: AccountModel, owner: UserModel) -> None:
        if not inspect(owner).persistent:
            if owner.id is None:
                owner.id = str(uuid.uuid4())
            owner.email = owner.email.strip().lower()
            await self.user_repo.create(owner)
        await self.membership_repo.create(account.id, owner.id, role=OWNER_ROLE)

    async def get_account(self, account_id: str) -> AccountModel:
        """Get an account by ID.

        Raises:
            AccountNotFoundError: If no account has this ID.
        """
        account = await self.account_repo.get_by_id(account_id)
        if account is None:
            raise AccountNotFoundError(f"Account '{account_id}' not found")
        return account

    async def get_by_slug(self, slug: str) -> AccountModel:
        """Get an account by slug.

        Raises:
            AccountNotFoundError: If no account has this slug.
        """
        account = await self.account_repo.get_by_slug(slug)
        if account is None:
            raise AccountNotFoundError(f"Account '{slug}' not found")
        return account

    async def rename_account(self, account_id: str, name: str) -> AccountModel:
        """Change an account's display name. The slug is kept.

        Raises:
            AccountNotFoundError: If the account does not exist.
            AccountValidationError: If the name is blank.
        """
        account = await self.get_account(account_id)
        await self.account_repo.update(account, name=name)
        await self.session.commit()
        return account

    async def delete_account(self, account_id: str) -> None:
        """Delete an account and everything it owns.

        Raises:
            AccountNotFoundError: If the account does not exist.
        """
        account = await self.get_account(account_id)
        deleted = await self.account_repo.delete(account)
        await self.session.commit()
        logger.info("Account deleted", account_id=account_id, **deleted)

    async def list_users(self, account_id: str) -> list[UserModel]:
        """Users that are members of an account."""
        return await self.account_repo.list_users(account_id)

    def mailbox(self, account: AccountModel, incoming_email_domain: str) -> Address:
        """Address customers send email to for this account.

        Args:
            account: The account.
            incoming_email_domain: Domain that receives incoming mail.
        """
        return build_mailbox(account.slug, account.name, incoming_email_domain)

    async def match_mailbox(self, raw_address: str) -> AccountModel | None:
        """Find the account an incoming address belongs to.

        Args:
            raw_address: Recipient address, with or without display name.

        Returns:
            The matching account, or None if the address is unknown or
            does not look like a mailbox address.
        """
        slug = extract_mailbox_slug(raw_address)
        if slug is None:
            logger.debug("Address is not a mailbox address", address=raw_address)
            return None
        return await self.account_repo.get_by_slug(slug)

    async def match_mailbox_or_raise(self, raw_address: str) -> AccountModel:
        """Like ``match_mailbox`` but raise when nothing matches.

        Malformed addresses raise the same error as unknown ones.

        Raises:
            AccountNotFoundError: If no account matches.
        """
        account = await self.match_mailbox(raw_address)
        if account is None:
            raise AccountNotFoundError(f"No account for mailbox '{raw_address}'")
        return account
