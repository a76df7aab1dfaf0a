"""Billing synchronization with the subscription billing provider.

Two best-effort operations keep an account in step with Chargify:

- ``get_portal_url`` returns the cached self-service portal link and
  replaces it when it has expired.
- ``refresh_subscription`` mirrors the subscription state, plan and
  customer onto the account.

Provider failures never raise here. The account keeps its previous values
and the next call tries again.
"""

from datetime import datetime, timezone
from typing import Any, Callable

from sqlalchemy.ext.asyncio import AsyncSession

from helpful.core.logging import get_logger
from helpful.infrastructure.persistence.models import AccountModel
from helpful.infrastructure.persistence.repositories import (
    AccountRepository,
    BillingPlanRepository,
)
from helpful.infrastructure.services.billing import BillingProvider

logger = get_logger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _as_utc(value: datetime) -> datetime:
    # SQLite drops the offset, so values are stored as UTC and read back naive
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _positive_id(value: Any) -> int | None:
    """Coerce a provider ID to a positive int, or None."""
    try:
        number = int(value)
    except (TypeError, ValueError):
        return None
    return number if number > 0 else None


class BillingService:
    """Keeps account billing fields in sync with the billing provider."""

    def __init__(
        self,
        session: AsyncSession,
        provider: BillingProvider,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        """Initialize the billing service.

        Args:
            session: SQLAlchemy async session.
            provider: Billing provider client.
            clock: Returns the current aware datetime. Defaults to UTC now.
        """
        self.session = session
        self.provider = provider
        self.clock = clock or _utcnow
        self.account_repo = AccountRepository(session)
        self.plan_repo = BillingPlanRepository(session)

    def portal_url_is_stale(self, account: AccountModel) -> bool:
        """Whether the cached portal URL must be replaced before use.

        The URL is trusted only while it is present and the current time is
        before its expiry. A URL without an expiry is stale.
        """
        if not (account.chargify_portal_url or "").strip():
            return True
        valid_until = account.chargify_portal_valid_until
        if valid_until is None:
            return True
        return _as_utc(valid_until) <= self.clock()

    async def get_portal_url(self, account: AccountModel) -> str:
        """Return the account's portal URL, refreshing it when stale.

        A refresh is attempted only for accounts with a positive Chargify
        customer ID. A successful refresh stores the new URL and expiry and
        commits them; a failed one leaves the cached values untouched.

        Args:
            account: The account.

        Returns:
            The current portal URL, or an empty string if none was ever set.
        """
        if self.portal_url_is_stale(account):
            customer_id = _positive_id(account.chargify_customer_id)
            if customer_id is not None:
                url, expires_at = await self.provider.management_url(customer_id)
                if url:
                    if expires_at is not None:
                        expires_at = _as_utc(expires_at)
                    await self.account_repo.update(
                        account,
                        chargify_portal_url=url,
                        chargify_portal_valid_until=expires_at,
                    )
                    await self.session.commit()
                    logger.info(
                        "Portal URL refreshed",
                        account_id=account.id,
                        valid_until=expires_at.isoformat() if expires_at else None,
                    )
                else:
                    logger.warning(
                        "Portal URL refresh failed, keeping cached value",
                        account_id=account.id,
                        customer_id=customer_id,
                    )

        return account.chargify_portal_url or ""

    async def refresh_subscription(self, account: AccountModel) -> None:
        """Mirror the provider's subscription onto the account.

        The subscription ID is looked up by the account ID the first time and
        kept from then on. When the provider answers, billing status, plan and
        customer ID are written in a single update.

        Args:
            account: The account.
        """
        if account.chargify_subscription_id is None:
            subscription_id = await self.provider.subscription_id_from_customer_reference(
                account.id
            )
            if subscription_id:
                await self.account_repo.update(account, chargify_subscription_id=subscription_id)
                await self.session.commit()
                logger.info(
                    "Subscription linked",
                    account_id=account.id,
                    subscription_id=subscription_id,
                )

        if not account.chargify_subscription_id:
            logger.debug("No subscription for account", account_id=account.id)
            return

        status = await self.provider.subscription_status(account.chargify_subscription_id)
        if not status:
            logger.warning(
                "Subscription status unavailable, keeping billing fields",
                account_id=account.id,
                subscription_id=account.chargify_subscription_id,
            )
            return

        try:
            subscription = status["subscription"]
            state = subscription["state"]
            handle = subscription["product"]["handle"]
            customer_id = subscription["customer"]["id"]
        except (KeyError, TypeError):
            logger.warning(
                "Subscription status has an unexpected shape",
                account_id=account.id,
            )
            return

        plan = await self.plan_repo.get_by_slug(handle)
        if plan is None:
            logger.warning("No billing plan for product handle", handle=handle)

        await self.account_repo.update(
            account,
            billing_status=state,
            billing_plan_id=plan.id if plan else None,
            chargify_customer_id=customer_id,
        )
        await self.session.commit()
        await self.session.refresh(account, attribute_names=["billing_plan"])

        logger.info(
            "Billing status refreshed",
            account_id=account.id,
            billing_status=state,
            billing_plan=plan.slug if plan else None,
        )
