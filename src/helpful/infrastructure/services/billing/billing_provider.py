"""Abstract base class for subscription billing providers.

Defines the calls the billing synchronizer makes. Implementations never
raise on provider failures: they return the empty result instead so the
caller can keep its cached state and retry later.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any


class BillingProvider(ABC):
    """Abstract base class for billing providers."""

    @abstractmethod
    async def management_url(
        self, customer_id: int
    ) -> tuple[str | None, datetime | None]:
        """Fetch a self-service management portal link for a customer.

        Args:
            customer_id: Provider customer ID.

        Returns:
            ``(url, expires_at)`` or ``(None, None)`` on failure.
        """
        pass

    @abstractmethod
    async def subscription_id_from_customer_reference(self, reference: str) -> int | None:
        """Find the subscription of the customer with the given reference.

        Args:
            reference: Our identifier stored on the provider's customer record.

        Returns:
            Subscription ID, or None if the customer or subscription is unknown.
        """
        pass

    @abstractmethod
    async def subscription_status(self, subscription_id: int) -> dict[str, Any] | None:
        """Fetch a subscription.

        Args:
            subscription_id: Provider subscription ID.

        Returns:
            ``{"subscription": {"state": ..., "product": {"handle": ...},
            "customer": {"id": ...}}}`` or None on failure.
        """
        pass

    @abstractmethod
    async def test_connection(self) -> tuple[bool, str | None]:
        """Check that the provider is reachable with the configured credentials.

        Returns:
            Tuple of (success, message).
        """
        pass
