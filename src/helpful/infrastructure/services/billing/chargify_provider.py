"""Chargify billing provider implementation.

Talks to the Chargify REST API with httpx. Authentication is HTTP basic
auth with the API key as username and ``x`` as password.
"""

from datetime import datetime, timezone
from typing import Any

import httpx
from pydantic import AwareDatetime, BaseModel, ConfigDict, ValidationError

from helpful.core.exceptions import BillingProviderError
from helpful.core.logging import get_logger
from helpful.infrastructure.services.billing.billing_provider import BillingProvider

logger = get_logger(__name__)


class ChargifySettings(BaseModel):
    """Configuration settings for the Chargify provider."""

    model_config = ConfigDict(from_attributes=True)

    subdomain: str
    api_key: str
    timeout_seconds: float = 10.0

    @property
    def base_url(self) -> str:
        return f"https://{self.subdomain}.chargify.com"


class ManagementLink(BaseModel):
    url: str
    expires_at: AwareDatetime


class _Product(BaseModel):
    handle: str | None = None


class _Customer(BaseModel):
    id: int


class _Subscription(BaseModel):
    id: int | None = None
    state: str
    product: _Product
    customer: _Customer


class SubscriptionEnvelope(BaseModel):
    """Shape of ``GET /subscriptions/{id}.json`` the synchronizer relies on."""

    subscription: _Subscription


class ChargifyProvider(BillingProvider):
    """Chargify billing provider.

    Every public call swallows transport errors, unexpected status codes and
    malformed bodies, logs them and returns the empty result.
    """

    def __init__(self, settings: ChargifySettings) -> None:
        """Initialize the Chargify provider.

        Args:
            settings: Chargify configuration settings.
        """
        self.settings = settings

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.settings.base_url,
            auth=(self.settings.api_key, "x"),
            headers={"Accept": "application/json"},
            timeout=self.settings.timeout_seconds,
        )

    async def _get_json(self, path: str, params: dict[str, Any] | None = None) -> Any:
        """GET a JSON document.

        Raises:
            BillingProviderError: On transport errors, non-2xx responses or
                a body that is not JSON.
        """
        try:
            async with self._client() as client:
                response = await client.get(path, params=params)
        except httpx.HTTPError as e:
            raise BillingProviderError(f"Chargify request failed: {e}") from e

        if response.status_code == 404:
            raise BillingProviderError("Chargify resource not found", status_code=404)
        if not response.is_success:
            raise BillingProviderError(
                f"Chargify returned HTTP {response.status_code}",
                status_code=response.status_code,
            )

        try:
            return response.json()
        except ValueError as e:
            raise BillingProviderError("Chargify returned a non-JSON body") from e

    async def management_url(
        self, customer_id: int
    ) -> tuple[str | None, datetime | None]:
        path = f"/portal/customers/{customer_id}/management_link.json"
        try:
            link = ManagementLink.model_validate(await self._get_json(path))
        except (BillingProviderError, ValidationError) as e:
            logger.warning(
                "Chargify management link unavailable",
                customer_id=customer_id,
                error=str(e),
            )
            return None, None

        return link.url, link.expires_at.astimezone(timezone.utc)

    async def subscription_id_from_customer_reference(self, reference: str) -> int | None:
        try:
            customer = await self._get_json(
                "/customers/lookup.json", params={"reference": reference}
            )
            customer_id = customer["customer"]["id"]
            subscriptions = await self._get_json(f"/customers/{customer_id}/subscriptions.json")
        except BillingProviderError as e:
            logger.warning(
                "Chargify customer lookup failed",
                reference=reference,
                error=str(e),
                status_code=e.status_code,
            )
            return None
        except (KeyError, TypeError):
            logger.warning("Chargify customer lookup returned an unexpected body", reference=reference)
            return None

        for entry in subscriptions or []:
            try:
                return int(entry["subscription"]["id"])
            except (KeyError, TypeError, ValueError):
                continue

        logger.info("Chargify customer has no subscription", reference=reference)
        return None

    async def subscription_status(self, subscription_id: int) -> dict[str, Any] | None:
        try:
            envelope = SubscriptionEnvelope.model_validate(
                await self._get_json(f"/subscriptions/{subscription_id}.json")
            )
        except (BillingProviderError, ValidationError) as e:
            logger.warning(
                "Chargify subscription status unavailable",
                subscription_id=subscription_id,
                error=str(e),
            )
            return None

        return envelope.model_dump()

    async def test_connection(self) -> tuple[bool, str | None]:
        try:
            await self._get_json("/product_families.json")
        except BillingProviderError as e:
            logger.error("Chargify connection test failed", error=str(e))
            if e.status_code == 401:
                return False, "Chargify connection failed: Invalid API key"
            return False, f"Chargify connection failed: {e.message}"

        return True, f"Chargify connection successful ({self.settings.subdomain})."
