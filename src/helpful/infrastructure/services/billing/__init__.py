"""Billing providers."""

from helpful.core.config import Settings
from helpful.infrastructure.services.billing.billing_provider import BillingProvider
from helpful.infrastructure.services.billing.chargify_provider import (
    ChargifyProvider,
    ChargifySettings,
)


def chargify_provider_from_settings(settings: Settings) -> ChargifyProvider:
    """Build a Chargify provider from application settings.

    Raises:
        ValueError: If the Chargify subdomain or API key is not configured.
    """
    if not settings.chargify_enabled:
        raise ValueError(
            "Chargify is not configured: set HELPFUL_CHARGIFY_SUBDOMAIN "
            "and HELPFUL_CHARGIFY_API_KEY"
        )
    return ChargifyProvider(
        ChargifySettings(
            subdomain=settings.chargify_subdomain,
            api_key=settings.chargify_api_key,
            timeout_seconds=settings.chargify_timeout_seconds,
        )
    )


__all__ = [
    "BillingProvider",
    "ChargifyProvider",
    "ChargifySettings",
    "chargify_provider_from_settings",
]
