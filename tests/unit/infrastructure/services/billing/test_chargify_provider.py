"""Unit tests for the Chargify provider."""

from datetime import datetime, timedelta, timezone

import httpx
import pytest
import respx

from helpful.core.config import Settings
from helpful.infrastructure.services.billing import (
    ChargifyProvider,
    ChargifySettings,
    chargify_provider_from_settings,
)

BASE_URL = "https://acme-billing.chargify.com"


@pytest.fixture
def provider():
    return ChargifyProvider(ChargifySettings(subdomain="acme-billing", api_key="secret-key"))


@pytest.mark.asyncio
@respx.mock
async def test_management_url(provider):
    route = respx.get(f"{BASE_URL}/portal/customers/42/management_link.json").respond(
        200,
        json={
            "url": "https://www.billingportal.com/manage/42/abc",
            "fetch_count": 1,
            "created_at": "2024-03-01T12:00:00-05:00",
            "new_link_available_at": "2024-03-01T12:15:00-05:00",
            "expires_at": "2024-04-01T12:00:00-05:00",
        },
    )

    url, expires_at = await provider.management_url(42)

    assert url == "https://www.billingportal.com/manage/42/abc"
    assert expires_at == datetime(2024, 4, 1, 12, 0, tzinfo=timezone(timedelta(hours=-5)))
    assert expires_at.tzinfo == timezone.utc
    assert expires_at.hour == 17
    assert route.called
    request = route.calls.last.request
    assert request.headers["Authorization"].startswith("Basic ")
    assert request.headers["Accept"] == "application/json"


@pytest.mark.asyncio
@respx.mock
async def test_management_url_not_found(provider):
    respx.get(f"{BASE_URL}/portal/customers/42/management_link.json").respond(404)

    assert await provider.management_url(42) == (None, None)


@pytest.mark.asyncio
@respx.mock
async def test_management_url_rate_limited(provider):
    # Chargify answers 429 when a new link is requested too often
    respx.get(f"{BASE_URL}/portal/customers/42/management_link.json").respond(
        429, json={"errors": ["Too many requests"]}
    )

    assert await provider.management_url(42) == (None, None)


@pytest.mark.asyncio
@respx.mock
async def test_management_url_connection_error(provider):
    respx.get(f"{BASE_URL}/portal/customers/42/management_link.json").mock(
        side_effect=httpx.ConnectError("unreachable")
    )

    assert await provider.management_url(42) == (None, None)


@pytest.mark.asyncio
@respx.mock
async def test_management_url_malformed_body(provider):
    respx.get(f"{BASE_URL}/portal/customers/42/management_link.json").respond(
        200, json={"fetch_count": 1}
    )

    assert await provider.management_url(42) == (None, None)


@pytest.mark.asyncio
@respx.mock
async def test_subscription_id_from_customer_reference(provider):
    lookup = respx.get(f"{BASE_URL}/customers/lookup.json").respond(
        200, json={"customer": {"id": 77, "reference": "acct-1"}}
    )
    respx.get(f"{BASE_URL}/customers/77/subscriptions.json").respond(
        200, json=[{"subscription": {"id": 555, "state": "active"}}]
    )

    assert await provider.subscription_id_from_customer_reference("acct-1") == 555
    assert lookup.calls.last.request.url.params["reference"] == "acct-1"


@pytest.mark.asyncio
@respx.mock
async def test_subscription_id_unknown_customer(provider):
    respx.get(f"{BASE_URL}/customers/lookup.json").respond(404)

    assert await provider.subscription_id_from_customer_reference("acct-1") is None


@pytest.mark.asyncio
@respx.mock
async def test_subscription_id_customer_without_subscription(provider):
    respx.get(f"{BASE_URL}/customers/lookup.json").respond(200, json={"customer": {"id": 77}})
    respx.get(f"{BASE_URL}/customers/77/subscriptions.json").respond(200, json=[])

    assert await provider.subscription_id_from_customer_reference("acct-1") is None


@pytest.mark.asyncio
@respx.mock
async def test_subscription_id_unexpected_lookup_body(provider):
    respx.get(f"{BASE_URL}/customers/lookup.json").respond(200, json={"errors": []})

    assert await provider.subscription_id_from_customer_reference("acct-1") is None


@pytest.mark.asyncio
@respx.mock
async def test_subscription_status(provider):
    respx.get(f"{BASE_URL}/subscriptions/555.json").respond(
        200,
        json={
            "subscription": {
                "id": 555,
                "state": "active",
                "balance_in_cents": 0,
                "product": {"id": 9, "handle": "team", "name": "Team"},
                "customer": {"id": 77, "reference": "acct-1"},
            }
        },
    )

    status = await provider.subscription_status(555)

    assert status["subscription"]["state"] == "active"
    assert status["subscription"]["product"]["handle"] == "team"
    assert status["subscription"]["customer"]["id"] == 77


@pytest.mark.asyncio
@respx.mock
async def test_subscription_status_server_error(provider):
    respx.get(f"{BASE_URL}/subscriptions/555.json").respond(500)

    assert await provider.subscription_status(555) is None


@pytest.mark.asyncio
@respx.mock
async def test_subscription_status_non_json(provider):
    respx.get(f"{BASE_URL}/subscriptions/555.json").respond(200, text="<html>maintenance</html>")

    assert await provider.subscription_status(555) is None


@pytest.mark.asyncio
@respx.mock
async def test_connection_success(provider):
    respx.get(f"{BASE_URL}/product_families.json").respond(200, json=[])

    ok, message = await provider.test_connection()

    assert ok is True
    assert "acme-billing" in message


@pytest.mark.asyncio
@respx.mock
async def test_connection_invalid_key(provider):
    respx.get(f"{BASE_URL}/product_families.json").respond(401)

    ok, message = await provider.test_connection()

    assert ok is False
    assert "Invalid API key" in message


def test_provider_from_settings():
    settings = Settings(chargify_subdomain="acme-billing", chargify_api_key="k")

    provider = chargify_provider_from_settings(settings)

    assert provider.settings.base_url == BASE_URL
    assert provider.settings.timeout_seconds == settings.chargify_timeout_seconds


def test_provider_from_settings_requires_configuration():
    with pytest.raises(ValueError, match="not configured"):
        chargify_provider_from_settings(Settings(chargify_subdomain=None, chargify_api_key=None))


@pytest.mark.asyncio
@respx.mock
async def test_management_url_without_offset_is_rejected(provider):
    respx.get(f"{BASE_URL}/portal/customers/42/management_link.json").respond(
        200,
        json={"url": "https://www.billingportal.com/manage/42/abc", "expires_at": "2024-04-01T12:00:00"},
    )

    assert await provider.management_url(42) == (None, None)
