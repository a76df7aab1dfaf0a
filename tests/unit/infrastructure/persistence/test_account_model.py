"""Unit tests for AccountModel invariants."""

import pytest

from helpful.core.exceptions import AccountValidationError
from helpful.infrastructure.persistence.models import AccountModel


@pytest.mark.parametrize("field", ["name", "slug"])
@pytest.mark.parametrize("value", ["", "   ", None])
def test_blank_required_field_rejected_at_construction(field, value):
    values = {"id": "a1", "name": "Acme", "slug": "acme", field: value}

    with pytest.raises(AccountValidationError) as exc_info:
        AccountModel(**values)

    assert exc_info.value.field == field


def test_blank_name_rejected_on_assignment():
    account = AccountModel(id="a1", name="Acme", slug="acme")

    with pytest.raises(AccountValidationError):
        account.name = ""

    assert account.name == "Acme"


def test_repr():
    account = AccountModel(id="a1", name="Acme", slug="acme")
    assert repr(account) == "<Account(id=a1, slug=acme)>"


def test_webhook_secret_cannot_be_replaced():
    account = AccountModel(id="a1", name="Acme", slug="acme", webhook_secret="a" * 32)

    account.webhook_secret = "a" * 32
    with pytest.raises(AccountValidationError) as exc_info:
        account.webhook_secret = "b" * 32

    assert exc_info.value.field == "webhook_secret"
    assert account.webhook_secret == "a" * 32


def test_subscription_id_is_set_once():
    account = AccountModel(id="a1", name="Acme", slug="acme")

    account.chargify_subscription_id = 555
    with pytest.raises(AccountValidationError):
        account.chargify_subscription_id = 999

    assert account.chargify_subscription_id == 555
