"""Unit tests for AccountRepository against the in-memory database."""

import uuid

import pytest
from sqlalchemy import func, select

from helpful.core.exceptions import AccountValidationError
from helpful.infrastructure.persistence.models import (
    AccountModel,
    ConversationModel,
    MembershipModel,
    PersonModel,
    UserModel,
    WebhookModel,
)
from helpful.infrastructure.persistence.repositories import AccountRepository


def _id() -> str:
    return str(uuid.uuid4())


async def _count(session, model) -> int:
    result = await session.execute(select(func.count()).select_from(model))
    return result.scalar_one()


@pytest.fixture
def account_repo(db_session):
    return AccountRepository(db_session)


@pytest.mark.asyncio
async def test_get_by_slug(account_repo, account):
    assert await account_repo.get_by_slug("acme") is account
    assert await account_repo.get_by_slug("other") is None


@pytest.mark.asyncio
async def test_slug_exists(account_repo, account):
    assert await account_repo.slug_exists("acme") is True
    assert await account_repo.slug_exists("acme-2") is False


@pytest.mark.asyncio
async def test_update_writes_fields(account_repo, account, db_session):
    await account_repo.update(account, billing_status="active", chargify_customer_id=9)
    await db_session.commit()
    await db_session.refresh(account)

    assert account.billing_status == "active"
    assert account.chargify_customer_id == 9


@pytest.mark.asyncio
async def test_list_users_through_memberships(account_repo, account, db_session):
    member = UserModel(id=_id(), email="b@example.com")
    owner = UserModel(id=_id(), email="a@example.com")
    outsider = UserModel(id=_id(), email="c@example.com")
    db_session.add_all([member, owner, outsider])
    db_session.add_all(
        [
            MembershipModel(id=_id(), account_id=account.id, user_id=owner.id, role="owner"),
            MembershipModel(id=_id(), account_id=account.id, user_id=member.id),
        ]
    )
    await db_session.commit()

    users = await account_repo.list_users(account.id)

    assert [user.email for user in users] == ["a@example.com", "b@example.com"]


@pytest.mark.asyncio
async def test_delete_removes_owned_rows(account_repo, account, db_session):
    other = AccountModel(id=_id(), slug="other", name="Other", webhook_secret="f" * 32)
    user = UserModel(id=_id(), email="agent@example.com")
    db_session.add_all([other, user])
    await db_session.flush()
    db_session.add_all(
        [
            ConversationModel(id=_id(), account_id=account.id, subject="Help"),
            ConversationModel(id=_id(), account_id=account.id, subject="Again"),
            ConversationModel(id=_id(), account_id=other.id, subject="Other"),
            PersonModel(id=_id(), account_id=account.id, email="customer@example.com"),
            MembershipModel(id=_id(), account_id=account.id, user_id=user.id),
            MembershipModel(id=_id(), account_id=other.id, user_id=user.id),
            WebhookModel(id=_id(), account_id=account.id, url="https://hooks.example/1"),
        ]
    )
    await db_session.commit()

    deleted = await account_repo.delete(account)
    await db_session.commit()

    assert deleted == {"conversations": 2, "people": 1, "memberships": 1, "webhooks": 1}
    assert await account_repo.get_by_id("9b2f8c1e-4d3a-4f6b-8e2d-1a2b3c4d5e6f") is None
    assert await account_repo.get_by_id(other.id) is other
    assert await _count(db_session, ConversationModel) == 1
    assert await _count(db_session, PersonModel) == 0
    assert await _count(db_session, MembershipModel) == 1
    assert await _count(db_session, WebhookModel) == 0
    assert await _count(db_session, UserModel) == 1


@pytest.mark.asyncio
async def test_update_refuses_to_overwrite_write_once_fields(account_repo, account):
    await account_repo.update(account, chargify_subscription_id=555)

    with pytest.raises(AccountValidationError):
        await account_repo.update(account, chargify_subscription_id=999)
    with pytest.raises(AccountValidationError):
        await account_repo.update(account, webhook_secret="f" * 32)

    assert account.chargify_subscription_id == 555
    assert account.webhook_secret == "0123456789abcdef0123456789abcdef"
