"""Pytest configuration for all tests."""

from datetime import datetime, timezone
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from helpful.core.config import get_settings
from helpful.infrastructure.persistence.database import Base
from helpful.infrastructure.persistence.models import (
    AccountModel,
    BillingPlanModel,
)


@pytest.fixture(autouse=True)
def _clear_settings_cache():
    """Settings are cached per process; start every test from the environment."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest_asyncio.fixture
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """Create a test database session.

    Uses an in-memory SQLite database. ``expire_on_commit`` is off, as in
    the application session factory, so committed objects stay readable.
    """
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=False,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async_session_maker = async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async with async_session_maker() as session:
        session.add_all(
            [
                BillingPlanModel(slug="free", name="Free"),
                BillingPlanModel(slug="team", name="Team"),
            ]
        )
        await session.commit()

    async with async_session_maker() as session:
        yield session
        await session.rollback()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest_asyncio.fixture
async def account(db_session: AsyncSession) -> AccountModel:
    """A persisted account with no billing data."""
    account = AccountModel(
        id="9b2f8c1e-4d3a-4f6b-8e2d-1a2b3c4d5e6f",
        slug="acme",
        name="Acme Inc",
        webhook_secret="0123456789abcdef0123456789abcdef",
    )
    db_session.add(account)
    await db_session.commit()
    return account


@pytest.fixture
def now() -> datetime:
    return datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)
