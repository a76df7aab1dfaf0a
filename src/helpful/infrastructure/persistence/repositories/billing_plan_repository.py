"""Billing plan repository for database operations."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from helpful.infrastructure.persistence.models import BillingPlanModel


class BillingPlanRepository:
    """Repository for billing plan lookups."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get_by_slug(self, slug: str | None) -> BillingPlanModel | None:
        """Get a billing plan by its Chargify product handle.

        Args:
            slug: Product handle. ``None`` never matches.

        Returns:
            Billing plan model if found, None otherwise.
        """
        if not slug:
            return None
        result = await self.session.execute(
            select(BillingPlanModel).where(BillingPlanModel.slug == slug)
        )
        return result.scalar_one_or_none()

    async def list_all(self) -> list[BillingPlanModel]:
        """Get every billing plan ordered by slug."""
        result = await self.session.execute(
            select(BillingPlanModel).order_by(BillingPlanModel.slug)
        )
        return list(result.scalars().all())
