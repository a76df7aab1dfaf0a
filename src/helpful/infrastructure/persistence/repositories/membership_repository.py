"""Membership repository for database operations."""

import uuid

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from helpful.infrastructure.persistence.models import MEMBER_ROLE, MembershipModel


class MembershipRepository:
    """Repository for account memberships."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def create(
        self,
        account_id: str,
        user_id: str,
        role: str = MEMBER_ROLE,
    ) -> MembershipModel:
        """Add a user to an account with the given role.

        Raises:
            sqlalchemy.exc.IntegrityError: If the user is already a member.
        """
        membership = MembershipModel(
            id=str(uuid.uuid4()),
            account_id=account_id,
            user_id=user_id,
            role=role,
        )
        self.session.add(membership)
        await self.session.flush()
        return membership

    async def get(self, account_id: str, user_id: str) -> MembershipModel | None:
        result = await self.session.execute(
            select(MembershipModel).where(
                MembershipModel.account_id == account_id,
                MembershipModel.user_id == user_id,
            )
        )
        return result.scalar_one_or_none()
