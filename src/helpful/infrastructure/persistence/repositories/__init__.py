"""Persistence repositories for database operations."""

from helpful.infrastructure.persistence.repositories.account_repository import (
    AccountRepository,
)
from helpful.infrastructure.persistence.repositories.billing_plan_repository import (
    BillingPlanRepository,
)
from helpful.infrastructure.persistence.repositories.membership_repository import (
    MembershipRepository,
)
from helpful.infrastructure.persistence.repositories.user_repository import (
    UserRepository,
)

__all__ = [
    "AccountRepository",
    "BillingPlanRepository",
    "MembershipRepository",
    "UserRepository",
]
