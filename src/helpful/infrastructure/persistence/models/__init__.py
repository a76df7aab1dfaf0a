"""SQLAlchemy models for Helpful.

Importing this package registers every table with ``Base.metadata``.
"""

from helpful.infrastructure.persistence.models.account import AccountModel
from helpful.infrastructure.persistence.models.billing_plan import BillingPlanModel
from helpful.infrastructure.persistence.models.conversation import ConversationModel
from helpful.infrastructure.persistence.models.membership import (
    MEMBER_ROLE,
    OWNER_ROLE,
    MembershipModel,
)
from helpful.infrastructure.persistence.models.person import PersonModel
from helpful.infrastructure.persistence.models.user import UserModel
from helpful.infrastructure.persistence.models.webhook import WebhookModel

__all__ = [
    "AccountModel",
    "BillingPlanModel",
    "ConversationModel",
    "MEMBER_ROLE",
    "MembershipModel",
    "OWNER_ROLE",
    "PersonModel",
    "UserModel",
    "WebhookModel",
]
