"""Domain services for Helpful.

Services hold the business logic around accounts: lifecycle, mailbox
routing and billing synchronization.
"""

from helpful.domain.services.account_service import (
    AccountService,
    generate_webhook_secret,
)
from helpful.domain.services.billing_service import BillingService
from helpful.domain.services.mailbox import (
    MAILBOX_PATTERN,
    build_mailbox,
    extract_mailbox_slug,
    parse_address,
)
from helpful.domain.services.slug_generator import (
    SlugGenerator,
    SlugValidationError,
)

__all__ = [
    "AccountService",
    "BillingService",
    "MAILBOX_PATTERN",
    "SlugGenerator",
    "SlugValidationError",
    "build_mailbox",
    "extract_mailbox_slug",
    "generate_webhook_secret",
    "parse_address",
]
