"""Core Helpful utilities.

This module exports configuration, logging and error types used
throughout the application.
"""

from helpful.core.config import Settings, get_settings
from helpful.core.exceptions import (
    AccountNotFoundError,
    AccountValidationError,
    BillingProviderError,
    HelpfulError,
    OwnerAssignmentError,
)
from helpful.core.logging import (
    bind_account_id,
    clear_context,
    configure_logging,
    get_logger,
)

__all__ = [
    "AccountNotFoundError",
    "AccountValidationError",
    "BillingProviderError",
    "HelpfulError",
    "OwnerAssignmentError",
    "Settings",
    "bind_account_id",
    "clear_context",
    "configure_logging",
    "get_logger",
    "get_settings",
]
