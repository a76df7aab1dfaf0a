"""Exceptions shared by the domain and persistence layers."""


class HelpfulError(Exception):
    """Base class for all Helpful errors."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class AccountNotFoundError(HelpfulError, LookupError):
    """Raised when no account matches an ID, slug or mailbox address."""

    def __init__(self, message: str = "Account not found") -> None:
        super().__init__(message)


class AccountValidationError(HelpfulError, ValueError):
    """Raised when an account is given a missing or invalid field."""

    def __init__(self, field: str, message: str) -> None:
        self.field = field
        super().__init__(f"{field}: {message}")


class OwnerAssignmentError(HelpfulError):
    """Raised when the owner of a new account could not be saved.

    The account insert is rolled back together with the owner.
    """


class BillingProviderError(HelpfulError):
    """Raised inside a billing provider when a request fails."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.status_code = status_code
        super().__init__(message)
