"""
Domain exceptions - Semantic error types for registration.

This module defines domain-specific exceptions that communicate
business rule violations without leaking infrastructure details.
Every error is terminal for the submission attempt that raised it.
"""

from .models import ValidationResult
from .ports import AuthErrorReason


class RegistrationError(Exception):
    """Base class for registration domain errors."""

    pass


class ValidationFailed(RegistrationError):
    """One or more form fields failed local validation."""

    def __init__(self, errors: ValidationResult) -> None:
        super().__init__(", ".join(sorted(errors)))
        self.errors = dict(errors)


class UserNameTaken(RegistrationError):
    """Another profile already uses this exact username."""

    def __init__(self, user_name: str) -> None:
        super().__init__(user_name)
        self.user_name = user_name


class AuthError(RegistrationError):
    """The auth provider rejected or failed an account operation."""

    def __init__(self, reason: AuthErrorReason, detail: str = "") -> None:
        super().__init__(f"{reason.value}: {detail}" if detail else reason.value)
        self.reason = reason
        self.detail = detail


class DirectoryError(RegistrationError):
    """Base class for account directory faults."""

    pass


class DirectoryLookupError(DirectoryError):
    """Username availability could not be determined."""

    pass


class DirectoryWriteError(DirectoryError):
    """
    Profile write failed after the auth account was created.

    The auth account identified by ``account_id`` is orphaned and must be
    reconciled by an operator.
    """

    def __init__(self, account_id: str | None = None, detail: str = "") -> None:
        super().__init__(detail or f"profile write failed for {account_id}")
        self.account_id = account_id


class SessionWriteError(RegistrationError):
    """Session credentials could not be persisted."""

    pass


class RegistrationInProgress(RegistrationError):
    """A submission is already in flight for this form instance."""

    pass
