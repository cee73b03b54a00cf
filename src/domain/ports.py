"""
Port interfaces - Protocol definitions for infrastructure abstraction.

This module defines the interfaces (ports) that the domain requires
from infrastructure. Adapters implement these protocols.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Protocol


class RegistrationState(str, Enum):
    """
    States of a single submission attempt.

    Transitions:
    - IDLE -> VALIDATING
    - VALIDATING -> REJECTED | CHECKING_UNIQUENESS
    - CHECKING_UNIQUENESS -> TAKEN | CREATING | FAILED
    - CREATING -> FAILED | PERSISTING
    - PERSISTING -> FAILED | COMPLETE

    REJECTED, TAKEN, FAILED and COMPLETE end the attempt. A new attempt
    always starts again from IDLE.
    """

    IDLE = "IDLE"
    VALIDATING = "VALIDATING"
    REJECTED = "REJECTED"
    CHECKING_UNIQUENESS = "CHECKING_UNIQUENESS"
    TAKEN = "TAKEN"
    CREATING = "CREATING"
    FAILED = "FAILED"
    PERSISTING = "PERSISTING"
    COMPLETE = "COMPLETE"


class AuthErrorReason(str, Enum):
    """Why the auth provider refused an operation."""

    EMAIL_IN_USE = "email_in_use"
    WEAK_PASSWORD = "weak_password"
    NETWORK = "network"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class AccountHandle:
    """Account as issued by the auth provider."""

    account_id: str
    email: str
    display_name: str | None = None


class AccountDirectory(Protocol):
    """Port interface for the queryable profile directory."""

    async def is_user_name_available(self, user_name: str) -> bool:
        """
        Check whether no existing profile uses this username.

        Comparison is case-sensitive and exact.

        Raises:
            DirectoryLookupError: On any transport/storage fault
        """
        ...

    async def write_profile(self, account_id: str, email: str, user_name: str) -> None:
        """
        Persist the profile record keyed by the provider's account id.

        Raises:
            DirectoryWriteError: On any transport/storage fault
        """
        ...


class AuthProvider(Protocol):
    """Port interface for account creation."""

    async def create_account(self, email: str, password: str) -> AccountHandle:
        """
        Create an account with email/password credentials.

        Raises:
            AuthError: EMAIL_IN_USE, WEAK_PASSWORD, NETWORK or UNKNOWN
        """
        ...

    async def set_display_name(self, handle: AccountHandle, name: str) -> AccountHandle:
        """
        Set the account's display name.

        Returns:
            Handle carrying the new display name

        Raises:
            AuthError: On any provider failure
        """
        ...


class SessionStore(Protocol):
    """Port interface for key-value storage that survives restarts."""

    async def put(self, key: str, value: str) -> None:
        """
        Store ``value`` under ``key``, overwriting any earlier value.

        Raises:
            SessionWriteError: If the value could not be persisted
        """
        ...


class Navigator(Protocol):
    """Port interface for screen transitions (output sink only)."""

    def replace(self, screen_id: str) -> None:
        """Replace the current screen, dropping it from history."""
        ...

    def navigate(self, screen_id: str) -> None:
        """Push a screen on top of the current one."""
        ...
