"""
Registration domain service - Submission workflow.

This module contains the core business logic for user registration:
the ordered sequence of checks and side effects that turns a filled-in
form into a created account.

Submission Sequence (fail-fast, no retries, no compensation)
============================================================

1. Validate every field locally          -> ValidationFailed
2. Check username availability           -> UserNameTaken / DirectoryLookupError
3. Create the auth account               -> AuthError
4. Set the account's display name        -> AuthError (account is not rolled back)
5. Write the directory profile           -> DirectoryWriteError (orphaned account)
6. Persist session credentials           -> SessionWriteError
7. Return the RegisteredAccount

Attempt States:
    IDLE -> VALIDATING -> (REJECTED | CHECKING_UNIQUENESS)
         -> (TAKEN | CREATING) -> (FAILED | PERSISTING) -> (FAILED | COMPLETE)

Only one attempt may be in flight per workflow instance. The in-progress
flag is set before the first remote call and cleared on every terminal
outcome.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import TypeVar

from .exceptions import (
    AuthError,
    DirectoryLookupError,
    DirectoryWriteError,
    RegistrationError,
    RegistrationInProgress,
    SessionWriteError,
    UserNameTaken,
    ValidationFailed,
)
from .models import RegisteredAccount, RegistrationInput, SessionCredentials
from .ports import (
    AccountDirectory,
    AuthErrorReason,
    AuthProvider,
    RegistrationState,
    SessionStore,
)
from .validation import DEFAULT_PASSWORD_MIN_LENGTH, validate_all

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _auth_error(exc: Exception) -> AuthError:
    # asyncio.TimeoutError and ConnectionError are both OSError subclasses on 3.11+
    if isinstance(exc, (asyncio.TimeoutError, OSError)):
        return AuthError(AuthErrorReason.NETWORK, str(exc) or type(exc).__name__)
    return AuthError(AuthErrorReason.UNKNOWN, str(exc) or type(exc).__name__)


@dataclass
class RegistrationWorkflow:
    """
    Domain service for user registration.

    Orchestrates validation, username uniqueness, account creation,
    profile persistence and session caching.
    """

    directory: AccountDirectory
    auth_provider: AuthProvider
    session_store: SessionStore
    password_min_length: int = DEFAULT_PASSWORD_MIN_LENGTH
    call_timeout: float | None = None  # Seconds per collaborator call; None = no limit

    _in_progress: bool = field(default=False, init=False, repr=False)
    _state: RegistrationState = field(default=RegistrationState.IDLE, init=False, repr=False)

    @property
    def in_progress(self) -> bool:
        """True while a submission is between its first remote call and a terminal outcome."""
        return self._in_progress

    @property
    def state(self) -> RegistrationState:
        """Last state reached by the most recent attempt."""
        return self._state

    async def submit(self, values: RegistrationInput) -> RegisteredAccount:
        """
        Run one registration attempt.

        Args:
            values: Form values to register

        Returns:
            The registered account

        Raises:
            RegistrationInProgress: If another attempt is still in flight
            ValidationFailed: If any field is invalid (no remote calls made)
            UserNameTaken: If the username is already used
            DirectoryLookupError: If availability could not be checked
            AuthError: If account creation or display-name update failed
            DirectoryWriteError: If the profile write failed (auth account orphaned)
            SessionWriteError: If session credentials could not be stored
        """
        if self._in_progress:
            raise RegistrationInProgress(values.user_name)

        self._state = RegistrationState.VALIDATING
        errors = validate_all(values, password_min_length=self.password_min_length)
        if errors:
            self._state = RegistrationState.REJECTED
            raise ValidationFailed(errors)

        self._in_progress = True
        try:
            account = await self._register(values)
        except UserNameTaken:
            self._state = RegistrationState.TAKEN
            raise
        except RegistrationError:
            self._state = RegistrationState.FAILED
            raise
        finally:
            self._in_progress = False

        self._state = RegistrationState.COMPLETE
        logger.info("Registered account %s for user %s", account.user_id, account.user_name)
        return account

    async def _register(self, values: RegistrationInput) -> RegisteredAccount:
        self._state = RegistrationState.CHECKING_UNIQUENESS
        available = await self._call(
            self.directory.is_user_name_available(values.user_name),
            lambda exc: DirectoryLookupError(str(exc) or type(exc).__name__),
        )
        if not available:
            logger.info("Username already taken: %s", values.user_name)
            raise UserNameTaken(values.user_name)

        self._state = RegistrationState.CREATING
        try:
            handle = await self._call(
                self.auth_provider.create_account(values.email, values.password),
                _auth_error,
            )
            handle = await self._call(
                self.auth_provider.set_display_name(handle, values.user_name),
                _auth_error,
            )
        except AuthError as exc:
            logger.warning("Account creation failed for %s: %s", values.email, exc.reason.value)
            raise

        self._state = RegistrationState.PERSISTING
        try:
            await self._call(
                self.directory.write_profile(handle.account_id, values.email, values.user_name),
                lambda exc: DirectoryWriteError(handle.account_id, str(exc)),
            )
        except DirectoryWriteError as exc:
            if exc.account_id is None:
                exc.account_id = handle.account_id
            logger.error("Profile write failed, auth account %s is orphaned", handle.account_id)
            raise

        credentials = SessionCredentials(email=values.email, password=values.password)
        for key, value in credentials.items():
            await self._call(
                self.session_store.put(key, value),
                lambda exc: SessionWriteError(str(exc) or type(exc).__name__),
            )

        return RegisteredAccount(
            user_id=handle.account_id,
            user_name=values.user_name,
            email=values.email,
        )

    async def _call(
        self,
        awaitable: Awaitable[T],
        translate: Callable[[Exception], RegistrationError],
    ) -> T:
        """
        Await a collaborator call, applying the per-call timeout.

        Domain errors raised by adapters pass through unchanged; any other
        failure is translated into the error kind of the current step.
        """
        try:
            if self.call_timeout is None:
                return await awaitable
            return await asyncio.wait_for(awaitable, timeout=self.call_timeout)
        except RegistrationError:
            raise
        except Exception as exc:
            raise translate(exc) from exc
