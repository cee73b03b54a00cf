"""
Registration form controller.

Holds the state of one registration form instance: current values,
field errors, touched fields and the outcome of the last submission.
Validation is recomputed on every change; submission is delegated to
RegistrationWorkflow and navigation happens only after it succeeds.
"""

import logging
from dataclasses import replace

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
from .models import FIELD_NAMES, RegisteredAccount, RegistrationInput, ValidationResult
from .ports import AuthErrorReason, Navigator
from .registration import RegistrationWorkflow
from .validation import validate_all

logger = logging.getLogger(__name__)

DEFAULT_NEXT_SCREEN = "NameScreen"
DEFAULT_LOGIN_SCREEN = "LogInScreen"

_AUTH_MESSAGES = {
    AuthErrorReason.EMAIL_IN_USE: "An account with this email already exists.",
    AuthErrorReason.WEAK_PASSWORD: "Password is too weak.",
    AuthErrorReason.NETWORK: "Network error, please try again.",
    AuthErrorReason.UNKNOWN: "Registration failed, please try again.",
}


def describe_error(exc: RegistrationError) -> str:
    """Map a registration error to a message suitable for the user."""
    if isinstance(exc, ValidationFailed):
        return "Please fix the highlighted fields."
    if isinstance(exc, UserNameTaken):
        return f"{exc.user_name} is already taken."
    if isinstance(exc, AuthError):
        return _AUTH_MESSAGES[exc.reason]
    if isinstance(exc, DirectoryWriteError):
        return "Your account was created but your profile could not be saved. Please contact support."
    if isinstance(exc, DirectoryLookupError):
        return "Could not check username availability, please try again."
    if isinstance(exc, SessionWriteError):
        return "Your account was created but you will need to log in again."
    if isinstance(exc, RegistrationInProgress):
        return "Registration already in progress."
    return "Registration failed, please try again."


class CancellationToken:
    """Flag shared with an in-flight attempt; set when its owner goes away."""

    def __init__(self) -> None:
        self._cancelled = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        self._cancelled = True


class RegistrationForm:
    """
    One registration form instance.

    Values are preserved across failed submissions. After dispose(),
    completions of in-flight submissions are ignored.
    """

    def __init__(
        self,
        workflow: RegistrationWorkflow,
        navigator: Navigator,
        next_screen: str = DEFAULT_NEXT_SCREEN,
        login_screen: str = DEFAULT_LOGIN_SCREEN,
    ) -> None:
        self._workflow = workflow
        self._navigator = navigator
        self._next_screen = next_screen
        self._login_screen = login_screen
        self._token = CancellationToken()
        self.values = RegistrationInput()
        self.errors: ValidationResult = self._validate()
        self.touched: set[str] = set()
        self.submit_error: RegistrationError | None = None

    @property
    def is_submitting(self) -> bool:
        return self._workflow.in_progress

    @property
    def disposed(self) -> bool:
        return self._token.cancelled

    @property
    def submit_message(self) -> str | None:
        """User-facing text for the last failed submission, if any."""
        if self.submit_error is None:
            return None
        return describe_error(self.submit_error)

    @property
    def visible_errors(self) -> ValidationResult:
        """Errors of fields the user has already left."""
        return {name: msg for name, msg in self.errors.items() if name in self.touched}

    def change(self, field_name: str, value: str) -> None:
        """Update one field and revalidate the whole form."""
        if field_name not in FIELD_NAMES:
            raise ValueError(f"Unknown registration field: {field_name}")
        self.values = replace(self.values, **{field_name: value})
        self.errors = self._validate()

    def blur(self, field_name: str) -> None:
        if field_name not in FIELD_NAMES:
            raise ValueError(f"Unknown registration field: {field_name}")
        self.touched.add(field_name)

    def reset(self) -> None:
        self.values = RegistrationInput()
        self.errors = self._validate()
        self.touched = set()
        self.submit_error = None

    def go_to_login(self) -> None:
        self._navigator.navigate(self._login_screen)

    def dispose(self) -> None:
        self._token.cancel()

    async def submit(self) -> RegisteredAccount | None:
        """
        Submit the current values.

        Returns:
            The registered account, or None if the submission failed, was
            ignored because another one is in flight, or completed after
            the form was disposed
        """
        if self._token.cancelled:
            logger.debug("Ignoring submit on a disposed form")
            return None
        if self.is_submitting:
            logger.debug("Ignoring submit while another submission is in flight")
            return None

        self.touched = set(FIELD_NAMES)
        self.errors = self._validate()
        token = self._token

        try:
            account = await self._workflow.submit(self.values)
        except RegistrationError as exc:
            if token.cancelled:
                logger.debug("Form disposed before submission failed: %s", exc)
                return None
            self.submit_error = exc
            return None

        if token.cancelled:
            logger.debug("Form disposed before account %s completed", account.user_id)
            return account

        self._navigator.replace(self._next_screen)
        self.reset()
        return account

    def _validate(self) -> ValidationResult:
        return validate_all(self.values, password_min_length=self._workflow.password_min_length)
