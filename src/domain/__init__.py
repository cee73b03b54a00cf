"""
Domain layer - Pure business logic with zero framework imports.

This package contains the registration workflow: input validation,
username uniqueness, account creation and session persistence. It
defines its own port interfaces for infrastructure abstraction,
ensuring true hexagonal architecture decoupling.
"""

from .exceptions import (
    AuthError,
    DirectoryError,
    DirectoryLookupError,
    DirectoryWriteError,
    RegistrationError,
    RegistrationInProgress,
    SessionWriteError,
    UserNameTaken,
    ValidationFailed,
)
from .form import CancellationToken, RegistrationForm, describe_error
from .models import RegisteredAccount, RegistrationInput, SessionCredentials, ValidationResult
from .ports import (
    AccountDirectory,
    AccountHandle,
    AuthErrorReason,
    AuthProvider,
    Navigator,
    RegistrationState,
    SessionStore,
)
from .registration import RegistrationWorkflow
from .validation import is_submit_eligible, validate_all, validate_email, validate_field

__all__ = [
    "AccountDirectory",
    "AccountHandle",
    "AuthError",
    "AuthErrorReason",
    "AuthProvider",
    "CancellationToken",
    "DirectoryError",
    "DirectoryLookupError",
    "DirectoryWriteError",
    "Navigator",
    "RegisteredAccount",
    "RegistrationError",
    "RegistrationForm",
    "RegistrationInProgress",
    "RegistrationInput",
    "RegistrationState",
    "RegistrationWorkflow",
    "SessionCredentials",
    "SessionStore",
    "SessionWriteError",
    "UserNameTaken",
    "ValidationFailed",
    "ValidationResult",
    "describe_error",
    "is_submit_eligible",
    "validate_all",
    "validate_email",
    "validate_field",
]
