"""
Domain models - Value objects exchanged by the registration workflow.

Field names follow Python conventions; the API layer maps them to the
camelCase names used by the client form.
"""

from dataclasses import dataclass

# Field name -> error message. A field absent from the mapping is valid.
ValidationResult = dict[str, str]

FIELD_NAMES: tuple[str, ...] = ("user_name", "email", "password", "confirm_password")


@dataclass(frozen=True)
class RegistrationInput:
    """Values collected by the registration form."""

    user_name: str = ""
    email: str = ""
    password: str = ""
    confirm_password: str = ""


@dataclass(frozen=True)
class RegisteredAccount:
    """Result of a completed registration."""

    user_id: str
    user_name: str
    email: str


@dataclass(frozen=True)
class SessionCredentials:
    """Credentials cached for restoring the session on next startup."""

    email: str
    password: str

    def items(self) -> tuple[tuple[str, str], ...]:
        """Key/value pairs in the order they are persisted."""
        return (("email", self.email), ("password", self.password))
