"""
Registration input validation.

Pure, synchronous field rules. Validation knows nothing about remote
state: username uniqueness is checked by the workflow, not here.
"""

from email_validator import EmailNotValidError
from email_validator import validate_email as _check_email

from .models import FIELD_NAMES, RegistrationInput, ValidationResult

DEFAULT_PASSWORD_MIN_LENGTH = 6


def validate_email(value: str) -> bool:
    """
    Return True iff ``value`` is a syntactically valid email address.

    Deliverability (DNS) is not checked.
    """
    try:
        _check_email(value, check_deliverability=False)
    except EmailNotValidError:
        return False
    return True


def validate_field(
    field_name: str,
    value: str,
    all_values: RegistrationInput,
    *,
    password_min_length: int = DEFAULT_PASSWORD_MIN_LENGTH,
) -> str | None:
    """
    Validate a single field.

    Args:
        field_name: One of FIELD_NAMES
        value: Current value of that field
        all_values: Whole form, needed for cross-field rules
        password_min_length: Minimum accepted password length

    Returns:
        Human-readable error message, or None if the field is valid

    Raises:
        ValueError: If field_name is not a registration field
    """
    if field_name == "user_name":
        if not value:
            return "Username is required!"
        return None

    if field_name == "email":
        if not value:
            return "Email is required!"
        if not validate_email(value):
            return "Invalid email!"
        return None

    if field_name == "password":
        if not value:
            return "Password is required!"
        if len(value) < password_min_length:
            return f"Password must be at least {password_min_length} characters!"
        return None

    if field_name == "confirm_password":
        if not value:
            return "Please confirm your password!"
        if value != all_values.password:
            return "Passwords do not match!"
        return None

    raise ValueError(f"Unknown registration field: {field_name}")


def validate_all(
    values: RegistrationInput,
    *,
    password_min_length: int = DEFAULT_PASSWORD_MIN_LENGTH,
) -> ValidationResult:
    """Validate every field; the result only contains fields with errors."""
    errors: ValidationResult = {}
    for field_name in FIELD_NAMES:
        message = validate_field(
            field_name,
            getattr(values, field_name),
            values,
            password_min_length=password_min_length,
        )
        if message is not None:
            errors[field_name] = message
    return errors


def is_submit_eligible(
    values: RegistrationInput,
    *,
    password_min_length: int = DEFAULT_PASSWORD_MIN_LENGTH,
) -> bool:
    return not validate_all(values, password_min_length=password_min_length)
