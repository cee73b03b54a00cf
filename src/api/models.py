"""
API request and response models.

Pydantic models for FastAPI endpoint validation and OpenAPI schema generation.
Request fields use the camelCase names of the client form; field-level
validation is left to the domain so errors come back per field.
"""

from pydantic import BaseModel, ConfigDict, Field

from src.domain.models import RegistrationInput

# Domain field name -> client field name
FIELD_ALIASES: dict[str, str] = {
    "user_name": "userName",
    "email": "email",
    "password": "password",
    "confirm_password": "confirmPassword",
}


def to_client_errors(errors: dict[str, str]) -> dict[str, str]:
    """Rename domain field keys to client field names."""
    return {FIELD_ALIASES.get(name, name): message for name, message in errors.items()}


class RegisterRequest(BaseModel):
    """Request model for user registration."""

    model_config = ConfigDict(populate_by_name=True)

    user_name: str = Field("", alias="userName", description="Unique username")
    email: str = Field("", description="Email address")
    password: str = Field("", description="Account password")
    confirm_password: str = Field("", alias="confirmPassword", description="Must equal password")

    def to_input(self) -> RegistrationInput:
        return RegistrationInput(
            user_name=self.user_name,
            email=self.email,
            password=self.password,
            confirm_password=self.confirm_password,
        )


class RegisterResponse(BaseModel):
    """Response model for successful registration."""

    user_id: str
    user_name: str
    email: str
    next_screen: str | None


class ValidateResponse(BaseModel):
    """Response model for live form validation."""

    valid: bool
    errors: dict[str, str]


class ErrorResponse(BaseModel):
    """Standard error response model."""

    detail: str


class ValidationErrorResponse(BaseModel):
    """Error response carrying per-field messages."""

    detail: str
    errors: dict[str, str]
