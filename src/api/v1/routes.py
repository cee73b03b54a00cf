"""
API v1 routes.

Defines REST endpoints for the registration API.
"""

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import JSONResponse

from src.adapters.navigation.console import ConsoleNavigator
from src.api.dependencies import get_navigator, get_registration_form
from src.api.models import (
    ErrorResponse,
    RegisterRequest,
    RegisterResponse,
    ValidateResponse,
    ValidationErrorResponse,
    to_client_errors,
)
from src.config.settings import get_settings
from src.domain.exceptions import (
    AuthError,
    DirectoryError,
    RegistrationError,
    RegistrationInProgress,
    SessionWriteError,
    UserNameTaken,
    ValidationFailed,
)
from src.domain.form import RegistrationForm, describe_error
from src.domain.models import FIELD_NAMES
from src.domain.ports import AuthErrorReason
from src.domain.validation import validate_all

router = APIRouter(tags=["v1"])

_AUTH_STATUS = {
    AuthErrorReason.EMAIL_IN_USE: status.HTTP_409_CONFLICT,
    AuthErrorReason.WEAK_PASSWORD: status.HTTP_422_UNPROCESSABLE_ENTITY,
    AuthErrorReason.NETWORK: status.HTTP_503_SERVICE_UNAVAILABLE,
    AuthErrorReason.UNKNOWN: status.HTTP_502_BAD_GATEWAY,
}


def _status_for(exc: RegistrationError) -> int:
    if isinstance(exc, (UserNameTaken, RegistrationInProgress)):
        return status.HTTP_409_CONFLICT
    if isinstance(exc, AuthError):
        return _AUTH_STATUS[exc.reason]
    if isinstance(exc, DirectoryError):
        return status.HTTP_502_BAD_GATEWAY
    if isinstance(exc, SessionWriteError):
        return status.HTTP_500_INTERNAL_SERVER_ERROR
    return status.HTTP_400_BAD_REQUEST


@router.post(
    "/register",
    response_model=RegisterResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        409: {"model": ErrorResponse, "description": "Username or email already in use"},
        422: {"model": ValidationErrorResponse, "description": "Invalid form fields"},
        502: {"model": ErrorResponse, "description": "Directory or provider failure"},
        503: {"model": ErrorResponse, "description": "Provider unreachable"},
    },
    summary="Register a new user",
    description="Validate the registration form, check the username is free, "
    "create the account and cache the session credentials.",
)
async def register(
    request_data: RegisterRequest,
    form: RegistrationForm = Depends(get_registration_form),
    navigator: ConsoleNavigator = Depends(get_navigator),
):
    """
    Register a new user.

    - **userName**: Unique, case-sensitive username
    - **email**: Valid email address
    - **password**: Password (minimum length from settings)
    - **confirmPassword**: Must equal password

    Returns the created account and the screen to continue onboarding with.
    """
    values = request_data.to_input()
    for field_name in FIELD_NAMES:
        form.change(field_name, getattr(values, field_name))

    account = await form.submit()
    if account is not None:
        return RegisterResponse(
            user_id=account.user_id,
            user_name=account.user_name,
            email=account.email,
            next_screen=navigator.current_screen,
        )

    error = form.submit_error or RegistrationInProgress(values.user_name)
    if isinstance(error, ValidationFailed):
        body = ValidationErrorResponse(
            detail=describe_error(error),
            errors=to_client_errors(error.errors),
        )
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content=body.model_dump(),
        )

    raise HTTPException(status_code=_status_for(error), detail=describe_error(error)) from None


@router.post(
    "/validate",
    response_model=ValidateResponse,
    summary="Validate registration fields",
    description="Run the local field rules without touching any remote service.",
)
async def validate(request_data: RegisterRequest) -> ValidateResponse:
    """Return per-field errors for the submitted form values."""
    settings = get_settings()
    errors = validate_all(
        request_data.to_input(),
        password_min_length=settings.password_min_length,
    )
    return ValidateResponse(valid=not errors, errors=to_client_errors(errors))
