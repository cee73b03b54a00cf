"""
FastAPI dependencies - Dependency injection factories.

This module provides Depends() factories for injecting
domain services and infrastructure adapters into routes.
Each request gets its own workflow and form instance; the session
store is shared process-wide.
"""

from fastapi import Depends, Request
from psycopg_pool import AsyncConnectionPool

from src.adapters.auth.postgres import PostgresAuthProvider
from src.adapters.navigation.console import ConsoleNavigator
from src.adapters.repository.postgres import PostgresAccountDirectory
from src.adapters.session.file import FileSessionStore
from src.config.settings import get_settings
from src.domain.form import RegistrationForm
from src.domain.registration import RegistrationWorkflow


def get_pool(request: Request) -> AsyncConnectionPool:
    """
    Get connection pool from app state.

    The pool is created during app lifespan startup and stored in app.state.
    """
    return request.app.state.pool


def get_session_store(request: Request) -> FileSessionStore:
    """Get the process-wide session store from app state."""
    return request.app.state.session_store


def get_directory(request: Request) -> PostgresAccountDirectory:
    """Create account directory with connection pool from app state."""
    return PostgresAccountDirectory(get_pool(request))


def get_auth_provider(request: Request) -> PostgresAuthProvider:
    """Create auth provider with connection pool from app state."""
    settings = get_settings()
    return PostgresAuthProvider(
        get_pool(request),
        min_password_length=settings.password_min_length,
        bcrypt_cost=settings.bcrypt_cost,
    )


def get_registration_workflow(request: Request) -> RegistrationWorkflow:
    """
    Create registration workflow with injected dependencies.

    Wires together the directory, auth provider and session store.
    """
    settings = get_settings()
    return RegistrationWorkflow(
        directory=get_directory(request),
        auth_provider=get_auth_provider(request),
        session_store=get_session_store(request),
        password_min_length=settings.password_min_length,
        call_timeout=settings.call_timeout_seconds,
    )


def get_navigator() -> ConsoleNavigator:
    """Create a navigator positioned on the registration screen."""
    return ConsoleNavigator(initial_screen="RegisterScreen")


def get_registration_form(
    workflow: RegistrationWorkflow = Depends(get_registration_workflow),
    navigator: ConsoleNavigator = Depends(get_navigator),
) -> RegistrationForm:
    """Create a form instance bound to this request's workflow and navigator."""
    settings = get_settings()
    return RegistrationForm(
        workflow,
        navigator,
        next_screen=settings.next_screen,
        login_screen=settings.login_screen,
    )
