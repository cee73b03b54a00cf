"""
Shared test fixtures and configuration.

This module provides pytest fixtures for:
- Mocked registration collaborators (directory, auth provider, session store)
- Valid registration input
- Database pool for integration and adversarial tests (skipped when
  PostgreSQL is unreachable)
"""

from collections.abc import AsyncGenerator
from unittest.mock import AsyncMock, Mock

import psycopg
import pytest
import pytest_asyncio
from psycopg_pool import AsyncConnectionPool

from src.adapters.repository.postgres import run_migrations
from src.config.settings import get_settings
from src.domain.models import RegistrationInput
from src.domain.ports import AccountHandle


@pytest.fixture
def valid_input() -> RegistrationInput:
    """Submit-eligible registration input."""
    return RegistrationInput(
        user_name="alice",
        email="a@b.com",
        password="secret1",
        confirm_password="secret1",
    )


@pytest.fixture
def handle() -> AccountHandle:
    """Account handle as returned by create_account."""
    return AccountHandle(account_id="acct-1", email="a@b.com")


@pytest.fixture
def collaborators(handle: AccountHandle) -> Mock:
    """
    Directory, auth provider and session store attached to one parent mock.

    Attaching them to a single parent records every call in
    ``parent.mock_calls`` so tests can assert cross-collaborator order.
    """
    parent = Mock()

    directory = AsyncMock()
    directory.is_user_name_available.return_value = True
    directory.write_profile.return_value = None

    auth_provider = AsyncMock()
    auth_provider.create_account.return_value = handle
    auth_provider.set_display_name.return_value = AccountHandle(
        account_id=handle.account_id, email=handle.email, display_name="alice"
    )

    session_store = AsyncMock()
    session_store.put.return_value = None

    parent.attach_mock(directory, "directory")
    parent.attach_mock(auth_provider, "auth_provider")
    parent.attach_mock(session_store, "session_store")
    return parent


@pytest.fixture(scope="session")
def require_database() -> str:
    """Skip the requesting test unless PostgreSQL accepts connections."""
    settings = get_settings()
    try:
        with psycopg.connect(settings.database_url, connect_timeout=2):
            pass
    except psycopg.OperationalError as e:
        pytest.skip(f"PostgreSQL not available: {e}")
    return settings.database_url


@pytest_asyncio.fixture
async def pool(require_database: str) -> AsyncGenerator[AsyncConnectionPool, None]:
    """Create a migrated, empty database pool for one test."""
    pool = AsyncConnectionPool(conninfo=require_database, min_size=1, max_size=5, open=False)
    await pool.open()
    await run_migrations(pool)
    async with pool.connection() as conn:
        await conn.execute("DELETE FROM profiles")
        await conn.execute("DELETE FROM accounts")
    yield pool
    await pool.close()
