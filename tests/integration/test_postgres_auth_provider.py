"""
Integration tests for PostgresAuthProvider.

Tests account creation against a real PostgreSQL database.
Requires PostgreSQL to be running (via docker-compose).
"""

import bcrypt
import pytest
from psycopg_pool import AsyncConnectionPool

from src.adapters.auth.postgres import PostgresAuthProvider
from src.domain.exceptions import AuthError
from src.domain.ports import AccountHandle, AuthErrorReason
from src.domain.validation import DEFAULT_PASSWORD_MIN_LENGTH

pytestmark = pytest.mark.integration


@pytest.fixture
def provider(pool: AsyncConnectionPool) -> PostgresAuthProvider:
    return PostgresAuthProvider(pool, min_password_length=6, bcrypt_cost=4)


class TestCreateAccount:
    """Tests for create_account method."""

    @pytest.mark.asyncio
    async def test_creates_account_with_bcrypt_hash(
        self, provider: PostgresAuthProvider, pool: AsyncConnectionPool
    ) -> None:
        """Password is stored as a verifiable bcrypt hash, never in plaintext."""
        handle = await provider.create_account("a@b.com", "secret1")

        async with pool.connection() as conn, conn.cursor() as cursor:
            await cursor.execute(
                "SELECT email, password_hash FROM accounts WHERE id = %s", (handle.account_id,)
            )
            email, password_hash = await cursor.fetchone()

        assert email == "a@b.com"
        assert password_hash != "secret1"
        assert bcrypt.checkpw(b"secret1", password_hash.encode())

    @pytest.mark.asyncio
    async def test_handle_has_string_id(self, provider: PostgresAuthProvider) -> None:
        handle = await provider.create_account("a@b.com", "secret1")

        assert isinstance(handle.account_id, str)
        assert handle.email == "a@b.com"
        assert handle.display_name is None

    @pytest.mark.asyncio
    async def test_duplicate_email_is_email_in_use(self, provider: PostgresAuthProvider) -> None:
        await provider.create_account("a@b.com", "secret1")

        with pytest.raises(AuthError) as exc_info:
            await provider.create_account("a@b.com", "secret2")

        assert exc_info.value.reason == AuthErrorReason.EMAIL_IN_USE

    @pytest.mark.asyncio
    async def test_short_password_is_weak_password(self, provider: PostgresAuthProvider) -> None:
        with pytest.raises(AuthError) as exc_info:
            await provider.create_account("a@b.com", "123")

        assert exc_info.value.reason == AuthErrorReason.WEAK_PASSWORD

    @pytest.mark.asyncio
    async def test_default_floor_matches_form_minimum(self, pool: AsyncConnectionPool) -> None:
        """Without an explicit floor the provider accepts exactly what the form accepts."""
        provider = PostgresAuthProvider(pool, bcrypt_cost=4)
        shortest = "x" * DEFAULT_PASSWORD_MIN_LENGTH

        with pytest.raises(AuthError) as exc_info:
            await provider.create_account("short@b.com", shortest[:-1])
        handle = await provider.create_account("ok@b.com", shortest)

        assert exc_info.value.reason == AuthErrorReason.WEAK_PASSWORD
        assert handle.email == "ok@b.com"


class TestSetDisplayName:
    """Tests for set_display_name method."""

    @pytest.mark.asyncio
    async def test_sets_display_name(
        self, provider: PostgresAuthProvider, pool: AsyncConnectionPool
    ) -> None:
        handle = await provider.create_account("a@b.com", "secret1")

        updated = await provider.set_display_name(handle, "alice")

        assert updated.display_name == "alice"
        async with pool.connection() as conn, conn.cursor() as cursor:
            await cursor.execute(
                "SELECT display_name FROM accounts WHERE id = %s", (handle.account_id,)
            )
            assert await cursor.fetchone() == ("alice",)

    @pytest.mark.asyncio
    async def test_unknown_account_is_auth_error(self, provider: PostgresAuthProvider) -> None:
        handle = AccountHandle(
            account_id="00000000-0000-0000-0000-000000000000", email="x@y.com"
        )

        with pytest.raises(AuthError) as exc_info:
            await provider.set_display_name(handle, "alice")

        assert exc_info.value.reason == AuthErrorReason.UNKNOWN
