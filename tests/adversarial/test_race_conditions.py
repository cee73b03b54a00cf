"""
Adversarial tests for race condition attack prevention.

Two registrations for the same username can both pass the availability
check before either writes its profile. These tests verify the
database constraints still keep exactly one winner, and that the loser
is surfaced as a distinct error instead of silently overwriting.
"""

import asyncio
import uuid

import pytest
from psycopg_pool import AsyncConnectionPool

from src.adapters.auth.postgres import PostgresAuthProvider
from src.adapters.repository.postgres import PostgresAccountDirectory
from src.domain.exceptions import AuthError, DirectoryWriteError, UserNameTaken
from src.domain.models import RegistrationInput
from src.domain.registration import RegistrationWorkflow

# Apply adversarial marker to all tests in this module
pytestmark = pytest.mark.adversarial

NUM_ATTACKERS = 5


async def create_profile(pool: AsyncConnectionPool, user_name: str) -> str:
    """Insert a profile directly and return its account id."""
    account_id = str(uuid.uuid4())
    async with pool.connection() as conn:
        await conn.execute(
            "INSERT INTO profiles (account_id, email, user_name) VALUES (%s, %s, %s)",
            (account_id, f"{user_name}@example.com", user_name),
        )
    return account_id


class _MemorySessionStore:
    def __init__(self) -> None:
        self.values: dict[str, str] = {}

    async def put(self, key: str, value: str) -> None:
        self.values[key] = value


class TestRaceConditionAttacks:
    """Concurrent registrations competing for the same identity."""

    @pytest.mark.asyncio
    async def test_concurrent_profile_writes_exactly_one_succeeds(
        self, pool: AsyncConnectionPool
    ) -> None:
        """The UNIQUE constraint on user_name lets exactly one writer win."""
        directory = PostgresAccountDirectory(pool)

        results = await asyncio.gather(
            *(
                directory.write_profile(str(uuid.uuid4()), f"u{i}@example.com", "contested")
                for i in range(NUM_ATTACKERS)
            ),
            return_exceptions=True,
        )

        failures = [r for r in results if isinstance(r, DirectoryWriteError)]
        assert len(failures) == NUM_ATTACKERS - 1
        assert await directory.is_user_name_available("contested") is False

    @pytest.mark.asyncio
    async def test_concurrent_workflows_same_email(self, pool: AsyncConnectionPool) -> None:
        """Only one account is created per email; the rest see AuthError."""
        workflows = [
            RegistrationWorkflow(
                directory=PostgresAccountDirectory(pool),
                auth_provider=PostgresAuthProvider(pool, bcrypt_cost=4),
                session_store=_MemorySessionStore(),
            )
            for _ in range(NUM_ATTACKERS)
        ]
        inputs = [
            RegistrationInput(
                user_name=f"user{i}",
                email="shared@example.com",
                password="secret1",
                confirm_password="secret1",
            )
            for i in range(NUM_ATTACKERS)
        ]

        results = await asyncio.gather(
            *(w.submit(v) for w, v in zip(workflows, inputs)),
            return_exceptions=True,
        )

        successes = [r for r in results if not isinstance(r, Exception)]
        assert len(successes) == 1
        assert all(isinstance(r, AuthError) for r in results if isinstance(r, Exception))

        async with pool.connection() as conn, conn.cursor() as cursor:
            await cursor.execute("SELECT COUNT(*) FROM accounts WHERE email = %s", ("shared@example.com",))
            assert await cursor.fetchone() == (1,)

    @pytest.mark.asyncio
    async def test_existing_user_name_blocks_workflow(self, pool: AsyncConnectionPool) -> None:
        """A username present before the attempt is rejected without creating an account."""
        await create_profile(pool, "taken")
        workflow = RegistrationWorkflow(
            directory=PostgresAccountDirectory(pool),
            auth_provider=PostgresAuthProvider(pool, bcrypt_cost=4),
            session_store=_MemorySessionStore(),
        )

        with pytest.raises(UserNameTaken):
            await workflow.submit(
                RegistrationInput(
                    user_name="taken",
                    email="new@example.com",
                    password="secret1",
                    confirm_password="secret1",
                )
            )

        async with pool.connection() as conn, conn.cursor() as cursor:
            await cursor.execute("SELECT COUNT(*) FROM accounts")
            assert await cursor.fetchone() == (0,)
