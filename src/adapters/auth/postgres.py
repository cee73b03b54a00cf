"""
PostgreSQL auth provider adapter - Implements AuthProvider protocol.

Accounts are stored in the ``accounts`` table with a bcrypt password
hash. Provider failures are reported as AuthError with a reason:

- EMAIL_IN_USE: UNIQUE violation on accounts.email
- WEAK_PASSWORD: password shorter than the provider's floor
- NETWORK: connection or pool timeout faults
- UNKNOWN: any other database error
"""

import asyncio
import logging
import uuid

import bcrypt
import psycopg
from psycopg import errors
from psycopg_pool import AsyncConnectionPool

from src.domain.exceptions import AuthError
from src.domain.ports import AccountHandle, AuthErrorReason
from src.domain.validation import DEFAULT_PASSWORD_MIN_LENGTH

logger = logging.getLogger(__name__)


def _classify(exc: psycopg.Error) -> AuthErrorReason:
    if isinstance(exc, errors.UniqueViolation):
        return AuthErrorReason.EMAIL_IN_USE
    # PoolTimeout subclasses OperationalError
    if isinstance(exc, psycopg.OperationalError):
        return AuthErrorReason.NETWORK
    return AuthErrorReason.UNKNOWN


class PostgresAuthProvider:
    """
    Implements AuthProvider protocol via psycopg3 and bcrypt.

    Uses structural subtyping - no explicit inheritance from Protocol.
    """

    def __init__(
        self,
        pool: AsyncConnectionPool,
        min_password_length: int = DEFAULT_PASSWORD_MIN_LENGTH,
        bcrypt_cost: int = 10,
    ) -> None:
        """
        Initialize provider.

        Args:
            pool: psycopg3 AsyncConnectionPool for database connections
            min_password_length: Shorter passwords fail with WEAK_PASSWORD
            bcrypt_cost: bcrypt work factor
        """
        self._pool = pool
        self._min_password_length = min_password_length
        self._bcrypt_cost = bcrypt_cost

    async def create_account(self, email: str, password: str) -> AccountHandle:
        """
        Create an account with a fresh UUID.

        Returns:
            Handle for the new account (no display name yet)

        Raises:
            AuthError: EMAIL_IN_USE, WEAK_PASSWORD, NETWORK or UNKNOWN
        """
        if len(password) < self._min_password_length:
            raise AuthError(
                AuthErrorReason.WEAK_PASSWORD,
                f"password must be at least {self._min_password_length} characters",
            )

        # bcrypt is CPU bound; keep it off the event loop
        password_hash = await asyncio.to_thread(self._hash_password, password)
        account_id = uuid.uuid4()

        sql = """
            INSERT INTO accounts (id, email, password_hash, created_at)
            VALUES (%s, %s, %s, NOW())
        """

        try:
            async with self._pool.connection() as conn, conn.cursor() as cursor:
                await cursor.execute(sql, (account_id, email, password_hash))
                await conn.commit()
        except psycopg.Error as e:
            reason = _classify(e)
            logger.warning("Account creation failed (%s)", reason.value)
            raise AuthError(reason, str(e)) from e

        logger.info("Created auth account %s", account_id)
        return AccountHandle(account_id=str(account_id), email=email)

    async def set_display_name(self, handle: AccountHandle, name: str) -> AccountHandle:
        """
        Set the display name of an existing account.

        Raises:
            AuthError: UNKNOWN if the account does not exist, otherwise
                classified from the database error
        """
        sql = "UPDATE accounts SET display_name = %s WHERE id = %s"

        try:
            async with self._pool.connection() as conn, conn.cursor() as cursor:
                await cursor.execute(sql, (name, handle.account_id))
                updated = cursor.rowcount
                await conn.commit()
        except psycopg.Error as e:
            raise AuthError(_classify(e), str(e)) from e

        if updated != 1:
            raise AuthError(AuthErrorReason.UNKNOWN, f"account {handle.account_id} not found")

        return AccountHandle(account_id=handle.account_id, email=handle.email, display_name=name)

    def _hash_password(self, password: str) -> str:
        return bcrypt.hashpw(password.encode(), bcrypt.gensalt(rounds=self._bcrypt_cost)).decode()
