"""
PostgreSQL directory adapter - Implements AccountDirectory protocol.

This module provides the PostgreSQL implementation of the domain's
account directory port using psycopg3 with raw SQL.

Profiles are keyed by the auth provider's stable account id. The
username column carries a UNIQUE constraint, so two concurrent
registrations that both passed the availability check cannot both
write a profile with the same username.
"""

import logging
from pathlib import Path

import psycopg
from psycopg_pool import AsyncConnectionPool

from src.domain.exceptions import DirectoryLookupError, DirectoryWriteError

logger = logging.getLogger(__name__)


class PostgresAccountDirectory:
    """
    Implements AccountDirectory protocol via psycopg3.

    Uses structural subtyping - no explicit inheritance from Protocol.
    All SQL uses parameterized queries for security.
    """

    def __init__(self, pool: AsyncConnectionPool) -> None:
        """
        Initialize directory with connection pool.

        Args:
            pool: psycopg3 AsyncConnectionPool for database connections
        """
        self._pool = pool

    async def is_user_name_available(self, user_name: str) -> bool:
        """
        Check whether no profile uses this username.

        Comparison is case-sensitive and exact (plain ``=`` on TEXT).

        Returns:
            True if the username is free

        Raises:
            DirectoryLookupError: On any database fault
        """
        sql = "SELECT 1 FROM profiles WHERE user_name = %s LIMIT 1"

        try:
            async with self._pool.connection() as conn, conn.cursor() as cursor:
                await cursor.execute(sql, (user_name,))
                row = await cursor.fetchone()
        except psycopg.Error as e:
            logger.warning("Username lookup failed: %s", e)
            raise DirectoryLookupError(str(e)) from e

        return row is None

    async def write_profile(self, account_id: str, email: str, user_name: str) -> None:
        """
        Insert or overwrite the profile for an account.

        Re-writing the same account id updates email and username, so a
        retried write for an orphaned account converges.

        Raises:
            DirectoryWriteError: On any database fault, including a username
                claimed by another account in the meantime
        """
        sql = """
            INSERT INTO profiles (account_id, email, user_name, created_at)
            VALUES (%s, %s, %s, NOW())
            ON CONFLICT (account_id) DO UPDATE
            SET email = EXCLUDED.email,
                user_name = EXCLUDED.user_name
        """

        try:
            async with self._pool.connection() as conn, conn.cursor() as cursor:
                await cursor.execute(sql, (account_id, email, user_name))
                await conn.commit()
        except psycopg.Error as e:
            logger.error("Profile write failed for account %s: %s", account_id, e)
            raise DirectoryWriteError(account_id, str(e)) from e


async def run_migrations(pool: AsyncConnectionPool) -> None:
    """
    Execute all SQL migration files from the migrations directory.

    Migrations are executed in sorted order (alphabetically by filename).
    Each migration should be idempotent (use IF NOT EXISTS, etc.).

    Args:
        pool: psycopg3 AsyncConnectionPool instance
    """
    # Structure: src/adapters/repository/postgres.py -> migrations/
    migrations_dir = Path(__file__).parent.parent.parent.parent / "migrations"

    if not migrations_dir.exists():
        logger.warning(f"Migrations directory not found: {migrations_dir}")
        return

    sql_files = sorted(migrations_dir.glob("*.sql"))

    if not sql_files:
        logger.info("No migration files found")
        return

    logger.info(f"Running {len(sql_files)} migration(s)")

    for sql_file in sql_files:
        logger.info(f"Executing migration: {sql_file.name}")
        try:
            sql_content = sql_file.read_text()

            async with pool.connection() as conn:
                await conn.execute(sql_content)

            logger.info(f"Migration complete: {sql_file.name}")
        except Exception as e:
            logger.error(f"Migration failed: {sql_file.name} - {e}")
            raise RuntimeError(f"Database migration failed: {sql_file.name}") from e
