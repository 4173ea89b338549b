"""
PostgreSQL repository adapters - Implement the domain's storage ports.

This module provides the PostgreSQL implementations of the token store,
the versioned profile repository and the profile-emails reader using
psycopg3 with raw SQL.

Storage Design:
---------------
1. **validation_tokens**: keyed by (partition_key, row_key) where the
   partition key is the token id and the row key is the SHA-256 digest
   of the validator. Rows are returned with the table-entity column
   names (PartitionKey, RowKey, Email, FiscalCode, InvalidAfter) and
   decoded by the domain.

2. **profiles**: one row per (fiscal_code, version). The latest version
   is the highest one. An update inserts ``version + 1``; if a concurrent
   writer already took that version the primary key rejects the insert
   and the caller gets a StoreError (optimistic versioning, no retry).

3. **profile_emails**: (email, fiscal_code) index of validated e-mails,
   read through a server-side cursor so rows are produced lazily.

Every psycopg error is translated into the domain's StoreError.
"""

import logging
from collections.abc import Generator, Mapping
from pathlib import Path
from typing import Any

import psycopg
import pydantic
from psycopg.errors import UniqueViolation
from psycopg.rows import dict_row
from psycopg_pool import ConnectionPool

from profile_email.domain.exceptions import StoreError
from profile_email.domain.models import Profile
from profile_email.domain.ports import ProfileEmail

logger = logging.getLogger(__name__)

_PROFILE_COLUMNS = """
    fiscal_code, version, email, is_email_validated, is_inbox_enabled,
    is_webhook_enabled, accepted_tos_version, preferred_languages
"""


class PostgresTokenStore:
    """
    Implements TokenStore protocol via psycopg3.

    Uses structural subtyping - no explicit inheritance from Protocol.
    """

    def __init__(self, pool: ConnectionPool) -> None:
        self._pool = pool

    def get(self, partition_key: str, row_key: str) -> Mapping[str, Any] | None:
        """
        Retrieve a validation token entity.

        Returns:
            The raw entity, or None if no row matches both keys

        Raises:
            StoreError: On any database error
        """
        sql = """
            SELECT partition_key AS "PartitionKey",
                   row_key AS "RowKey",
                   email AS "Email",
                   fiscal_code AS "FiscalCode",
                   invalid_after AS "InvalidAfter"
            FROM validation_tokens
            WHERE partition_key = %s AND row_key = %s
        """

        try:
            with self._pool.connection() as conn, conn.cursor(row_factory=dict_row) as cursor:
                cursor.execute(sql, (partition_key, row_key))
                return cursor.fetchone()
        except psycopg.Error as e:
            logger.error("Validation token lookup failed: %s", e)
            raise StoreError(str(e)) from e


class PostgresProfileRepository:
    """
    Implements ProfileRepository protocol via psycopg3.

    Uses structural subtyping - no explicit inheritance from Protocol.
    All SQL uses parameterized queries.
    """

    def __init__(self, pool: ConnectionPool) -> None:
        self._pool = pool

    def find_last_version_by_fiscal_code(self, fiscal_code: str) -> Profile | None:
        sql = f"""
            SELECT {_PROFILE_COLUMNS}
            FROM profiles
            WHERE fiscal_code = %s
            ORDER BY version DESC
            LIMIT 1
        """

        try:
            with self._pool.connection() as conn, conn.cursor(row_factory=dict_row) as cursor:
                cursor.execute(sql, (fiscal_code,))
                row = cursor.fetchone()
            return Profile.model_validate(row) if row is not None else None
        except psycopg.Error as e:
            logger.error("Profile lookup failed: %s", e)
            raise StoreError(str(e)) from e
        except pydantic.ValidationError as e:
            logger.error("Stored profile can't be decoded: %s", e)
            raise StoreError("Malformed profile row") from e

    def update(self, profile: Profile) -> Profile:
        """
        Store the profile as its next version.

        The new row copies every field of ``profile`` and uses
        ``profile.version + 1``. A duplicate (fiscal_code, version) means
        another writer won the race.

        Raises:
            StoreError: On conflict or any other database error
        """
        sql = f"""
            INSERT INTO profiles ({_PROFILE_COLUMNS})
            VALUES (%s, %s, %s, %s, %s, %s, %s, %s)
            RETURNING {_PROFILE_COLUMNS}
        """
        params = (
            profile.fiscal_code,
            profile.version + 1,
            profile.email,
            profile.is_email_validated,
            profile.is_inbox_enabled,
            profile.is_webhook_enabled,
            profile.accepted_tos_version,
            list(profile.preferred_languages),
        )

        try:
            with self._pool.connection() as conn, conn.cursor(row_factory=dict_row) as cursor:
                cursor.execute(sql, params)
                row = cursor.fetchone()
                conn.commit()
            return Profile.model_validate(row)
        except UniqueViolation as e:
            logger.warning(
                "Profile version %d already exists, update lost the race", profile.version + 1
            )
            raise StoreError("Profile version conflict") from e
        except psycopg.Error as e:
            logger.error("Profile update failed: %s", e)
            raise StoreError(str(e)) from e
        except pydantic.ValidationError as e:
            logger.error("Updated profile can't be decoded: %s", e)
            raise StoreError("Malformed profile row") from e


class PostgresProfileEmailReader:
    """
    Implements ProfileEmailReader protocol via psycopg3.

    Each call opens a server-side cursor, so a consumer that stops
    early never pulls the rest of the result set.
    """

    def __init__(self, pool: ConnectionPool, itersize: int = 100) -> None:
        self._pool = pool
        self._itersize = itersize

    def list(self, email: str) -> Generator[ProfileEmail, None, None]:
        sql = "SELECT email, fiscal_code FROM profile_emails WHERE email = %s"

        try:
            with (
                self._pool.connection() as conn,
                conn.cursor(name="profile_emails_by_email") as cursor,
            ):
                cursor.itersize = self._itersize
                cursor.execute(sql, (email,))
                for row_email, fiscal_code in cursor:
                    yield ProfileEmail(email=row_email, fiscal_code=fiscal_code)
        except psycopg.Error as e:
            logger.error("Profile emails lookup failed: %s", e)
            raise StoreError(str(e)) from e


def run_migrations(pool: ConnectionPool) -> None:
    """
    Execute all SQL migration files from the migrations directory.

    Migrations are executed in sorted order (alphabetically by filename).
    Each migration should be idempotent (use IF NOT EXISTS, etc.).

    Args:
        pool: psycopg3 ConnectionPool instance
    """
    # Structure: profile_email/adapters/repository/postgres.py -> migrations/
    migrations_dir = Path(__file__).parent.parent.parent.parent / "migrations"

    if not migrations_dir.exists():
        logger.warning("Migrations directory not found: %s", migrations_dir)
        return

    sql_files = sorted(migrations_dir.glob("*.sql"))

    if not sql_files:
        logger.info("No migration files found")
        return

    logger.info("Running %d migration(s)", len(sql_files))

    for sql_file in sql_files:
        logger.info("Executing migration: %s", sql_file.name)
        try:
            sql_content = sql_file.read_text()

            with pool.connection() as conn:
                conn.execute(sql_content)

            logger.info("Migration complete: %s", sql_file.name)
        except Exception as e:
            logger.error("Migration failed: %s - %s", sql_file.name, e)
            raise RuntimeError(f"Database migration failed: {sql_file.name}") from e
