"""
Integration tests for the PostgreSQL adapters.

Tests repository operations against a real PostgreSQL database.
"""

from datetime import timedelta

import pytest
from psycopg_pool import ConnectionPool

from profile_email.adapters.repository.postgres import (
    PostgresProfileEmailReader,
    PostgresProfileRepository,
    PostgresTokenStore,
)
from profile_email.domain.exceptions import StoreError
from profile_email.domain.ports import ProfileEmail
from tests.factories import (
    EMAIL,
    FISCAL_CODE,
    NOW,
    OTHER_FISCAL_CODE,
    TOKEN_ID,
    VALIDATOR_HASH,
    make_profile,
)

pytestmark = pytest.mark.integration


def insert_token(pool: ConnectionPool) -> None:
    with pool.connection() as conn:
        conn.execute(
            "INSERT INTO validation_tokens (partition_key, row_key, email, fiscal_code, invalid_after) "
            "VALUES (%s, %s, %s, %s, %s)",
            (TOKEN_ID, VALIDATOR_HASH, EMAIL, FISCAL_CODE, NOW + timedelta(seconds=1000)),
        )
        conn.commit()


def insert_profile_email(pool: ConnectionPool, email: str, fiscal_code: str) -> None:
    with pool.connection() as conn:
        conn.execute(
            "INSERT INTO profile_emails (email, fiscal_code) VALUES (%s, %s)",
            (email, fiscal_code),
        )
        conn.commit()


class TestTokenStore:
    """Tests for PostgresTokenStore.get."""

    def test_get_returns_entity_with_table_column_names(self, pool: ConnectionPool) -> None:
        insert_token(pool)

        entity = PostgresTokenStore(pool).get(TOKEN_ID, VALIDATOR_HASH)

        assert entity is not None
        assert entity["PartitionKey"] == TOKEN_ID
        assert entity["RowKey"] == VALIDATOR_HASH
        assert entity["Email"] == EMAIL
        assert entity["FiscalCode"] == FISCAL_CODE
        assert entity["InvalidAfter"] == NOW + timedelta(seconds=1000)

    def test_get_with_wrong_row_key_returns_none(self, pool: ConnectionPool) -> None:
        insert_token(pool)

        assert PostgresTokenStore(pool).get(TOKEN_ID, "0" * 64) is None

    def test_get_unknown_token_returns_none(self, pool: ConnectionPool) -> None:
        assert PostgresTokenStore(pool).get(TOKEN_ID, VALIDATOR_HASH) is None


class TestProfileRepository:
    """Tests for PostgresProfileRepository."""

    def test_find_missing_profile_returns_none(self, pool: ConnectionPool) -> None:
        repository = PostgresProfileRepository(pool)

        assert repository.find_last_version_by_fiscal_code(FISCAL_CODE) is None

    def test_update_stores_next_version(self, pool: ConnectionPool) -> None:
        repository = PostgresProfileRepository(pool)

        stored = repository.update(make_profile(version=0))

        assert stored.version == 1
        assert stored.preferred_languages == ("it_IT",)

    def test_find_returns_latest_version(self, pool: ConnectionPool) -> None:
        repository = PostgresProfileRepository(pool)
        first = repository.update(make_profile(version=0))
        repository.update(first.model_copy(update={"is_email_validated": True}))

        latest = repository.find_last_version_by_fiscal_code(FISCAL_CODE)

        assert latest is not None
        assert latest.version == 2
        assert latest.is_email_validated is True

    def test_concurrent_update_of_same_version_raises_store_error(
        self, pool: ConnectionPool
    ) -> None:
        """The writer that loses the version race gets a StoreError."""
        repository = PostgresProfileRepository(pool)
        base = repository.update(make_profile(version=0))
        repository.update(base)

        with pytest.raises(StoreError):
            repository.update(base)


class TestProfileEmailReader:
    """Tests for PostgresProfileEmailReader.list."""

    def test_list_yields_matching_entries(self, pool: ConnectionPool) -> None:
        insert_profile_email(pool, EMAIL, OTHER_FISCAL_CODE)
        insert_profile_email(pool, "other@example.com", FISCAL_CODE)

        found = list(PostgresProfileEmailReader(pool).list(EMAIL))

        assert found == [ProfileEmail(email=EMAIL, fiscal_code=OTHER_FISCAL_CODE)]

    def test_list_is_lazy(self, pool: ConnectionPool) -> None:
        """Closing the generator early releases the connection."""
        insert_profile_email(pool, EMAIL, OTHER_FISCAL_CODE)
        insert_profile_email(pool, EMAIL, FISCAL_CODE)

        generator = PostgresProfileEmailReader(pool, itersize=1).list(EMAIL)
        first = next(generator)
        generator.close()

        assert first.email == EMAIL
        with pool.connection() as conn:
            assert conn.execute("SELECT 1").fetchone() == (1,)
