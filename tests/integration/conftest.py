"""
Shared fixtures for integration tests.

Integration tests run against a real PostgreSQL database (DATABASE_URL)
and are skipped when it cannot be reached.
"""

from collections.abc import Generator

import psycopg
import pytest
from psycopg_pool import ConnectionPool

from profile_email.adapters.repository.postgres import run_migrations
from profile_email.config.settings import get_settings


@pytest.fixture(scope="session")
def pool() -> Generator[ConnectionPool, None, None]:
    """Create connection pool and schema for integration tests."""
    settings = get_settings()
    try:
        with psycopg.connect(settings.database_url, connect_timeout=2):
            pass
    except psycopg.OperationalError as e:
        pytest.skip(f"PostgreSQL not reachable: {e}")

    pool = ConnectionPool(conninfo=settings.database_url, min_size=1, max_size=5, open=True)
    run_migrations(pool)
    yield pool
    pool.close()


@pytest.fixture(autouse=True)
def clean_database(pool: ConnectionPool) -> Generator[None, None, None]:
    """Clean validation tables before each test."""
    with pool.connection() as conn:
        conn.execute("DELETE FROM validation_tokens")
        conn.execute("DELETE FROM profiles")
        conn.execute("DELETE FROM profile_emails")
        conn.commit()
    yield
