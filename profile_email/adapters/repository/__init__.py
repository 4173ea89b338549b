"""Repository adapters - Database implementations."""

from .postgres import (
    PostgresProfileEmailReader,
    PostgresProfileRepository,
    PostgresTokenStore,
    run_migrations,
)

__all__ = [
    "PostgresProfileEmailReader",
    "PostgresProfileRepository",
    "PostgresTokenStore",
    "run_migrations",
]
