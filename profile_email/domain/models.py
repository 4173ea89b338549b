"""
Domain models - Decoded token entities and citizen profiles.

Token entities arrive from the token table as untyped mappings, so
they are decoded (and shape-checked) here before the pipeline trusts
any of their fields.
"""

from datetime import UTC, datetime

from email_validator import validate_email
from pydantic import BaseModel, ConfigDict, Field, field_validator

FISCAL_CODE_PATTERN = (
    r"^[A-Z]{6}[0-9LMNPQRSTUV]{2}[ABCDEHLMPRST][0-9LMNPQRSTUV]{2}[A-Z][0-9LMNPQRSTUV]{3}[A-Z]$"
)


class TokenRecord(BaseModel):
    """
    Validation token entity as stored in the token table.

    Field names follow the table's PascalCase columns. Storage keys
    (PartitionKey, RowKey) and any other extra column are ignored.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    Email: str
    FiscalCode: str = Field(pattern=FISCAL_CODE_PATTERN)
    InvalidAfter: datetime

    @field_validator("Email")
    @classmethod
    def _check_email(cls, value: str) -> str:
        # Syntax only: no DNS, no display names, special-use domains allowed.
        # The stored value is kept byte-exact.
        validate_email(
            value,
            check_deliverability=False,
            globally_deliverable=False,
            test_environment=True,
            allow_display_name=False,
        )
        return value

    @field_validator("InvalidAfter")
    @classmethod
    def _assume_utc(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=UTC)
        return value


class Profile(BaseModel):
    """Latest stored version of a citizen profile."""

    model_config = ConfigDict(frozen=True)

    fiscal_code: str
    email: str | None = None
    is_email_validated: bool = False
    is_inbox_enabled: bool = False
    is_webhook_enabled: bool = False
    accepted_tos_version: int | None = None
    preferred_languages: tuple[str, ...] = ()
    version: int = 0
