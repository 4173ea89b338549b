"""
Token verifier - Resolves a redirect token against the token table.

A redirect token has the form ``<token id>:<validator>``. The table
never stores the validator itself, only its SHA-256 digest, so a
reader of the table cannot forge working links.

Verification steps (each failure is terminal):
    1. Lookup by (token id, SHA-256(validator))
       - backend failure    -> GENERIC_ERROR
       - no matching entity -> INVALID_TOKEN
    2. Decode the entity     -> INVALID_TOKEN on malformed entities
    3. Expiry check          -> TOKEN_EXPIRED once now > InvalidAfter
"""

import hashlib
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime

import pydantic

from .exceptions import ValidationFailed
from .models import TokenRecord
from .ports import TokenStore, ValidationError


def utc_now() -> datetime:
    return datetime.now(UTC)


def hash_validator(validator: str) -> str:
    """Lowercase hex SHA-256 of the validator, used as the table row key."""
    return hashlib.sha256(validator.encode()).hexdigest()


@dataclass
class TokenVerifier:
    """Turns a raw redirect token into a decoded, unexpired TokenRecord."""

    token_store: TokenStore
    clock: Callable[[], datetime] = field(default=utc_now)

    def verify(self, token: str) -> TokenRecord:
        """
        Verify a structurally valid redirect token.

        Args:
            token: Token already matched against the token pattern

        Returns:
            The decoded token record

        Raises:
            ValidationFailed: With GENERIC_ERROR, INVALID_TOKEN or TOKEN_EXPIRED
        """
        token_id, _, validator = token.partition(":")

        try:
            entity = self.token_store.get(token_id, hash_validator(validator))
        except Exception as e:
            raise ValidationFailed(
                ValidationError.GENERIC_ERROR,
                f"Error searching validation token|ERROR={e!r}",
            ) from e

        if entity is None:
            raise ValidationFailed(ValidationError.INVALID_TOKEN, "Validation token not found")

        try:
            record = TokenRecord.model_validate(entity)
        except pydantic.ValidationError as e:
            raise ValidationFailed(
                ValidationError.INVALID_TOKEN,
                f"Validation token can't be decoded|ERROR={e.error_count()} invalid field(s)",
            ) from e

        if self.clock() > record.InvalidAfter:
            raise ValidationFailed(
                ValidationError.TOKEN_EXPIRED,
                f"Token expired|EXPIRED_AT={record.InvalidAfter.isoformat()}",
            )

        return record
