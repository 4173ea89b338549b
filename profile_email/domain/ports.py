"""
Port interfaces - Protocol definitions for infrastructure abstraction.

This module defines the interfaces (ports) that the domain requires
from infrastructure. Adapters implement these protocols.
"""

from collections.abc import Generator, Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any, Protocol

from .models import Profile


class ValidationError(str, Enum):
    """
    Error codes carried by the failure redirect.

    The set is closed: every failure in the validation pipeline maps
    to exactly one of these values.
    """

    GENERIC_ERROR = "GENERIC_ERROR"
    INVALID_TOKEN = "INVALID_TOKEN"
    TOKEN_EXPIRED = "TOKEN_EXPIRED"
    EMAIL_ALREADY_TAKEN = "EMAIL_ALREADY_TAKEN"


class FlowChoice(str, Enum):
    """
    Step of the two-phase validation flow.

    - CONFIRM: preview step, redirects to the confirmation page
    - VALIDATE: marks the profile e-mail as validated
    """

    CONFIRM = "CONFIRM"
    VALIDATE = "VALIDATE"


@dataclass(frozen=True)
class ProfileEmail:
    """An (e-mail, owner) pair known to the uniqueness index."""

    email: str
    fiscal_code: str


class TokenStore(Protocol):
    """Port interface for the validation token table."""

    def get(self, partition_key: str, row_key: str) -> Mapping[str, Any] | None:
        """
        Retrieve a raw token entity.

        Args:
            partition_key: Token id (first half of the redirect token)
            row_key: SHA-256 hex digest of the validator

        Returns:
            The raw entity, or None when no entity matches both keys

        Raises:
            StoreError: If the backend cannot be queried
        """
        ...


class ProfileRepository(Protocol):
    """Port interface for versioned profile persistence."""

    def find_last_version_by_fiscal_code(self, fiscal_code: str) -> Profile | None:
        """
        Fetch the most recent version of a citizen profile.

        Raises:
            StoreError: If the backend cannot be queried
        """
        ...

    def update(self, profile: Profile) -> Profile:
        """
        Store a new version of the profile.

        Implementations bump the version; losing a concurrent update
        race raises instead of retrying.

        Raises:
            StoreError: If the new version cannot be written
        """
        ...


class ProfileEmailReader(Protocol):
    """Port interface for the e-mail uniqueness index (read side)."""

    def list(self, email: str) -> Generator[ProfileEmail, None, None]:
        """
        Lazily yield every profile entry registered with this e-mail.

        The generator may raise while being consumed.
        """
        ...


class EventTracker(Protocol):
    """Port interface for telemetry events."""

    def track(self, name: str, tags: Mapping[str, str]) -> None:
        """Record a named event. Fire-and-forget."""
        ...
