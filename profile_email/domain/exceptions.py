"""
Domain exceptions - Semantic error types for e-mail validation.

This module defines domain-specific exceptions that communicate
validation failures without leaking infrastructure details.
"""

from .ports import ValidationError


class ProfileEmailError(Exception):
    """Base class for profile e-mail validation errors."""

    pass


class StoreError(ProfileEmailError):
    """A token or profile backend failed (I/O, driver or constraint error)."""

    pass


class ValidationFailed(ProfileEmailError):
    """A validation step rejected the request with a classified error."""

    def __init__(self, error: ValidationError, reason: str = "") -> None:
        super().__init__(reason or error.value)
        self.error = error
