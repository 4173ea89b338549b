"""
Domain layer - Profile e-mail validation business logic.

This package contains the token verifier and the validation state
machine. It defines its own port interfaces for infrastructure
abstraction; no web framework or database driver is imported here.
"""

from .email_validation import EmailValidationService
from .exceptions import ProfileEmailError, StoreError, ValidationFailed
from .models import Profile, TokenRecord
from .ports import (
    EventTracker,
    FlowChoice,
    ProfileEmail,
    ProfileEmailReader,
    ProfileRepository,
    TokenStore,
    ValidationError,
)
from .redirects import RedirectDestination, RedirectOutcome
from .token_verification import TokenVerifier

__all__ = [
    "EmailValidationService",
    "EventTracker",
    "FlowChoice",
    "Profile",
    "ProfileEmail",
    "ProfileEmailError",
    "ProfileEmailReader",
    "ProfileRepository",
    "RedirectDestination",
    "RedirectOutcome",
    "StoreError",
    "TokenRecord",
    "TokenStore",
    "TokenVerifier",
    "ValidationError",
    "ValidationFailed",
]
