"""
FastAPI dependencies - Dependency injection factories.

This module provides Depends() factories for injecting
domain services and infrastructure adapters into routes.
"""

from fastapi import Request
from psycopg_pool import ConnectionPool

from profile_email.adapters.repository.postgres import (
    PostgresProfileEmailReader,
    PostgresProfileRepository,
    PostgresTokenStore,
)
from profile_email.adapters.telemetry.console import ConsoleEventTracker
from profile_email.config.feature_flags import is_user_eligible
from profile_email.config.settings import get_settings
from profile_email.domain.email_validation import EmailValidationService
from profile_email.domain.token_verification import TokenVerifier

# Module-level singleton - ConsoleEventTracker is stateless
_event_tracker = ConsoleEventTracker()


def get_pool(request: Request) -> ConnectionPool:
    """
    Get connection pool from app state.

    The pool is created during app lifespan startup and stored in app.state.
    """
    return request.app.state.pool


def get_event_tracker() -> ConsoleEventTracker:
    """Get console event tracker (singleton)."""
    return _event_tracker


def get_email_validation_service(request: Request) -> EmailValidationService:
    """
    Create the e-mail validation service with injected dependencies.

    Wires the PostgreSQL adapters, the event tracker, the redirect
    targets and the unique e-mail enforcement flag.
    """
    settings = get_settings()
    pool = get_pool(request)
    return EmailValidationService(
        token_verifier=TokenVerifier(token_store=PostgresTokenStore(pool)),
        profiles=PostgresProfileRepository(pool),
        profile_emails=PostgresProfileEmailReader(pool),
        event_tracker=get_event_tracker(),
        validation_callback_url=settings.validation_callback_url,
        confirm_choice_url=settings.confirm_choice_page_url,
        is_unique_email_enforced=is_user_eligible(
            settings.ff_unique_email_enforcement,
            settings.unique_email_enforcement_users,
        ),
    )
