"""
Shared test fixtures and configuration.

This module provides pytest fixtures for:
- Mock ports (token store, profile repository, profile-emails reader, tracker)
- A fully wired EmailValidationService over those mocks
"""

from unittest.mock import Mock

import pytest

from profile_email.domain.email_validation import EmailValidationService
from profile_email.domain.token_verification import TokenVerifier
from tests.factories import (
    CALLBACK_URL,
    CONFIRM_URL,
    NOW,
    entries,
    make_profile,
    make_token_entity,
)


@pytest.fixture
def token_store() -> Mock:
    store = Mock()
    store.get.return_value = make_token_entity()
    return store


@pytest.fixture
def profiles() -> Mock:
    repo = Mock()
    repo.find_last_version_by_fiscal_code.return_value = make_profile()
    repo.update.side_effect = lambda profile: profile.model_copy(
        update={"version": profile.version + 1}
    )
    return repo


@pytest.fixture
def profile_emails() -> Mock:
    reader = Mock()
    reader.list.side_effect = lambda email: entries()
    return reader


@pytest.fixture
def event_tracker() -> Mock:
    return Mock()


@pytest.fixture
def service(
    token_store: Mock, profiles: Mock, profile_emails: Mock, event_tracker: Mock
) -> EmailValidationService:
    return EmailValidationService(
        token_verifier=TokenVerifier(token_store=token_store, clock=lambda: NOW),
        profiles=profiles,
        profile_emails=profile_emails,
        event_tracker=event_tracker,
        validation_callback_url=CALLBACK_URL,
        confirm_choice_url=CONFIRM_URL,
    )
