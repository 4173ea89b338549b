"""
Profile e-mail validation service - Validation state machine.

This module drives the tokenized e-mail validation flow, from the
redirect token in the citizen's link to the redirect URL returned to
the browser.

Pipeline (strictly linear, every state exits early on failure)
==============================================================

    Verifying         -> GENERIC_ERROR | INVALID_TOKEN | TOKEN_EXPIRED
    ProfileLookup     -> GENERIC_ERROR (store failure or missing profile)
    ConsistencyCheck  -> INVALID_TOKEN (profile e-mail changed since)
    UniquenessCheck   -> GENERIC_ERROR | EMAIL_ALREADY_TAKEN (feature-flagged)
    Branch
        CONFIRM       -> confirmation page, no mutation
        VALIDATE      -> Mutating
    Mutating          -> GENERIC_ERROR | success page

A missing profile behind a verified token is a GENERIC_ERROR, not an
INVALID_TOKEN: the token table and the profile store disagree, which
is a server-side inconsistency.

Every failure is logged and turned into a failure redirect; nothing
escapes to the caller as an exception.
"""

import hashlib
import logging
from collections.abc import Callable
from dataclasses import dataclass, field

from .exceptions import ValidationFailed
from .models import Profile, TokenRecord
from .ports import (
    EventTracker,
    FlowChoice,
    ProfileEmailReader,
    ProfileRepository,
    ValidationError,
)
from .redirects import (
    RedirectOutcome,
    confirm_choice_page_url,
    validation_failure_url,
    validation_success_url,
)
from .token_verification import TokenVerifier
from .uniqueness import is_email_already_taken

logger = logging.getLogger(__name__)

VALIDATE_EMAIL_EVENT = "io.citizen-auth.validate_email"


def hash_fiscal_code(fiscal_code: str) -> str:
    """Pseudonymize a fiscal code for telemetry."""
    return hashlib.sha256(fiscal_code.encode()).hexdigest()


def _never_enforced(fiscal_code: str) -> bool:
    return False


@dataclass
class EmailValidationService:
    """
    Domain service for profile e-mail validation.

    Collaborators are injected so that live adapters and test fakes
    are interchangeable.
    """

    token_verifier: TokenVerifier
    profiles: ProfileRepository
    profile_emails: ProfileEmailReader
    event_tracker: EventTracker
    validation_callback_url: str
    confirm_choice_url: str
    is_unique_email_enforced: Callable[[str], bool] = field(default=_never_enforced)
    logger: logging.Logger = field(default=logger)

    def handle(self, token: str, flow_choice: FlowChoice) -> RedirectOutcome:
        """
        Run the whole validation flow for one request.

        Args:
            token: Redirect token, already matched against the token pattern
            flow_choice: CONFIRM (preview) or VALIDATE (mutating) step

        Returns:
            Confirmation, success or failure redirect
        """
        try:
            record = self.token_verifier.verify(token)
        except ValidationFailed as e:
            return self._fail(token, e)
        return self.process(record, flow_choice, token)

    def process(self, record: TokenRecord, flow_choice: FlowChoice, token: str) -> RedirectOutcome:
        """
        Run the post-verification steps for an already verified token.

        On the CONFIRM step this never writes; it can be repeated any
        number of times with the same outcome.
        """
        try:
            profile = self._find_profile(record.FiscalCode)

            # Byte-exact: a case or whitespace difference is a stale token.
            if profile.email != record.Email:
                raise ValidationFailed(ValidationError.INVALID_TOKEN, "Email mismatch")

            if self.is_unique_email_enforced(record.FiscalCode):
                self._ensure_email_is_unique(record.Email, record.FiscalCode)

            if flow_choice != FlowChoice.VALIDATE:
                return confirm_choice_page_url(self.confirm_choice_url, token, record.Email)

            self._mark_email_validated(profile)
        except ValidationFailed as e:
            return self._fail(token, e)

        self._track_validation(profile)
        self.logger.debug("%s|The profile has been updated", self._log_prefix(token))
        return validation_success_url(self.validation_callback_url)

    def _find_profile(self, fiscal_code: str) -> Profile:
        try:
            profile = self.profiles.find_last_version_by_fiscal_code(fiscal_code)
        except Exception as e:
            raise ValidationFailed(
                ValidationError.GENERIC_ERROR, f"Error searching the profile|ERROR={e!r}"
            ) from e
        if profile is None:
            raise ValidationFailed(ValidationError.GENERIC_ERROR, "Profile not found")
        return profile

    def _ensure_email_is_unique(self, email: str, fiscal_code: str) -> None:
        try:
            taken = is_email_already_taken(self.profile_emails, email, fiscal_code)
        except Exception as e:
            # The reader is consumed lazily, so any failure can surface here.
            raise ValidationFailed(
                ValidationError.GENERIC_ERROR,
                f"Check for e-mail uniqueness failed|ERROR={e!r}",
            ) from e
        if taken:
            raise ValidationFailed(ValidationError.EMAIL_ALREADY_TAKEN, "Email already taken")

    def _mark_email_validated(self, profile: Profile) -> None:
        try:
            self.profiles.update(profile.model_copy(update={"is_email_validated": True}))
        except Exception as e:
            raise ValidationFailed(
                ValidationError.GENERIC_ERROR, f"Error updating profile|ERROR={e!r}"
            ) from e

    def _track_validation(self, profile: Profile) -> None:
        tags = {
            "ai.user.id": hash_fiscal_code(profile.fiscal_code),
            "samplingEnabled": "false",
        }
        try:
            self.event_tracker.track(VALIDATE_EMAIL_EVENT, tags)
        except Exception:
            self.logger.warning("Unable to track event %s", VALIDATE_EMAIL_EVENT, exc_info=True)

    def _fail(self, token: str, failure: ValidationFailed) -> RedirectOutcome:
        self.logger.error("%s|%s", self._log_prefix(token), failure)
        return validation_failure_url(self.validation_callback_url, failure.error)

    @staticmethod
    def _log_prefix(token: str) -> str:
        return f"ValidateProfileEmail|TOKEN={token}"
