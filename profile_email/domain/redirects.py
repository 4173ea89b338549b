"""
Redirect outcomes - The only response type produced by the validation flow.

Query strings are built by hand so that the token and the error code
appear exactly as given; only the e-mail is encoded (base64url).
"""

import base64
from dataclasses import dataclass
from enum import Enum

from .ports import ValidationError


class RedirectDestination(str, Enum):
    """Page the citizen's browser is sent to."""

    CONFIRM = "confirm"
    SUCCESS = "success"
    FAILURE = "failure"


@dataclass(frozen=True)
class RedirectOutcome:
    """Immutable redirect produced for a single request."""

    url: str
    destination: RedirectDestination
    error: ValidationError | None = None
    kind: str = "redirect"


def base64url(value: str) -> str:
    """Encode a string as unpadded URL-safe base64."""
    return base64.urlsafe_b64encode(value.encode()).decode().rstrip("=")


def confirm_choice_page_url(confirm_choice_url: str, token: str, email: str) -> RedirectOutcome:
    return RedirectOutcome(
        url=f"{confirm_choice_url}?token={token}&email={base64url(email)}",
        destination=RedirectDestination.CONFIRM,
    )


def validation_success_url(validation_callback_url: str) -> RedirectOutcome:
    return RedirectOutcome(
        url=f"{validation_callback_url}?result=success",
        destination=RedirectDestination.SUCCESS,
    )


def validation_failure_url(
    validation_callback_url: str, error: ValidationError
) -> RedirectOutcome:
    return RedirectOutcome(
        url=f"{validation_callback_url}?result=failure&error={error.value}",
        destination=RedirectDestination.FAILURE,
        error=error,
    )
