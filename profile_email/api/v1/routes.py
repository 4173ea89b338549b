"""
API v1 routes.

Defines the REST endpoint reached from the validation link sent by e-mail.
"""

from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import RedirectResponse

from profile_email.api.dependencies import get_email_validation_service
from profile_email.api.models import TOKEN_PATTERN
from profile_email.domain.email_validation import EmailValidationService
from profile_email.domain.ports import FlowChoice

router = APIRouter(tags=["v1"])


@router.get(
    "/validate-profile-email",
    response_class=RedirectResponse,
    status_code=status.HTTP_303_SEE_OTHER,
    responses={
        303: {"description": "Redirect to the confirmation, success or failure page"},
        422: {"description": "Validation error"},
    },
    summary="Validate the profile e-mail",
    description="Verify the token from the validation link. The CONFIRM step redirects "
    "to the confirmation page; the VALIDATE step marks the profile e-mail as validated.",
)
def validate_profile_email(
    token: str = Query(..., pattern=TOKEN_PATTERN, description="Validation token"),
    flow: FlowChoice = Query(FlowChoice.CONFIRM, description="Step of the validation flow"),
    service: EmailValidationService = Depends(get_email_validation_service),
) -> RedirectResponse:
    """
    Validate the e-mail address of a citizen profile.

    - **token**: `<token id>:<validator>` from the e-mail link
    - **flow**: `CONFIRM` (default) or `VALIDATE`

    Always answers with a 303 redirect; failures carry an error code
    in the redirect URL.
    """
    outcome = service.handle(token, flow)
    return RedirectResponse(outcome.url, status_code=status.HTTP_303_SEE_OTHER)
