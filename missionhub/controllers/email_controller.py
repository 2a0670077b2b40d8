# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Controller: Admin email endpoints: preview and send.
"""

from fastapi import APIRouter, Depends, HTTPException

from missionhub.core.dependencies import get_email_composer
from missionhub.models.email import EmailMessage
from missionhub.schemas.email import EmailPreview, EmailQueued, EmailRequest
from missionhub.services.email_composer import EmailComposer

router = APIRouter(prefix="/api/v1", tags=["Emails"])


@router.post("/emails/preview", response_model=EmailPreview)
def preview_email(
    payload: EmailRequest,
    composer: EmailComposer = Depends(get_email_composer),
):
    """Validate without sending; reports audience size and delivery path."""
    message = EmailMessage(**payload.model_dump())
    valid = composer.validate(message)
    return EmailPreview(
        valid=valid,
        valid_other_than_confirmed=message.errors.fields == ["confirmed"],
        user_count=composer.user_count(message),
        delivery="individual" if message.uses_template else "bulk",
        errors=list(message.errors),
    )


@router.post("/emails", status_code=202, response_model=EmailQueued)
def send_email(
    payload: EmailRequest,
    composer: EmailComposer = Depends(get_email_composer),
):
    message = EmailMessage(**payload.model_dump())
    if not composer.save(message):
        raise HTTPException(status_code=422, detail={"errors": message.errors.as_list()})
    return EmailQueued(
        status="queued",
        delivery=message.delivery,
        user_count=composer.user_count(message),
        persisted=message.persisted,
    )
