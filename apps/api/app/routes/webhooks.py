"""Provider webhook routes."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request, Security

from app.routes.dependencies import get_webhook_service, webhook_signature_scheme
from app.schemas.error import ErrorResponse, NoLeakNotFoundError
from app.schemas.webhook import WebhookAck
from app.services.webhooks import WebhookService

router = APIRouter(prefix="/webhook", tags=["Webhooks"])


@router.post(
    "/transcription",
    response_model=WebhookAck,
    responses={
        400: {"model": ErrorResponse},
        401: {"model": ErrorResponse},
        404: {"model": NoLeakNotFoundError},
        500: {"model": ErrorResponse},
    },
)
async def receive_transcription_webhook(
    request: Request,
    signature: Annotated[str | None, Security(webhook_signature_scheme)],
    service: Annotated[WebhookService, Depends(get_webhook_service)],
) -> WebhookAck:
    # Signatures cover the exact bytes sent, so the body is read before any parsing.
    raw_body = await request.body()
    return service.handle(raw_body=raw_body, signature=signature)
