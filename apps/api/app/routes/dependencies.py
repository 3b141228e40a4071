"""Dependency wiring for routes."""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Request
from fastapi.security import APIKeyHeader

from app.adapters.media import MediaProbe
from app.adapters.provider import TranscriptionProvider
from app.adapters.storage import MediaStore
from app.core.config import Settings
from app.repositories.base import JobRegistry
from app.services.status import StatusService
from app.services.submissions import SubmissionService
from app.services.webhooks import SIGNATURE_HEADER, WebhookService

# auto_error=False so a missing header reaches the service as a 401, not a 403.
webhook_signature_scheme = APIKeyHeader(
    name=SIGNATURE_HEADER,
    auto_error=False,
    scheme_name="webhookSignature",
)


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_registry(request: Request) -> JobRegistry:
    return request.app.state.registry


def get_media_store(request: Request) -> MediaStore:
    return request.app.state.media_store


def get_media_probe(request: Request) -> MediaProbe:
    return request.app.state.media_probe


def get_provider(request: Request) -> TranscriptionProvider | None:
    return request.app.state.provider


def get_submission_service(
    registry: Annotated[JobRegistry, Depends(get_registry)],
    settings: Annotated[Settings, Depends(get_app_settings)],
    media_store: Annotated[MediaStore, Depends(get_media_store)],
    media_probe: Annotated[MediaProbe, Depends(get_media_probe)],
    provider: Annotated[TranscriptionProvider | None, Depends(get_provider)],
) -> SubmissionService:
    return SubmissionService(
        registry=registry,
        settings=settings,
        media_store=media_store,
        media_probe=media_probe,
        provider=provider,
    )


def get_webhook_service(
    registry: Annotated[JobRegistry, Depends(get_registry)],
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> WebhookService:
    return WebhookService(registry, secret=settings.webhook_secret)


def get_status_service(registry: Annotated[JobRegistry, Depends(get_registry)]) -> StatusService:
    return StatusService(registry)
