"""Transcription submission, status and media routes."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, File, Path, UploadFile
from fastapi.responses import FileResponse

from app.adapters.provider import TranscriptionProvider
from app.adapters.storage import MediaStore
from app.core.config import Settings
from app.errors import NotFoundError, ValidationError
from app.routes.dependencies import (
    get_app_settings,
    get_media_store,
    get_provider,
    get_status_service,
    get_submission_service,
)
from app.schemas.error import ErrorResponse, NoLeakNotFoundError, UpstreamFailureError
from app.schemas.job import JobStatusSnapshot
from app.schemas.submission import CleanupResponse, HealthResponse, SubmissionResponse
from app.services.status import StatusService
from app.services.submissions import MediaUpload, SubmissionService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Transcriptions"])


@router.get("/health", response_model=HealthResponse)
async def health(
    settings: Annotated[Settings, Depends(get_app_settings)],
    provider: Annotated[TranscriptionProvider | None, Depends(get_provider)],
) -> HealthResponse:
    return HealthResponse(
        api_key_configured=provider is not None,
        webhook_configured=settings.async_callback_configured,
    )


@router.post(
    "/transcribe",
    response_model=SubmissionResponse,
    response_model_exclude_none=True,
    responses={
        400: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
        502: {"model": UpstreamFailureError},
    },
)
def submit_transcription(
    service: Annotated[SubmissionService, Depends(get_submission_service)],
    video: Annotated[UploadFile | None, File()] = None,
) -> SubmissionResponse:
    # Sync handler: runs in the threadpool while the provider call blocks.
    if video is None:
        raise ValidationError("No file uploaded")
    upload = MediaUpload(file_name=video.filename or "", content_type=video.content_type, stream=video.file)
    return service.submit(upload)


@router.get(
    "/transcription/status/{requestId}",
    response_model=JobStatusSnapshot,
    response_model_exclude_none=True,
    responses={404: {"model": NoLeakNotFoundError}},
)
async def get_transcription_status(
    request_id: Annotated[str, Path(alias="requestId")],
    service: Annotated[StatusService, Depends(get_status_service)],
) -> JobStatusSnapshot:
    return service.get_status(request_id)


@router.get("/video/{filename}", response_class=FileResponse, responses={404: {"model": NoLeakNotFoundError}})
async def get_video(
    filename: str,
    media_store: Annotated[MediaStore, Depends(get_media_store)],
) -> FileResponse:
    path = media_store.resolve(filename)
    if path is None:
        raise NotFoundError("Video not found")
    return FileResponse(path)


@router.post("/cleanup", response_model=CleanupResponse)
def cleanup_uploads(media_store: Annotated[MediaStore, Depends(get_media_store)]) -> CleanupResponse:
    deleted = media_store.clear()
    logger.info("media.cleared deleted=%d", deleted)
    return CleanupResponse(deleted_count=deleted)
