"""Submission service layer: probe, decide, and drive the provider."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
import logging
import secrets
import time
from typing import BinaryIO

from app.adapters.media import MediaProbe, MediaProbeError
from app.adapters.provider import ProviderError, TranscriptionProvider
from app.adapters.storage import MediaStore, StoredMedia
from app.core.config import Settings
from app.core.logging_safety import safe_log_identifier, transcript_word_count
from app.domain.submission_policy import SubmissionMode, decide
from app.errors import ApiError, InternalError, UpstreamError, ValidationError
from app.repositories.base import JobRegistry, SourceMetadata
from app.schemas.submission import SubmissionResponse

logger = logging.getLogger(__name__)

ALLOWED_MEDIA_TYPES = frozenset(
    {
        "video/mp4",
        "video/quicktime",
        "video/x-msvideo",
        "video/x-matroska",
        "audio/mpeg",
        "audio/wav",
        "audio/mp3",
        "audio/x-m4a",
        "audio/mp4",
    }
)

_LARGE_FILE_SUGGESTION = (
    "For large files, consider converting to an audio-only format or compressing before upload."
)


@dataclass(slots=True)
class MediaUpload:
    file_name: str
    content_type: str | None
    stream: BinaryIO


def new_correlation_id() -> str:
    """Time-ordered prefix plus a random suffix; unique across submissions."""
    return f"req_{time.time_ns():x}{secrets.token_hex(6)}"


def classify_provider_failure(exc: ProviderError) -> tuple[str, str]:
    """Map a provider failure to a short reason and a user-facing message."""
    text = str(exc).lower()
    if exc.status_code == 401:
        return "authentication_failed", "Invalid API key. Check the speech-to-text provider configuration."
    if "timeout" in text:
        return "timeout", "The file took too long to process. Try a shorter or compressed file."
    if "file size" in text or exc.status_code == 413:
        return "file_too_large", "The file exceeds the maximum size limit. Please use a smaller file."
    if "format" in text:
        return "unsupported_format", "This file format is not supported. Please use MP4, MOV, AVI, MKV, MP3, or WAV."
    if "quota" in text or "limit" in text or exc.status_code == 429:
        return "quota_exceeded", "The provider quota has been exceeded. Please try again later."
    return "transcription_failed", "An error occurred during transcription. Please try again."


class SubmissionService:
    def __init__(
        self,
        *,
        registry: JobRegistry,
        settings: Settings,
        media_store: MediaStore,
        media_probe: MediaProbe,
        provider: TranscriptionProvider | None,
    ) -> None:
        self._registry = registry
        self._settings = settings
        self._media_store = media_store
        self._media_probe = media_probe
        self._provider = provider

    def submit(self, upload: MediaUpload) -> SubmissionResponse:
        if not upload.file_name:
            raise ValidationError("No file uploaded")
        if upload.content_type not in ALLOWED_MEDIA_TYPES:
            raise ValidationError(
                "Invalid file type. Only video and audio files are allowed.",
                code="UNSUPPORTED_MEDIA_TYPE",
                details={"content_type": upload.content_type},
            )

        provider = self._provider
        if provider is None:
            raise ApiError(
                status_code=500,
                code="PROVIDER_NOT_CONFIGURED",
                message="Speech-to-text provider API key is not configured",
            )

        stored = self._media_store.save(upload.file_name, upload.stream)
        safe_file = safe_log_identifier(upload.file_name, prefix="file")
        try:
            duration = self._probe(stored)
            mode = decide(
                duration,
                self._settings.async_callback_configured,
                threshold_seconds=self._settings.async_duration_threshold_seconds,
            )
            logger.info(
                "submission.decided file=%s size_bytes=%s duration_s=%.1f threshold_s=%.0f "
                "callback_configured=%s mode=%s",
                safe_file,
                stored.size_bytes,
                duration,
                self._settings.async_duration_threshold_seconds,
                self._settings.async_callback_configured,
                mode.value,
            )
            if mode is SubmissionMode.ASYNCHRONOUS:
                return self._submit_async(provider, upload=upload, stored=stored, duration=duration)
            return self._submit_sync(provider, upload=upload, stored=stored, duration=duration)
        except ApiError:
            self._media_store.delete(stored.video_id)
            raise
        except Exception as exc:
            self._media_store.delete(stored.video_id)
            logger.exception("submission.failed video_id=%s", stored.video_id)
            raise InternalError() from exc

    def _probe(self, stored: StoredMedia) -> float:
        try:
            return self._media_probe.probe_duration(stored.path)
        except MediaProbeError as exc:
            logger.warning("submission.probe_failed video_id=%s reason=%s", stored.video_id, exc)
            raise ValidationError(
                "Unable to determine media duration",
                code="MEDIA_PROBE_FAILED",
                details={"technical_details": str(exc)},
            ) from exc

    def _submit_sync(
        self,
        provider: TranscriptionProvider,
        *,
        upload: MediaUpload,
        stored: StoredMedia,
        duration: float,
    ) -> SubmissionResponse:
        started = time.monotonic()
        try:
            transcription = provider.transcribe(stored.path, file_name=upload.file_name)
        except ProviderError as exc:
            raise self._upstream_error(exc, mode=SubmissionMode.SYNCHRONOUS) from exc

        logger.info(
            "submission.transcribed video_id=%s elapsed_ms=%d words=%d",
            stored.video_id,
            (time.monotonic() - started) * 1000,
            transcript_word_count(transcription),
        )
        return SubmissionResponse(
            use_webhook=False,
            file_name=upload.file_name,
            video_url=stored.video_url,
            video_id=stored.video_id,
            duration_seconds=duration,
            transcription=transcription,
            timestamp=datetime.now(UTC),
        )

    def _submit_async(
        self,
        provider: TranscriptionProvider,
        *,
        upload: MediaUpload,
        stored: StoredMedia,
        duration: float,
    ) -> SubmissionResponse:
        self._purge_expired_jobs()

        correlation_id = new_correlation_id()
        safe_correlation_id = safe_log_identifier(correlation_id, prefix="cid")
        # The record must exist before the provider can call back with this id.
        self._registry.create(
            correlation_id,
            SourceMetadata(
                file_name=upload.file_name,
                duration_seconds=duration,
                submitted_at=datetime.now(UTC),
                video_id=stored.video_id,
                video_url=stored.video_url,
            ),
        )
        try:
            try:
                receipt = provider.submit_async(
                    stored.path,
                    file_name=upload.file_name,
                    correlation_id=correlation_id,
                )
            except BaseException:
                # The id was never returned to the client.
                self._registry.discard(correlation_id)
                raise
        except ProviderError as exc:
            raise self._upstream_error(exc, mode=SubmissionMode.ASYNCHRONOUS) from exc

        logger.info(
            "submission.accepted correlation_id=%s provider_request_id=%s jobs_in_registry=%d",
            safe_correlation_id,
            safe_log_identifier(receipt.provider_request_id, prefix="pid"),
            len(self._registry),
        )
        return SubmissionResponse(
            use_webhook=True,
            request_id=correlation_id,
            file_name=upload.file_name,
            video_url=stored.video_url,
            video_id=stored.video_id,
            duration_seconds=duration,
            timestamp=datetime.now(UTC),
        )

    def _purge_expired_jobs(self) -> None:
        retention = self._settings.job_retention_seconds
        if retention is None:
            return
        removed = self._registry.purge_before(datetime.now(UTC) - timedelta(seconds=retention))
        if removed:
            logger.info("registry.purged removed=%d retention_s=%.0f", removed, retention)

    @staticmethod
    def _upstream_error(exc: ProviderError, *, mode: SubmissionMode) -> UpstreamError:
        reason, user_message = classify_provider_failure(exc)
        logger.warning(
            "submission.provider_failed mode=%s reason=%s status_code=%s",
            mode.value,
            reason,
            exc.status_code,
        )
        return UpstreamError(
            user_message,
            details={
                "reason": reason,
                "technical_details": str(exc),
                "suggestion": _LARGE_FILE_SUGGESTION,
            },
        )


__all__ = ["ALLOWED_MEDIA_TYPES", "MediaUpload", "SubmissionService", "classify_provider_failure", "new_correlation_id"]
