"""Provider webhook service layer."""

from __future__ import annotations

import hashlib
import hmac
import logging

from pydantic import ValidationError as PydanticValidationError

from app.core.logging_safety import safe_log_identifier, transcript_word_count
from app.errors import ApiError, AuthenticationError, InternalError, NotFoundError, ValidationError
from app.repositories.base import ApplyOutcome, JobNotFoundError, JobRegistry
from app.schemas.webhook import TranscriptionWebhookPayload, WebhookAck

logger = logging.getLogger(__name__)

SIGNATURE_HEADER = "xi-signature"


def compute_signature(raw_body: bytes, secret: str) -> str:
    """Hex HMAC-SHA256 of the exact request bytes."""
    return hmac.new(secret.encode("utf-8"), raw_body, hashlib.sha256).hexdigest()


def verify_signature(raw_body: bytes, signature: str | None, secret: str | None) -> None:
    """Raise ``AuthenticationError`` unless ``signature`` matches; no-op without a secret."""
    if not secret:
        return
    if not signature:
        raise AuthenticationError("Missing signature")
    expected = compute_signature(raw_body, secret)
    if not hmac.compare_digest(expected.encode("ascii"), signature.strip().lower().encode("utf-8")):
        raise AuthenticationError("Invalid signature")


class WebhookService:
    """Authenticates, validates and applies transcription completion callbacks."""

    def __init__(self, registry: JobRegistry, *, secret: str | None) -> None:
        self._registry = registry
        self._secret = secret

    def handle(self, *, raw_body: bytes, signature: str | None) -> WebhookAck:
        if not self._secret:
            logger.warning("webhook.unsigned reason=no_secret_configured")
        try:
            verify_signature(raw_body, signature, self._secret)
        except AuthenticationError as exc:
            logger.warning(
                "webhook.rejected code=UNAUTHORIZED reason=%s signature_present=%s",
                exc.payload.message,
                signature is not None,
            )
            raise

        payload = self._parse(raw_body)
        data = payload.data
        correlation_id = data.correlation_id
        safe_correlation_id = safe_log_identifier(correlation_id, prefix="cid")

        try:
            outcome = self._apply(correlation_id, payload)
        except JobNotFoundError as exc:
            # Expected after a registry reset; the provider may keep retrying.
            logger.warning("webhook.rejected correlation_id=%s code=RESOURCE_NOT_FOUND", safe_correlation_id)
            raise NotFoundError() from exc
        except ApiError:
            raise
        except Exception as exc:
            logger.exception("webhook.failed correlation_id=%s", safe_correlation_id)
            raise InternalError() from exc

        if not outcome.applied:
            logger.info(
                "webhook.replayed correlation_id=%s current_status=%s",
                safe_correlation_id,
                outcome.job.status.value,
            )
            return WebhookAck(replayed=True)

        logger.info(
            "webhook.applied correlation_id=%s new_status=%s words=%d",
            safe_correlation_id,
            outcome.job.status.value,
            transcript_word_count(outcome.job.result),
        )
        return WebhookAck(replayed=False)

    def _apply(self, correlation_id: str, payload: TranscriptionWebhookPayload) -> ApplyOutcome:
        data = payload.data
        if data.transcription is not None:
            return self._registry.complete(correlation_id, data.transcription)
        return self._registry.fail(correlation_id, data.error_message or "Transcription failed")

    @staticmethod
    def _parse(raw_body: bytes) -> TranscriptionWebhookPayload:
        try:
            return TranscriptionWebhookPayload.model_validate_json(raw_body)
        except PydanticValidationError as exc:
            fields = sorted({".".join(str(part) for part in error["loc"]) for error in exc.errors() if error["loc"]})
            logger.warning("webhook.rejected code=VALIDATION_ERROR fields=%s", ",".join(fields) or "body")
            raise ValidationError("Invalid webhook payload", details={"fields": fields}) from exc


__all__ = ["SIGNATURE_HEADER", "WebhookService", "compute_signature", "verify_signature"]
