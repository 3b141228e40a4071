"""Status query service layer."""

import logging

from app.core.logging_safety import safe_log_identifier
from app.errors import NotFoundError
from app.repositories.base import JobRegistry
from app.schemas.job import JobStatus, JobStatusSnapshot

logger = logging.getLogger(__name__)


class StatusService:
    def __init__(self, registry: JobRegistry) -> None:
        self._registry = registry

    def get_status(self, correlation_id: str) -> JobStatusSnapshot:
        record = self._registry.get(correlation_id)
        if record is None:
            logger.info("status.not_found correlation_id=%s", safe_log_identifier(correlation_id, prefix="cid"))
            raise NotFoundError()

        metadata = record.metadata
        return JobStatusSnapshot(
            status=record.status,
            file_name=metadata.file_name,
            video_url=metadata.video_url,
            video_id=metadata.video_id,
            duration_seconds=metadata.duration_seconds,
            transcription=record.result if record.status is JobStatus.COMPLETED else None,
            error=record.error if record.status is JobStatus.FAILED else None,
            started_at=metadata.submitted_at,
            completed_at=record.completed_at,
        )
