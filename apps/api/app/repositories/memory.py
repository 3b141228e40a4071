"""In-memory job registry used by the API and tests."""

from __future__ import annotations

from dataclasses import replace
from datetime import UTC, datetime
import threading
from typing import Any

from app.domain.job_fsm import ensure_transition, is_terminal
from app.repositories.base import (
    ApplyOutcome,
    DuplicateJobError,
    JobNotFoundError,
    JobRecord,
    JobRegistry,
    SourceMetadata,
)
from app.schemas.job import JobStatus


class InMemoryJobRegistry(JobRegistry):
    """Mutex-guarded map of correlation id to immutable job records.

    Job state does not survive a process restart.
    """

    def __init__(self) -> None:
        self._jobs: dict[str, JobRecord] = {}
        self._lock = threading.Lock()
        self.write_count = 0

    def create(self, correlation_id: str, metadata: SourceMetadata) -> JobRecord:
        record = JobRecord(
            correlation_id=correlation_id,
            status=JobStatus.PROCESSING,
            metadata=metadata,
        )
        with self._lock:
            if correlation_id in self._jobs:
                raise DuplicateJobError(correlation_id)
            self._jobs[correlation_id] = record
            self.write_count += 1
        return record

    def get(self, correlation_id: str) -> JobRecord | None:
        # Records are replaced wholesale under the lock, never edited in place.
        return self._jobs.get(correlation_id)

    def complete(self, correlation_id: str, result: dict[str, Any]) -> ApplyOutcome:
        return self._finish(correlation_id, JobStatus.COMPLETED, result=result)

    def fail(self, correlation_id: str, error: str) -> ApplyOutcome:
        return self._finish(correlation_id, JobStatus.FAILED, error=error)

    def _finish(
        self,
        correlation_id: str,
        new_status: JobStatus,
        *,
        result: dict[str, Any] | None = None,
        error: str | None = None,
    ) -> ApplyOutcome:
        with self._lock:
            current = self._jobs.get(correlation_id)
            if current is None:
                raise JobNotFoundError(correlation_id)
            if is_terminal(current.status):
                return ApplyOutcome(job=current, applied=False)

            ensure_transition(current.status, new_status)
            updated = replace(
                current,
                status=new_status,
                result=result if new_status is JobStatus.COMPLETED else None,
                error=error if new_status is JobStatus.FAILED else None,
                completed_at=datetime.now(UTC),
            )
            self._jobs[correlation_id] = updated
            self.write_count += 1
            return ApplyOutcome(job=updated, applied=True)

    def discard(self, correlation_id: str) -> None:
        with self._lock:
            if self._jobs.pop(correlation_id, None) is not None:
                self.write_count += 1

    def purge_before(self, cutoff: datetime) -> int:
        with self._lock:
            expired = [key for key, job in self._jobs.items() if job.metadata.submitted_at < cutoff]
            for key in expired:
                del self._jobs[key]
            self.write_count += len(expired)
            return len(expired)

    def __len__(self) -> int:
        return len(self._jobs)
