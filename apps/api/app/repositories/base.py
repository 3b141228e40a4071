"""Job registry interface and record types."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from app.schemas.job import JobStatus


class JobNotFoundError(LookupError):
    """Raised when a correlation id has no job record."""


class DuplicateJobError(ValueError):
    """Raised when a correlation id is registered twice."""


@dataclass(frozen=True, slots=True)
class SourceMetadata:
    file_name: str
    duration_seconds: float
    submitted_at: datetime
    video_id: str | None = None
    video_url: str | None = None


@dataclass(frozen=True, slots=True)
class JobRecord:
    correlation_id: str
    status: JobStatus
    metadata: SourceMetadata
    result: dict[str, Any] | None = None
    error: str | None = None
    completed_at: datetime | None = None


@dataclass(frozen=True, slots=True)
class ApplyOutcome:
    job: JobRecord
    applied: bool


class JobRegistry(ABC):
    """Correlation id to job state, shared by submission, webhook and status paths.

    Implementations serialize mutation and hand out immutable records, so a
    reader sees either the state before a transition or the state after it.
    """

    @abstractmethod
    def create(self, correlation_id: str, metadata: SourceMetadata) -> JobRecord:
        """Register a new ``processing`` job; raise ``DuplicateJobError`` on collision."""

    @abstractmethod
    def get(self, correlation_id: str) -> JobRecord | None:
        """Return the current record or ``None``."""

    @abstractmethod
    def complete(self, correlation_id: str, result: dict[str, Any]) -> ApplyOutcome:
        """Move a job to ``completed``; first delivery wins."""

    @abstractmethod
    def fail(self, correlation_id: str, error: str) -> ApplyOutcome:
        """Move a job to ``failed``; first delivery wins."""

    @abstractmethod
    def discard(self, correlation_id: str) -> None:
        """Drop a job whose id was never handed to a client."""

    @abstractmethod
    def purge_before(self, cutoff: datetime) -> int:
        """Evict jobs submitted before ``cutoff``; return how many were removed."""

    @abstractmethod
    def __len__(self) -> int: ...


__all__ = [
    "ApplyOutcome",
    "DuplicateJobError",
    "JobNotFoundError",
    "JobRecord",
    "JobRegistry",
    "SourceMetadata",
]
