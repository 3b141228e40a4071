"""Transcription job schemas."""

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class JobStatus(str, Enum):
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"


class JobStatusSnapshot(BaseModel):
    """Point-in-time view of an asynchronous transcription job."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    status: JobStatus
    file_name: str
    video_url: str | None = None
    video_id: str | None = None
    duration_seconds: float
    transcription: dict[str, Any] | None = None
    error: str | None = None
    started_at: datetime
    completed_at: datetime | None = None
