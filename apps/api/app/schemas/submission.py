"""Submission (upload and transcribe) schemas."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class SubmissionResponse(BaseModel):
    """Either a direct transcript or a correlation id to poll with."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    success: bool = True
    use_webhook: bool
    request_id: str | None = None
    file_name: str
    video_url: str
    video_id: str
    duration_seconds: float
    transcription: dict[str, Any] | None = None
    timestamp: datetime


class HealthResponse(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    status: str = "ok"
    api_key_configured: bool
    webhook_configured: bool


class CleanupResponse(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    success: bool = True
    deleted_count: int
