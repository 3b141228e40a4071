"""Provider webhook schemas."""

import json
from typing import Any
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

TRANSCRIPTION_WEBHOOK_TYPE = "speech_to_text_transcription"


class WebhookMetadata(BaseModel):
    model_config = ConfigDict(extra="allow")

    request_id: str | None = None


class TranscriptionWebhookData(BaseModel):
    model_config = ConfigDict(extra="allow")

    request_id: str = Field(min_length=1)
    transcription: dict[str, Any] | None = None
    error: str | dict[str, Any] | None = None
    webhook_metadata: WebhookMetadata | None = None

    @field_validator("webhook_metadata", mode="before")
    @classmethod
    def _decode_metadata(cls, value: Any) -> Any:
        # Metadata is echoed back as the JSON string it was submitted as.
        if isinstance(value, str):
            return json.loads(value) if value.strip() else None
        return value

    @model_validator(mode="after")
    def _require_result_body(self) -> "TranscriptionWebhookData":
        if self.transcription is None and self.error is None:
            raise ValueError("transcription or error is required")
        return self

    @property
    def correlation_id(self) -> str:
        if self.webhook_metadata is not None and self.webhook_metadata.request_id:
            return self.webhook_metadata.request_id
        return self.request_id

    @property
    def error_message(self) -> str | None:
        if self.error is None:
            return None
        if isinstance(self.error, dict):
            return str(self.error.get("message") or self.error.get("detail") or json.dumps(self.error, sort_keys=True))
        return self.error


class TranscriptionWebhookPayload(BaseModel):
    type: Literal["speech_to_text_transcription"]
    data: TranscriptionWebhookData


class WebhookAck(BaseModel):
    success: bool = True
    replayed: bool = False
