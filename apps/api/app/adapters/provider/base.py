"""Speech-to-text provider interfaces."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Any


class ProviderError(Exception):
    """Raised when the provider rejects a request or cannot be reached."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        self.status_code = status_code
        super().__init__(message)


@dataclass(slots=True)
class SubmissionReceipt:
    """Acknowledgement of an asynchronous submission. Carries no transcript."""

    provider_request_id: str | None = None


class TranscriptionProvider(ABC):
    """Provider-neutral speech-to-text interface."""

    @abstractmethod
    def transcribe(self, media_path: Path, *, file_name: str) -> dict[str, Any]:
        """Transcribe inline and return the provider's transcript payload."""

    @abstractmethod
    def submit_async(self, media_path: Path, *, file_name: str, correlation_id: str) -> SubmissionReceipt:
        """Queue transcription with webhook delivery tagged by ``correlation_id``."""


__all__ = ["ProviderError", "SubmissionReceipt", "TranscriptionProvider"]
