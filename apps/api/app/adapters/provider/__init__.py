"""Speech-to-text provider adapters."""

from .base import ProviderError, SubmissionReceipt, TranscriptionProvider
from .elevenlabs import ElevenLabsProvider

__all__ = [
    "ElevenLabsProvider",
    "ProviderError",
    "SubmissionReceipt",
    "TranscriptionProvider",
]
