"""Client-side helpers for the transcription API."""

from .poller import (
    PollProgress,
    PollProtocolError,
    PollTimeoutError,
    TranscriptionFailedError,
    TranscriptionStatusPoller,
)

__all__ = [
    "PollProgress",
    "PollProtocolError",
    "PollTimeoutError",
    "TranscriptionFailedError",
    "TranscriptionStatusPoller",
]
