"""Synchronous vs. asynchronous submission policy."""

from enum import Enum

DEFAULT_ASYNC_THRESHOLD_SECONDS = 600.0


class SubmissionMode(str, Enum):
    SYNCHRONOUS = "synchronous"
    ASYNCHRONOUS = "asynchronous"


def decide(
    probed_duration_seconds: float,
    async_callback_configured: bool,
    *,
    threshold_seconds: float = DEFAULT_ASYNC_THRESHOLD_SECONDS,
) -> SubmissionMode:
    """Choose the completion path for a probed media duration.

    Media at or under the threshold is always transcribed inline. Longer media
    goes through provider callback delivery, but only when the deployment has
    an externally reachable callback endpoint; otherwise it stays inline too.
    """
    if probed_duration_seconds <= threshold_seconds or not async_callback_configured:
        return SubmissionMode.SYNCHRONOUS
    return SubmissionMode.ASYNCHRONOUS
