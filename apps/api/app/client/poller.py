"""Client poll loop for asynchronous transcription jobs.

The server cannot push completion to a caller, so a client that received
``useWebhook: true`` polls the status endpoint until it sees a terminal state
or runs out of attempts. Abandoning a job is the client's decision; the server
keeps the job in ``processing`` regardless.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
import logging
import time
from typing import Any

import httpx

logger = logging.getLogger(__name__)

DEFAULT_POLL_INTERVAL_SECONDS = 5.0
DEFAULT_MAX_ATTEMPTS = 120


class PollTimeoutError(TimeoutError):
    """The attempt budget ran out before the job reached a terminal state."""

    def __init__(self, request_id: str, attempts: int) -> None:
        self.request_id = request_id
        self.attempts = attempts
        super().__init__(f"Transcription {request_id} still processing after {attempts} polls")


class PollProtocolError(RuntimeError):
    """The status endpoint answered with something the loop does not understand."""


class TranscriptionFailedError(RuntimeError):
    def __init__(self, request_id: str, error: str | None) -> None:
        self.request_id = request_id
        self.error = error
        super().__init__(f"Transcription {request_id} failed: {error or 'unknown error'}")


@dataclass(frozen=True, slots=True)
class PollProgress:
    request_id: str
    attempt: int
    max_attempts: int
    elapsed_seconds: float


class TranscriptionStatusPoller:
    def __init__(
        self,
        client: httpx.Client,
        *,
        interval_seconds: float = DEFAULT_POLL_INTERVAL_SECONDS,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        sleep: Callable[[float], None] = time.sleep,
        on_progress: Callable[[PollProgress], None] | None = None,
        status_path: str = "/api/transcription/status/{request_id}",
    ) -> None:
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self._client = client
        self._interval_seconds = interval_seconds
        self._max_attempts = max_attempts
        self._sleep = sleep
        self._on_progress = on_progress
        self._status_path = status_path

    def wait(self, request_id: str) -> dict[str, Any]:
        """Poll until ``completed`` and return the final status snapshot."""
        for attempt in range(1, self._max_attempts + 1):
            snapshot = self._fetch(request_id)
            status = snapshot.get("status")

            if status == "completed":
                if snapshot.get("transcription") is None:
                    raise PollProtocolError(f"Completed job {request_id} carried no transcription")
                logger.info("poll.completed attempts=%d", attempt)
                return snapshot
            if status == "failed":
                raise TranscriptionFailedError(request_id, snapshot.get("error"))
            if status != "processing":
                raise PollProtocolError(f"Unknown transcription status: {status!r}")

            if self._on_progress is not None:
                self._on_progress(
                    PollProgress(
                        request_id=request_id,
                        attempt=attempt,
                        max_attempts=self._max_attempts,
                        elapsed_seconds=attempt * self._interval_seconds,
                    )
                )
            if attempt < self._max_attempts:
                self._sleep(self._interval_seconds)

        logger.warning("poll.timeout attempts=%d", self._max_attempts)
        raise PollTimeoutError(request_id, self._max_attempts)

    def _fetch(self, request_id: str) -> dict[str, Any]:
        response = self._client.get(self._status_path.format(request_id=request_id))
        if response.is_error:
            raise PollProtocolError(f"HTTP {response.status_code} polling {request_id}")
        try:
            payload = response.json()
        except ValueError as exc:
            raise PollProtocolError(f"Non-JSON status response for {request_id}") from exc
        if not isinstance(payload, dict):
            raise PollProtocolError(f"Unexpected status response shape for {request_id}")
        return payload
