"""Transcription job lifecycle transition rules."""

from app.schemas.job import JobStatus

TERMINAL_STATES: frozenset[JobStatus] = frozenset({JobStatus.COMPLETED, JobStatus.FAILED})

_ALLOWED_TRANSITIONS: dict[JobStatus, set[JobStatus]] = {
    JobStatus.PROCESSING: {JobStatus.COMPLETED, JobStatus.FAILED},
    JobStatus.COMPLETED: set(),
    JobStatus.FAILED: set(),
}


class TransitionError(Exception):
    """Raised when a status change violates the one-way job lifecycle."""

    def __init__(self, current_status: JobStatus, attempted_status: JobStatus) -> None:
        self.current_status = current_status
        self.attempted_status = attempted_status
        self.allowed_statuses = allowed_next_statuses(current_status)
        allowed = ", ".join(s.value for s in self.allowed_statuses) or "none"
        super().__init__(
            f"Invalid status transition {current_status.value} -> {attempted_status.value} (allowed: {allowed})"
        )


def is_terminal(status: JobStatus) -> bool:
    return status in TERMINAL_STATES


def allowed_next_statuses(status: JobStatus) -> list[JobStatus]:
    """Return deterministically ordered allowed successors for a status."""
    return sorted(_ALLOWED_TRANSITIONS.get(status, set()), key=lambda s: s.value)


def ensure_transition(old_status: JobStatus, new_status: JobStatus) -> None:
    """Validate transition according to lifecycle rules."""
    if new_status not in _ALLOWED_TRANSITIONS.get(old_status, set()):
        raise TransitionError(old_status, new_status)
