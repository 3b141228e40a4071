"""Application exception types."""

from typing import Any

from app.schemas.error import ErrorResponse


class ApiError(Exception):
    """Structured API error that maps directly to contract error payloads."""

    def __init__(self, status_code: int, code: str, message: str, details: dict[str, Any] | None = None) -> None:
        self.status_code = status_code
        self.payload = ErrorResponse(code=code, message=message, details=details)
        super().__init__(message)


class AuthenticationError(ApiError):
    """Webhook signature missing or invalid."""

    def __init__(self, message: str = "Invalid webhook signature") -> None:
        super().__init__(status_code=401, code="UNAUTHORIZED", message=message)


class ValidationError(ApiError):
    """Malformed webhook payload or missing submission metadata."""

    def __init__(self, message: str, *, code: str = "VALIDATION_ERROR", details: dict[str, Any] | None = None) -> None:
        super().__init__(status_code=400, code=code, message=message, details=details)


class NotFoundError(ApiError):
    def __init__(self, message: str = "Job not found") -> None:
        super().__init__(status_code=404, code="RESOURCE_NOT_FOUND", message=message)


class UpstreamError(ApiError):
    """The speech-to-text provider rejected or failed a call."""

    def __init__(self, message: str, *, details: dict[str, Any] | None = None) -> None:
        super().__init__(status_code=502, code="UPSTREAM_ERROR", message=message, details=details)


class InternalError(ApiError):
    def __init__(self, message: str = "Internal server error") -> None:
        super().__init__(status_code=500, code="INTERNAL_ERROR", message=message)


__all__ = [
    "ApiError",
    "AuthenticationError",
    "InternalError",
    "NotFoundError",
    "UpstreamError",
    "ValidationError",
]
