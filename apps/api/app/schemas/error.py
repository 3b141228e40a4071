"""API error response schemas."""

from typing import Any
from typing import Literal

from pydantic import BaseModel


class ErrorResponse(BaseModel):
    code: str
    message: str
    details: dict[str, Any] | None = None


class NoLeakNotFoundError(BaseModel):
    code: Literal["RESOURCE_NOT_FOUND"]
    message: str


class UpstreamErrorDetails(BaseModel):
    reason: str
    technical_details: str
    suggestion: str | None = None


class UpstreamFailureError(BaseModel):
    code: Literal["UPSTREAM_ERROR"]
    message: str
    details: UpstreamErrorDetails
