"""FastAPI application entrypoint."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exception_handlers import request_validation_exception_handler
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.adapters.media import FfprobeMediaProbe
from app.adapters.provider import ElevenLabsProvider, TranscriptionProvider
from app.adapters.storage import LocalMediaStore
from app.core.config import Settings, get_settings
from app.core.logging_safety import configure_logging
from app.errors import ApiError
from app.repositories.memory import InMemoryJobRegistry
from app.routes import transcriptions_router, webhooks_router
from app.schemas.error import ErrorResponse

logger = logging.getLogger(__name__)

_SUBMISSION_VALIDATION_PATHS: set[tuple[str, str]] = {
    ("POST", "/api/transcribe"),
}

_WEBHOOK_VALIDATION_PATHS: set[tuple[str, str]] = {
    ("POST", "/api/webhook/transcription"),
}


def build_provider(settings: Settings) -> TranscriptionProvider | None:
    """Return the configured provider, or ``None`` when no API key is set."""
    if not settings.elevenlabs_api_key:
        return None
    return ElevenLabsProvider(
        api_key=settings.elevenlabs_api_key,
        base_url=settings.provider_base_url,
        model_id=settings.provider_model_id,
        timeout_seconds=settings.provider_timeout_seconds,
    )


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(title="Scribehook API", version="1.0.0")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.state.settings = settings
    app.state.registry = InMemoryJobRegistry()
    app.state.media_store = LocalMediaStore(settings.upload_dir)
    app.state.media_probe = FfprobeMediaProbe(settings.ffprobe_binary)
    app.state.provider = build_provider(settings)

    @app.exception_handler(ApiError)
    async def handle_api_error(_, exc: ApiError) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content=exc.payload.model_dump(mode="json", exclude_none=True),
        )

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
        # Keep malformed submissions and callbacks on the contract's 400 shape.
        route_key = (request.method.upper(), request.url.path)
        if route_key in _SUBMISSION_VALIDATION_PATHS:
            payload = ErrorResponse(code="VALIDATION_ERROR", message="No file uploaded")
            return JSONResponse(status_code=400, content=payload.model_dump(exclude_none=True))
        if route_key in _WEBHOOK_VALIDATION_PATHS:
            payload = ErrorResponse(code="VALIDATION_ERROR", message="Invalid webhook payload")
            return JSONResponse(status_code=400, content=payload.model_dump(exclude_none=True))

        return await request_validation_exception_handler(request, exc)

    api_prefix = "/api"
    app.include_router(transcriptions_router, prefix=api_prefix)
    app.include_router(webhooks_router, prefix=api_prefix)

    logger.info(
        "app.configured provider_configured=%s webhook_configured=%s signature_required=%s threshold_s=%.0f",
        app.state.provider is not None,
        settings.async_callback_configured,
        bool(settings.webhook_secret),
        settings.async_duration_threshold_seconds,
    )
    return app


app = create_app()
