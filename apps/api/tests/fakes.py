"""Test doubles for the provider, media probe and app wiring."""

from __future__ import annotations

from collections.abc import Callable
import json
from pathlib import Path
import shutil
import tempfile
from typing import Any
import unittest

from fastapi import FastAPI

from app.adapters.media import MediaProbe, MediaProbeError
from app.adapters.provider import ProviderError, SubmissionReceipt, TranscriptionProvider
from app.core.config import Settings
from app.main import create_app
from app.services.webhooks import compute_signature

TEST_SECRET = "test-webhook-secret"
TEST_WEBHOOK_URL = "https://relay.example.test/api/webhook/transcription"

SAMPLE_TRANSCRIPT: dict[str, Any] = {
    "language_code": "en",
    "text": "hello there general",
    "words": [
        {"text": "hello", "start": 0.0, "end": 0.4, "speaker_id": "speaker_0"},
        {"text": "there", "start": 0.5, "end": 0.9, "speaker_id": "speaker_0"},
        {"text": "general", "start": 1.0, "end": 1.6, "speaker_id": "speaker_1"},
    ],
}


class FakeProvider(TranscriptionProvider):
    def __init__(self, transcript: dict[str, Any] | None = None) -> None:
        self.transcript = transcript if transcript is not None else SAMPLE_TRANSCRIPT
        self.error: ProviderError | None = None
        self.transcribe_calls: list[str] = []
        self.submit_calls: list[str] = []
        self.on_submit: Callable[[str], None] | None = None

    def transcribe(self, media_path: Path, *, file_name: str) -> dict[str, Any]:
        self.transcribe_calls.append(file_name)
        if self.error is not None:
            raise self.error
        return dict(self.transcript)

    def submit_async(self, media_path: Path, *, file_name: str, correlation_id: str) -> SubmissionReceipt:
        self.submit_calls.append(correlation_id)
        if self.on_submit is not None:
            self.on_submit(correlation_id)
        if self.error is not None:
            raise self.error
        return SubmissionReceipt(provider_request_id="provider-req-1")


class FakeMediaProbe(MediaProbe):
    def __init__(self, duration: float = 45.0) -> None:
        self.duration = duration
        self.error: MediaProbeError | None = None

    def probe_duration(self, media_path: Path) -> float:
        if self.error is not None:
            raise self.error
        return self.duration


def build_test_app(
    *,
    duration: float = 45.0,
    webhook_url: str | None = TEST_WEBHOOK_URL,
    webhook_secret: str | None = TEST_SECRET,
    **overrides: Any,
) -> FastAPI:
    """Create an app wired to fakes and a throwaway upload directory."""
    upload_dir = tempfile.mkdtemp(prefix="scribehook-test-")
    settings = Settings(
        _env_file=None,
        elevenlabs_api_key="test-api-key",
        webhook_url=webhook_url,
        webhook_secret=webhook_secret,
        upload_dir=upload_dir,
        **overrides,
    )
    app = create_app(settings)
    app.state.provider = FakeProvider()
    app.state.media_probe = FakeMediaProbe(duration)
    return app


def upload_files(name: str = "talk.mp3", content_type: str = "audio/mpeg") -> dict[str, tuple[str, bytes, str]]:
    return {"video": (name, b"ID3-fake-media-bytes", content_type)}


def webhook_body(request_id: str, transcription: dict[str, Any] | None = None, **data: Any) -> bytes:
    payload_data: dict[str, Any] = {"request_id": request_id, **data}
    if transcription is not None:
        payload_data["transcription"] = transcription
    return json.dumps({"type": "speech_to_text_transcription", "data": payload_data}).encode("utf-8")


def signed_headers(body: bytes, secret: str = TEST_SECRET) -> dict[str, str]:
    return {"content-type": "application/json", "xi-signature": compute_signature(body, secret)}


class AppTestCase(unittest.TestCase):
    def make_app(self, **kwargs: Any) -> FastAPI:
        app = build_test_app(**kwargs)
        self.addCleanup(shutil.rmtree, app.state.settings.upload_dir, ignore_errors=True)
        return app
