"""ElevenLabs speech-to-text adapter."""

from __future__ import annotations

import json
import mimetypes
from pathlib import Path
from typing import Any

import httpx

from app.adapters.provider.base import ProviderError, SubmissionReceipt, TranscriptionProvider

_SPEECH_TO_TEXT_PATH = "/v1/speech-to-text"


class ElevenLabsProvider(TranscriptionProvider):
    """Calls the ElevenLabs ``speech-to-text`` endpoint with diarization enabled."""

    def __init__(
        self,
        *,
        api_key: str,
        base_url: str = "https://api.elevenlabs.io",
        model_id: str = "scribe_v1",
        timeout_seconds: float = 600.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._api_key = api_key
        self._base_url = base_url.rstrip("/")
        self._model_id = model_id
        self._timeout = httpx.Timeout(timeout_seconds, connect=30.0)
        self._transport = transport

    def transcribe(self, media_path: Path, *, file_name: str) -> dict[str, Any]:
        return self._post(media_path, file_name=file_name, extra_fields={})

    def submit_async(self, media_path: Path, *, file_name: str, correlation_id: str) -> SubmissionReceipt:
        body = self._post(
            media_path,
            file_name=file_name,
            extra_fields={
                "webhook": "true",
                "webhook_metadata": json.dumps({"request_id": correlation_id}),
            },
        )
        return SubmissionReceipt(provider_request_id=body.get("request_id"))

    def _form_fields(self) -> dict[str, str]:
        return {
            "model_id": self._model_id,
            "tag_audio_events": "true",
            "diarize": "true",
        }

    def _post(self, media_path: Path, *, file_name: str, extra_fields: dict[str, str]) -> dict[str, Any]:
        content_type = mimetypes.guess_type(file_name)[0] or "application/octet-stream"
        data = {**self._form_fields(), **extra_fields}
        try:
            with httpx.Client(
                base_url=self._base_url,
                timeout=self._timeout,
                transport=self._transport,
                headers={"xi-api-key": self._api_key},
            ) as client, media_path.open("rb") as handle:
                response = client.post(
                    _SPEECH_TO_TEXT_PATH,
                    data=data,
                    files={"file": (file_name, handle, content_type)},
                )
        except httpx.TimeoutException as exc:
            raise ProviderError(f"Provider request timeout: {exc}") from exc
        except httpx.HTTPError as exc:
            raise ProviderError(f"Provider request failed: {exc}") from exc

        if response.is_error:
            raise ProviderError(_error_message(response), status_code=response.status_code)

        try:
            body = response.json()
        except ValueError as exc:
            raise ProviderError("Provider returned a non-JSON response", status_code=response.status_code) from exc
        if not isinstance(body, dict):
            raise ProviderError("Provider returned an unexpected response shape", status_code=response.status_code)
        return body


def _error_message(response: httpx.Response) -> str:
    detail: Any = response.text
    try:
        payload = response.json()
    except ValueError:
        payload = None
    if isinstance(payload, dict):
        detail = payload.get("detail", payload)
        if isinstance(detail, dict):
            detail = detail.get("message") or detail.get("status") or json.dumps(detail, sort_keys=True)
    return f"Provider returned HTTP {response.status_code}: {detail}"


__all__ = ["ElevenLabsProvider"]
