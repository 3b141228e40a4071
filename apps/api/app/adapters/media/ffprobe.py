"""ffprobe-backed duration probe."""

from __future__ import annotations

import json
import math
from pathlib import Path
import subprocess

from app.adapters.media.base import MediaProbe, MediaProbeError


class FfprobeMediaProbe(MediaProbe):
    def __init__(self, binary: str = "ffprobe", timeout_seconds: float = 60.0) -> None:
        self._binary = binary
        self._timeout_seconds = timeout_seconds

    def probe_duration(self, media_path: Path) -> float:
        command = [
            self._binary,
            "-v",
            "error",
            "-show_entries",
            "format=duration",
            "-of",
            "json",
            str(media_path),
        ]
        try:
            completed = subprocess.run(
                command,
                capture_output=True,
                text=True,
                timeout=self._timeout_seconds,
                check=True,
            )
        except FileNotFoundError as exc:
            raise MediaProbeError(f"{self._binary} is not installed") from exc
        except subprocess.TimeoutExpired as exc:
            raise MediaProbeError("Media probe timed out") from exc
        except subprocess.CalledProcessError as exc:
            raise MediaProbeError((exc.stderr or "").strip() or "Media probe failed") from exc

        try:
            duration = float(json.loads(completed.stdout)["format"]["duration"])
        except (ValueError, KeyError, TypeError) as exc:
            raise MediaProbeError("Media probe returned no duration") from exc
        if not math.isfinite(duration) or duration < 0:
            raise MediaProbeError(f"Media probe returned an invalid duration: {duration}")
        return duration


__all__ = ["FfprobeMediaProbe"]
