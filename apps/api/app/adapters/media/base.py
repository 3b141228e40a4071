"""Media inspection interfaces."""

from abc import ABC, abstractmethod
from pathlib import Path


class MediaProbeError(Exception):
    """Raised when a media file's duration cannot be determined."""


class MediaProbe(ABC):
    @abstractmethod
    def probe_duration(self, media_path: Path) -> float:
        """Return the media duration in seconds."""


__all__ = ["MediaProbe", "MediaProbeError"]
