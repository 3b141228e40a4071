"""Media inspection adapters."""

from .base import MediaProbe, MediaProbeError
from .ffprobe import FfprobeMediaProbe

__all__ = ["FfprobeMediaProbe", "MediaProbe", "MediaProbeError"]
