"""Uploaded media storage interfaces."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO


@dataclass(frozen=True, slots=True)
class StoredMedia:
    video_id: str
    path: Path
    size_bytes: int

    @property
    def video_url(self) -> str:
        return f"/api/video/{self.video_id}"


class MediaStore(ABC):
    @abstractmethod
    def save(self, file_name: str, stream: BinaryIO) -> StoredMedia:
        """Persist an upload under a fresh, collision-free video id."""

    @abstractmethod
    def resolve(self, video_id: str) -> Path | None:
        """Return the stored file for ``video_id`` if it exists."""

    @abstractmethod
    def delete(self, video_id: str) -> None: ...

    @abstractmethod
    def clear(self) -> int:
        """Delete every stored upload and return how many were removed."""


__all__ = ["MediaStore", "StoredMedia"]
