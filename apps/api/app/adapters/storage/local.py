"""Local filesystem media store."""

from __future__ import annotations

from pathlib import Path, PurePath
import secrets
import shutil
import time
from typing import BinaryIO

from app.adapters.storage.base import MediaStore, StoredMedia

_KEEP_FILES = frozenset({".gitkeep"})


class LocalMediaStore(MediaStore):
    def __init__(self, root: str | Path) -> None:
        self._root = Path(root)

    def save(self, file_name: str, stream: BinaryIO) -> StoredMedia:
        self._root.mkdir(parents=True, exist_ok=True)
        suffix = PurePath(file_name).suffix.lower()
        video_id = f"{int(time.time() * 1000)}-{secrets.token_hex(5)}{suffix}"
        path = self._root / video_id
        try:
            with path.open("wb") as handle:
                shutil.copyfileobj(stream, handle)
        except BaseException:
            path.unlink(missing_ok=True)
            raise
        return StoredMedia(video_id=video_id, path=path, size_bytes=path.stat().st_size)

    def resolve(self, video_id: str) -> Path | None:
        # Reject anything that is not a bare file name inside the store.
        if PurePath(video_id).name != video_id or video_id in {"", ".", ".."}:
            return None
        path = self._root / video_id
        return path if path.is_file() else None

    def delete(self, video_id: str) -> None:
        path = self.resolve(video_id)
        if path is not None:
            path.unlink(missing_ok=True)

    def clear(self) -> int:
        if not self._root.is_dir():
            return 0
        deleted = 0
        for path in self._root.iterdir():
            if path.name in _KEEP_FILES or not path.is_file():
                continue
            path.unlink(missing_ok=True)
            deleted += 1
        return deleted


__all__ = ["LocalMediaStore"]
