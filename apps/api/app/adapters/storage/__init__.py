"""Uploaded media storage adapters."""

from .base import MediaStore, StoredMedia
from .local import LocalMediaStore

__all__ = ["LocalMediaStore", "MediaStore", "StoredMedia"]
