"""Protocols for the collaborators the browsing core is wired against."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from .file_tree_model.types import ListingResult


@runtime_checkable
class DirectoryLister(Protocol):
    """Asynchronous source of directory listings and top-level roots."""

    async def list_directory(self, path: str) -> ListingResult:
        """Return the direct children of ``path``."""
        ...

    async def get_folder_roots(self) -> ListingResult:
        """Return the top-level roots (volumes or home) of the tree."""
        ...


@runtime_checkable
class PersistenceBackend(Protocol):
    """Key/value store that survives restarts; writes are best-effort."""

    async def get_persisted(self, key: str) -> str | None:
        """Return the stored value for ``key`` or ``None``."""
        ...

    def set_persisted(self, key: str, value: str) -> None:
        """Schedule a write without waiting for it."""
        ...


@runtime_checkable
class MediaDecoder(Protocol):
    """Produces displayable data URLs for files on demand."""

    async def read_file_as_data_url(self, path: str) -> str:
        """Return a ``data:`` URL for an image or video file."""
        ...

    async def read_file_as_audio_url(self, path: str) -> str:
        """Return a playable ``data:`` URL for an audio file."""
        ...

    async def video_thumbnail_data_url(self, path: str) -> str:
        """Return a ``data:`` URL holding one frame of a video."""
        ...


__all__ = [
    "DirectoryLister",
    "PersistenceBackend",
    "MediaDecoder",
]
