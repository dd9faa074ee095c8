"""Turn a folder listing into the ordered media sequence shown for it."""

from __future__ import annotations

from loguru import logger

from ..errors import ListingError
from ..file_tree_model.types import DirEntry, ListingResult
from ..paths import normalize
from ..protocols import DirectoryLister
from .kinds import BrowseMode, MediaKind, classify
from .types import MediaEntry

READ_FAILED_MESSAGE = "Could not read folder"


def media_sort_key(entry: MediaEntry) -> tuple[str, str, str]:
    """Ordering shared by the grid, the list, and the viewer.

    Case-insensitive by display name; raw name and path break ties so the
    order is total.
    """
    return (entry.display_name.casefold(), entry.display_name, entry.path)


def build_media_entries(entries: tuple[DirEntry, ...] | list[DirEntry], mode: BrowseMode) -> list[MediaEntry]:
    """Filter, classify and sort listing entries for ``mode``."""
    allowed = mode.kinds
    out: list[MediaEntry] = []
    for entry in entries:
        if entry.is_dir:
            continue
        kind = classify(entry.name, allowed)
        if kind is MediaKind.UNSUPPORTED:
            continue
        out.append(MediaEntry(path=entry.path, display_name=entry.name, kind=kind))
    out.sort(key=media_sort_key)
    return out


class MediaEntryResolver:
    """Lists folders through a ``DirectoryLister`` and builds media sequences."""

    def __init__(self, lister: DirectoryLister, mode: BrowseMode = BrowseMode.GALLERY) -> None:
        self._lister = lister
        self.mode = mode

    async def resolve(self, folder_path: str) -> tuple[list[MediaEntry], ListingError | None]:
        """Return ``(entries, error)`` for ``folder_path``.

        On failure the entry list is empty and ``error`` carries the message.
        """
        folder = normalize(folder_path)
        try:
            result = await self._lister.list_directory(folder)
        except Exception as exc:
            result = ListingResult.failure(str(exc) or exc.__class__.__name__)
        if not result.ok or result.entries is None:
            error = ListingError(folder, result.error or READ_FAILED_MESSAGE)
            logger.warning("Could not resolve media in {}: {}", folder, error.message)
            return [], error

        entries = build_media_entries(result.entries, self.mode)
        logger.debug("Resolved {} {} entries in {}", len(entries), self.mode.value, folder)
        return entries, None


__all__ = [
    "media_sort_key",
    "build_media_entries",
    "MediaEntryResolver",
]
