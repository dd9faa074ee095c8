"""Filesystem-backed listings for the folder tree and media resolver."""

from __future__ import annotations

import asyncio
import errno
import os
import string
import sys
from pathlib import Path

from loguru import logger

from .types import DirEntry, ListingResult

DRIVE_UNAVAILABLE_MESSAGE = "Drive unavailable or disconnected."
ACCESS_DENIED_MESSAGE = "Access denied."
PATH_NOT_FOUND_MESSAGE = "Path not found (drive may have been disconnected)."
NOT_FOUND_MESSAGE = "Not found."
NOT_A_DIRECTORY_MESSAGE = "Path is not a directory."

# ERROR_NOT_READY from the Windows API.
_WINERROR_NOT_READY = 21


def friendly_error(exc: OSError) -> str:
    """Map an OS error to a short message suitable for inline display."""
    if getattr(exc, "winerror", None) == _WINERROR_NOT_READY:
        return DRIVE_UNAVAILABLE_MESSAGE
    if isinstance(exc, PermissionError):
        return ACCESS_DENIED_MESSAGE
    if isinstance(exc, FileNotFoundError):
        return PATH_NOT_FOUND_MESSAGE
    if isinstance(exc, NotADirectoryError):
        return NOT_A_DIRECTORY_MESSAGE
    if exc.errno in (errno.ENODEV, errno.ENXIO, errno.EIO):
        return DRIVE_UNAVAILABLE_MESSAGE

    message = str(exc)
    lower = message.lower()
    if "not ready" in lower:
        return DRIVE_UNAVAILABLE_MESSAGE
    if "access is denied" in lower or "permission denied" in lower:
        return ACCESS_DENIED_MESSAGE
    if "path not found" in lower or "no such file" in lower or "the system cannot find" in lower:
        return PATH_NOT_FOUND_MESSAGE
    if "not found" in lower:
        return NOT_FOUND_MESSAGE
    return message


def list_directory(path: str, show_hidden: bool = True) -> ListingResult:
    """List direct children of ``path`` sorted case-insensitively by name.

    Entries whose metadata cannot be read are skipped. A missing, unreadable
    or non-directory ``path`` produces a failed result, never an exception.
    """
    entries: list[DirEntry] = []
    try:
        with os.scandir(path) as children:
            for child in children:
                name = child.name
                if not show_hidden and name.startswith("."):
                    continue
                try:
                    is_dir = child.is_dir()
                except OSError:
                    continue
                entries.append(DirEntry(name=name, path=child.path, is_dir=is_dir))
    except OSError as exc:
        logger.debug("Listing {} failed: {}", path, exc)
        return ListingResult.failure(friendly_error(exc))

    entries.sort(key=lambda item: item.name.lower())
    return ListingResult.success(entries)


def _readable_directory(path: str) -> bool:
    if not os.path.isdir(path):
        return False
    try:
        with os.scandir(path):
            return True
    except OSError:
        return False


def get_folder_roots(include_filesystem_root: bool = False) -> ListingResult:
    """Return top-level roots for the tree.

    On Windows every readable drive letter is a root; disconnected or
    not-ready drives are left out. Elsewhere the home directory is the root
    (``/`` is appended when ``include_filesystem_root`` is set). Call again to
    pick up newly connected volumes.
    """
    entries: list[DirEntry] = []
    if sys.platform == "win32":
        for letter in string.ascii_uppercase:
            root = f"{letter}:\\"
            if _readable_directory(root):
                entries.append(DirEntry(name=root, path=root, is_dir=True))
        return ListingResult.success(entries)

    try:
        home = Path.home()
    except (KeyError, RuntimeError):
        home = None
    if home is not None and home.is_dir():
        entries.append(DirEntry(name=home.name or "Home", path=str(home), is_dir=True))
    if include_filesystem_root:
        entries.append(DirEntry(name="/", path="/", is_dir=True))
    return ListingResult.success(entries)


class FilesystemLister:
    """``DirectoryLister`` that runs blocking scans in a worker thread."""

    def __init__(
        self,
        show_hidden: bool = True,
        include_filesystem_root: bool = False,
    ) -> None:
        self.show_hidden = show_hidden
        self.include_filesystem_root = include_filesystem_root

    async def list_directory(self, path: str) -> ListingResult:
        return await asyncio.to_thread(list_directory, path, self.show_hidden)

    async def get_folder_roots(self) -> ListingResult:
        return await asyncio.to_thread(get_folder_roots, self.include_filesystem_root)


__all__ = [
    "DRIVE_UNAVAILABLE_MESSAGE",
    "ACCESS_DENIED_MESSAGE",
    "PATH_NOT_FOUND_MESSAGE",
    "NOT_FOUND_MESSAGE",
    "NOT_A_DIRECTORY_MESSAGE",
    "friendly_error",
    "list_directory",
    "get_folder_roots",
    "FilesystemLister",
]
