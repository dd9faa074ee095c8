"""Listing datatypes exchanged with directory-listing collaborators."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class DirEntry:
    """One child returned by a listing (file or directory)."""

    name: str
    path: str
    is_dir: bool


@dataclass(frozen=True)
class ListingResult:
    """Outcome of one listing call: entries on success, a message otherwise."""

    ok: bool
    entries: tuple[DirEntry, ...] | None = None
    error: str | None = None

    @classmethod
    def success(cls, entries: list[DirEntry] | tuple[DirEntry, ...]) -> ListingResult:
        """Construct a successful listing."""
        return cls(ok=True, entries=tuple(entries))

    @classmethod
    def failure(cls, message: str) -> ListingResult:
        """Construct a failed listing carrying a user-facing message."""
        return cls(ok=False, entries=None, error=message)


__all__ = [
    "DirEntry",
    "ListingResult",
]
