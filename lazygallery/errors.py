"""Typed failure outcomes raised or returned across the browsing core.

None of these are fatal: listing failures are shown inline and retried by the
user, media failures advance the display fallback chain, and persistence
failures are only logged.
"""

from __future__ import annotations


class LazyGalleryError(Exception):
    """Base class for lazygallery failures."""


class ListingError(LazyGalleryError):
    """A directory or root listing could not be read."""

    def __init__(self, path: str, message: str) -> None:
        super().__init__(message)
        self.path = path
        self.message = message

    def __str__(self) -> str:
        return self.message

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ListingError):
            return NotImplemented
        return (self.path, self.message) == (other.path, other.message)

    def __hash__(self) -> int:
        return hash((self.path, self.message))


class MediaLoadFailure(LazyGalleryError):
    """One media loading strategy failed for ``path``."""

    def __init__(self, path: str, message: str) -> None:
        super().__init__(message)
        self.path = path
        self.message = message

    def __str__(self) -> str:
        return self.message


class PersistenceFailure(LazyGalleryError):
    """Reading or writing one persisted key failed."""

    def __init__(self, key: str, message: str) -> None:
        super().__init__(f"{key}: {message}")
        self.key = key
        self.message = message


__all__ = [
    "LazyGalleryError",
    "ListingError",
    "MediaLoadFailure",
    "PersistenceFailure",
]
