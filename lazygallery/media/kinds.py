"""Extension-based media classification.

Classification looks at the file extension only; file contents are never
sniffed. Every name maps to exactly one ``MediaKind``.
"""

from __future__ import annotations

from enum import Enum


class MediaKind(Enum):
    IMAGE = "image"
    VIDEO = "video"
    AUDIO = "audio"
    HEIC = "heic"
    PDF = "pdf"
    UNSUPPORTED = "unsupported"


IMAGE_EXTENSIONS = frozenset({"jpg", "jpeg", "png", "gif", "bmp", "webp", "tiff", "tif", "ico", "svg"})
VIDEO_EXTENSIONS = frozenset({"mp4", "mov", "avi", "webm", "mkv", "m4v", "wmv"})
AUDIO_EXTENSIONS = frozenset({"mp3", "wav", "ogg", "m4a", "aac", "flac", "wma", "opus", "webm"})
HEIC_EXTENSIONS = frozenset({"heic", "heif"})
PDF_EXTENSIONS = frozenset({"pdf"})

EXTENSIONS_BY_KIND: dict[MediaKind, frozenset[str]] = {
    MediaKind.IMAGE: IMAGE_EXTENSIONS,
    MediaKind.VIDEO: VIDEO_EXTENSIONS,
    MediaKind.AUDIO: AUDIO_EXTENSIONS,
    MediaKind.HEIC: HEIC_EXTENSIONS,
    MediaKind.PDF: PDF_EXTENSIONS,
}

# Checked in this order; ``webm`` is a video unless only audio is allowed.
ALL_KINDS: tuple[MediaKind, ...] = (
    MediaKind.IMAGE,
    MediaKind.VIDEO,
    MediaKind.AUDIO,
    MediaKind.HEIC,
    MediaKind.PDF,
)


class BrowseMode(Enum):
    """Which kinds a browsing pane shows."""

    GALLERY = "gallery"
    MUSIC = "music"

    @property
    def kinds(self) -> tuple[MediaKind, ...]:
        if self is BrowseMode.MUSIC:
            return (MediaKind.AUDIO,)
        return (MediaKind.IMAGE, MediaKind.VIDEO, MediaKind.HEIC, MediaKind.PDF)


def extension_of(name: str) -> str:
    """Return the lowercase extension of ``name`` without the dot."""
    base = name.rsplit("/", 1)[-1].rsplit("\\", 1)[-1]
    if "." not in base:
        return ""
    return base.rsplit(".", 1)[-1].lower()


def classify(name: str, allowed: tuple[MediaKind, ...] = ALL_KINDS) -> MediaKind:
    """Return the first allowed kind whose extension table contains ``name``'s."""
    ext = extension_of(name)
    if not ext:
        return MediaKind.UNSUPPORTED
    for kind in allowed:
        if ext in EXTENSIONS_BY_KIND.get(kind, ()):
            return kind
    return MediaKind.UNSUPPORTED


__all__ = [
    "MediaKind",
    "BrowseMode",
    "IMAGE_EXTENSIONS",
    "VIDEO_EXTENSIONS",
    "AUDIO_EXTENSIONS",
    "HEIC_EXTENSIONS",
    "PDF_EXTENSIONS",
    "EXTENSIONS_BY_KIND",
    "ALL_KINDS",
    "extension_of",
    "classify",
]
