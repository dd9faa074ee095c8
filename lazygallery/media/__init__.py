"""Media classification, folder resolution, and display loading.

This package turns folder listings into ordered media sequences and decides,
per entry, which representation the presentation layer should load next.
"""

from __future__ import annotations

from .kinds import ALL_KINDS, BrowseMode, MediaKind, classify, extension_of
from .types import MediaEntry
from .resolver import MediaEntryResolver, build_media_entries, media_sort_key
from .loading import DisplayPurpose, DisplaySource, MediaDisplay, SourceKind, file_asset_url
from .decode import FileMediaDecoder

__all__ = [
    "ALL_KINDS",
    "BrowseMode",
    "MediaKind",
    "classify",
    "extension_of",
    "MediaEntry",
    "MediaEntryResolver",
    "build_media_entries",
    "media_sort_key",
    "DisplayPurpose",
    "DisplaySource",
    "MediaDisplay",
    "SourceKind",
    "file_asset_url",
    "FileMediaDecoder",
]
