"""Display-loading fallback chain for one media entry.

Resolution order:
1. Image/Video: zero-copy asset reference -> decoded ``data:`` URL -> placeholder
2. Audio: decoded playable ``data:`` URL up front -> placeholder
3. HEIC/PDF: fixed placeholder, nothing is loaded
4. Video thumbnails: extracted frame -> ``"Video"`` placeholder

Once a placeholder is shown the chain is exhausted: further failure reports
return the same placeholder and trigger no new load.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from enum import Enum
from pathlib import PurePosixPath, PureWindowsPath

from loguru import logger

from ..paths import is_windows_style, normalize
from ..protocols import MediaDecoder
from .kinds import MediaKind
from .types import MediaEntry

HEIC_PLACEHOLDER = "HEIC"
PDF_PLACEHOLDER = "PDF cannot be displayed."
PDF_THUMBNAIL_PLACEHOLDER = "PDF"
VIDEO_THUMBNAIL_PLACEHOLDER = "Video"


class SourceKind(Enum):
    ASSET = "asset"
    DATA = "data"
    PLACEHOLDER = "placeholder"


class DisplayPurpose(Enum):
    PREVIEW = "preview"
    THUMBNAIL = "thumbnail"


@dataclass(frozen=True)
class DisplaySource:
    """What the presentation layer should load or show for an entry."""

    kind: SourceKind
    value: str

    @classmethod
    def asset(cls, url: str) -> DisplaySource:
        return cls(kind=SourceKind.ASSET, value=url)

    @classmethod
    def data(cls, url: str) -> DisplaySource:
        return cls(kind=SourceKind.DATA, value=url)

    @classmethod
    def placeholder(cls, text: str) -> DisplaySource:
        return cls(kind=SourceKind.PLACEHOLDER, value=text)

    @property
    def is_placeholder(self) -> bool:
        return self.kind is SourceKind.PLACEHOLDER


def file_asset_url(path: str) -> str:
    """Return a ``file://`` URL referencing ``path`` without reading it.

    Raises ``ValueError`` for relative paths.
    """
    normalized = normalize(path)
    if is_windows_style(normalized):
        return PureWindowsPath(normalized).as_uri()
    return PurePosixPath(normalized).as_uri()


class _Stage(Enum):
    PENDING = "pending"
    ASSET = "asset"
    DATA = "data"
    PLACEHOLDER = "placeholder"


class MediaDisplay:
    """Walks the fallback chain for one entry.

    ``start`` yields the first source to try; the presentation layer calls
    ``report_failure`` when that source fails to load and receives the next.
    """

    def __init__(
        self,
        entry: MediaEntry,
        decoder: MediaDecoder,
        *,
        purpose: DisplayPurpose = DisplayPurpose.PREVIEW,
        asset_url: Callable[[str], str] = file_asset_url,
    ) -> None:
        self.entry = entry
        self.purpose = purpose
        self._decoder = decoder
        self._asset_url = asset_url
        self._stage = _Stage.PENDING
        self.source: DisplaySource | None = None
        self.failures: list[str] = []

    @property
    def exhausted(self) -> bool:
        return self._stage is _Stage.PLACEHOLDER

    def _settle(self, stage: _Stage, source: DisplaySource) -> DisplaySource:
        self._stage = stage
        self.source = source
        return source

    def _placeholder_text(self) -> str:
        kind = self.entry.kind
        if kind is MediaKind.HEIC:
            return HEIC_PLACEHOLDER
        if kind is MediaKind.PDF:
            return PDF_THUMBNAIL_PLACEHOLDER if self.purpose is DisplayPurpose.THUMBNAIL else PDF_PLACEHOLDER
        if kind is MediaKind.VIDEO and self.purpose is DisplayPurpose.THUMBNAIL:
            return VIDEO_THUMBNAIL_PLACEHOLDER
        if kind is MediaKind.AUDIO and self.failures:
            return f"Playback failed: {self.failures[-1]}"
        return self.entry.display_name

    def _record_failure(self, reason: object) -> None:
        message = str(reason) or reason.__class__.__name__
        self.failures.append(message)
        logger.debug("Loading {} failed: {}", self.entry.path, message)

    def _fetch_for_kind(self) -> Callable[[str], Awaitable[str]]:
        if self.entry.kind is MediaKind.AUDIO:
            return self._decoder.read_file_as_audio_url
        if self.entry.kind is MediaKind.VIDEO and self.purpose is DisplayPurpose.THUMBNAIL:
            return self._decoder.video_thumbnail_data_url
        return self._decoder.read_file_as_data_url

    async def _request_data(self) -> DisplaySource:
        fetch = self._fetch_for_kind()
        try:
            url = await fetch(self.entry.path)
        except Exception as exc:
            self._record_failure(exc)
            return self._settle(_Stage.PLACEHOLDER, DisplaySource.placeholder(self._placeholder_text()))
        if not url:
            self._record_failure("no data")
            return self._settle(_Stage.PLACEHOLDER, DisplaySource.placeholder(self._placeholder_text()))
        return self._settle(_Stage.DATA, DisplaySource.data(url))

    async def start(self) -> DisplaySource:
        """Return the first source for the entry (idempotent once started)."""
        if self.source is not None:
            return self.source

        kind = self.entry.kind
        if kind in (MediaKind.HEIC, MediaKind.PDF, MediaKind.UNSUPPORTED):
            return self._settle(_Stage.PLACEHOLDER, DisplaySource.placeholder(self._placeholder_text()))
        if kind is MediaKind.AUDIO:
            return await self._request_data()
        if kind is MediaKind.VIDEO and self.purpose is DisplayPurpose.THUMBNAIL:
            return await self._request_data()

        try:
            url = self._asset_url(self.entry.path)
        except Exception as exc:
            self._record_failure(exc)
            return await self._request_data()
        return self._settle(_Stage.ASSET, DisplaySource.asset(url))

    async def report_failure(self, reason: str = "") -> DisplaySource:
        """Advance past the current source after it failed to load."""
        if self._stage is _Stage.ASSET:
            self._record_failure(reason or "asset failed to load")
            return await self._request_data()
        if self._stage is _Stage.DATA:
            self._record_failure(reason or "data failed to load")
            return self._settle(_Stage.PLACEHOLDER, DisplaySource.placeholder(self._placeholder_text()))
        if self.source is None:
            return await self.start()
        return self.source


__all__ = [
    "HEIC_PLACEHOLDER",
    "PDF_PLACEHOLDER",
    "PDF_THUMBNAIL_PLACEHOLDER",
    "VIDEO_THUMBNAIL_PLACEHOLDER",
    "SourceKind",
    "DisplayPurpose",
    "DisplaySource",
    "file_asset_url",
    "MediaDisplay",
]
