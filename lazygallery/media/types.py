"""Media entry datatypes."""

from __future__ import annotations

from dataclasses import dataclass

from .kinds import MediaKind


@dataclass(frozen=True)
class MediaEntry:
    """One browsable file in a folder's media sequence."""

    path: str
    display_name: str
    kind: MediaKind


__all__ = ["MediaEntry"]
