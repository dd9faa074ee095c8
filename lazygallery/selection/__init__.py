"""Selection and playback context shared by the browser and the viewer."""

from __future__ import annotations

from .context import Direction, SelectionContext, clamp_index
from .viewer import ViewerContextStore, ViewerHandle
from .slideshow import DEFAULT_INTERVAL_SECONDS, Slideshow, valid_interval

__all__ = [
    "Direction",
    "SelectionContext",
    "clamp_index",
    "ViewerContextStore",
    "ViewerHandle",
    "DEFAULT_INTERVAL_SECONDS",
    "Slideshow",
    "valid_interval",
]
