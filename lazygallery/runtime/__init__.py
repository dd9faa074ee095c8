"""Runtime wiring: persisted state and browsing sessions."""

from .persistence import PersistenceStore
from .session import GALLERY_KEYS, MUSIC_KEYS, BrowserSession, PaneKeys

__all__ = [
    "PersistenceStore",
    "BrowserSession",
    "PaneKeys",
    "GALLERY_KEYS",
    "MUSIC_KEYS",
]
