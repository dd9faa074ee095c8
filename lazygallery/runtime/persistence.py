"""Persistent key/value state stored as one JSON object.

Stores the last browsed folders and selections plus viewer preferences.
Malformed or missing state reads as "no value".
Writes go through ``PersistenceStore`` as background tasks whose failures are
logged and never reach the caller.
"""

from __future__ import annotations

import asyncio
import json
from pathlib import Path

from loguru import logger
from platformdirs import user_config_dir

from ..errors import PersistenceFailure
from ..selection.slideshow import DEFAULT_INTERVAL_SECONDS, valid_interval

APP_NAME = "lazygallery"
STATE_FILENAME = "state.json"
DEFAULT_STATE_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / STATE_FILENAME
STATE_PATH = DEFAULT_STATE_PATH

LAST_FOLDER_KEY = "last_folder"
LAST_MUSIC_FOLDER_KEY = "last_music_folder"
LAST_SELECTED_FILE_KEY = "last_selected_file"
LAST_SELECTED_TRACK_KEY = "last_selected_track"
SLIDESHOW_INTERVAL_KEY = "slideshow_interval_seconds"
SHOW_HIDDEN_KEY = "show_hidden"


def _state_path(path: Path | None) -> Path:
    return path if path is not None else STATE_PATH


def load_state(path: Path | None = None) -> dict[str, object]:
    """Load the persisted JSON object.

    Returns an empty dict when the file is missing, unreadable, malformed, or
    does not decode to a top-level JSON object.
    """
    try:
        data = json.loads(_state_path(path).read_text(encoding="utf-8"))
    except (OSError, ValueError):
        return {}
    return data if isinstance(data, dict) else {}


def save_state(data: dict[str, object], path: Path | None = None) -> None:
    """Persist state as pretty-printed JSON.

    Raises ``PersistenceFailure`` when the file cannot be written.
    """
    target = _state_path(path)
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(json.dumps(data, indent=2, sort_keys=True) + "\n", encoding="utf-8")
    except (OSError, TypeError, ValueError) as exc:
        raise PersistenceFailure(str(target), str(exc)) from exc


def get_value(key: str, path: Path | None = None) -> str | None:
    """Return a stored string value, or ``None`` when unset, blank or not a string."""
    value = load_state(path).get(key)
    if not isinstance(value, str):
        return None
    stripped = value.strip()
    return stripped if stripped else None


def set_value(key: str, value: str, path: Path | None = None) -> None:
    """Store one string value; blank values are ignored."""
    stripped = str(value).strip()
    if not key or not stripped:
        return
    state = load_state(path)
    state[key] = stripped
    try:
        save_state(state, path)
    except PersistenceFailure as exc:
        raise PersistenceFailure(key, exc.message) from exc


def all_values(path: Path | None = None) -> dict[str, str]:
    """Return every stored key with its value rendered as text, sorted by key."""
    state = load_state(path)
    return {key: value if isinstance(value, str) else json.dumps(value) for key, value in sorted(state.items())}


def load_show_hidden(path: Path | None = None) -> bool:
    """Return the hidden-file preference; hidden entries are listed unless explicitly turned off."""
    value = load_state(path).get(SHOW_HIDDEN_KEY)
    return value if isinstance(value, bool) else True


def save_show_hidden(show_hidden: bool, path: Path | None = None) -> None:
    state = load_state(path)
    state[SHOW_HIDDEN_KEY] = bool(show_hidden)
    save_state(state, path)


def load_slideshow_interval(path: Path | None = None) -> int:
    """Return the slideshow interval in seconds (1..3600), default 3."""
    interval = valid_interval(load_state(path).get(SLIDESHOW_INTERVAL_KEY))
    return interval if interval is not None else DEFAULT_INTERVAL_SECONDS


def save_slideshow_interval(seconds: int, path: Path | None = None) -> bool:
    """Persist a valid interval; out-of-range values are not stored."""
    interval = valid_interval(seconds)
    if interval is None:
        return False
    set_value(SLIDESHOW_INTERVAL_KEY, str(interval), path)
    return True


class PersistenceStore:
    """Asynchronous ``PersistenceBackend`` over the JSON state file.

    Writes are fire-and-forget: ``set_persisted`` schedules a task and returns
    at once; tasks run one at a time so read-modify-write cycles never
    interleave. ``flush`` waits for everything scheduled so far.
    """

    def __init__(self, path: Path | None = None) -> None:
        self.path = path
        self._pending: set[asyncio.Task[None]] = set()
        self._write_lock: asyncio.Lock | None = None

    @property
    def location(self) -> Path:
        return _state_path(self.path)

    async def get_persisted(self, key: str) -> str | None:
        try:
            return await asyncio.to_thread(get_value, key, self.path)
        except Exception as exc:
            logger.warning("{}", PersistenceFailure(key, str(exc)))
            return None

    async def _write(self, key: str, value: str) -> None:
        if self._write_lock is None:
            self._write_lock = asyncio.Lock()
        async with self._write_lock:
            try:
                await asyncio.to_thread(set_value, key, value, self.path)
            except Exception as exc:
                failure = exc if isinstance(exc, PersistenceFailure) else PersistenceFailure(key, str(exc))
                logger.warning("Persisting {} failed: {}", key, failure.message)

    def set_persisted(self, key: str, value: str) -> None:
        """Schedule a write of ``key``; blank values are skipped."""
        if not key or value is None or not str(value).strip():
            return
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            try:
                set_value(key, str(value), self.path)
            except PersistenceFailure as exc:
                logger.warning("Persisting {} failed: {}", key, exc.message)
            return
        task = loop.create_task(self._write(key, str(value)))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def flush(self) -> None:
        """Wait for every scheduled write to finish."""
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    async def all_persisted(self) -> dict[str, str]:
        return await asyncio.to_thread(all_values, self.path)


__all__ = [
    "APP_NAME",
    "STATE_PATH",
    "DEFAULT_STATE_PATH",
    "LAST_FOLDER_KEY",
    "LAST_MUSIC_FOLDER_KEY",
    "LAST_SELECTED_FILE_KEY",
    "LAST_SELECTED_TRACK_KEY",
    "SLIDESHOW_INTERVAL_KEY",
    "SHOW_HIDDEN_KEY",
    "load_state",
    "save_state",
    "get_value",
    "set_value",
    "all_values",
    "load_show_hidden",
    "save_show_hidden",
    "load_slideshow_interval",
    "save_slideshow_interval",
    "PersistenceStore",
]
