"""Timed auto-advance for the secondary viewer."""

from __future__ import annotations

import asyncio
from collections.abc import Callable

from .context import Direction
from .viewer import ViewerHandle

MIN_INTERVAL_SECONDS = 1
MAX_INTERVAL_SECONDS = 3600
DEFAULT_INTERVAL_SECONDS = 3


def valid_interval(value: object) -> int | None:
    """Return ``value`` as whole seconds when inside the accepted range."""
    if isinstance(value, bool):
        return None
    if isinstance(value, str):
        try:
            value = int(value.strip(), 10)
        except ValueError:
            return None
    if not isinstance(value, int):
        return None
    if value < MIN_INTERVAL_SECONDS or value > MAX_INTERVAL_SECONDS:
        return None
    return value


class Slideshow:
    """Advances a viewer handle every ``interval_seconds`` while running."""

    def __init__(
        self,
        handle: ViewerHandle,
        interval_seconds: int = DEFAULT_INTERVAL_SECONDS,
        on_advance: Callable[[tuple[str, str]], None] | None = None,
    ) -> None:
        self._handle = handle
        self.interval_seconds = valid_interval(interval_seconds) or DEFAULT_INTERVAL_SECONDS
        self._on_advance = on_advance
        self._task: asyncio.Task[None] | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self.interval_seconds)
            entry = self._handle.advance(Direction.NEXT)
            if entry is not None and self._on_advance is not None:
                self._on_advance(entry)

    def start(self) -> None:
        if self.running:
            return
        self._task = asyncio.get_running_loop().create_task(self._run())

    def stop(self) -> None:
        if self._task is not None:
            self._task.cancel()
            self._task = None

    def toggle(self) -> bool:
        """Start or stop; return whether the slideshow now runs."""
        if self.running:
            self.stop()
        else:
            self.start()
        return self.running

    def set_interval(self, seconds: object) -> bool:
        """Change the interval (restarting a running timer); reject bad values."""
        interval = valid_interval(seconds)
        if interval is None:
            return False
        self.interval_seconds = interval
        if self.running:
            self.stop()
            self.start()
        return True


__all__ = [
    "MIN_INTERVAL_SECONDS",
    "MAX_INTERVAL_SECONDS",
    "DEFAULT_INTERVAL_SECONDS",
    "valid_interval",
    "Slideshow",
]
