"""Ordered selection over one folder's media sequence.

A ``SelectionContext`` is a plain value threaded through callers; there is no
module-level "current item".
"""

from __future__ import annotations

from enum import Enum

from ..paths import basename, equals


class Direction(Enum):
    NEXT = "next"
    PREVIOUS = "previous"


def clamp_index(index: int, length: int) -> int:
    """Clamp ``index`` into ``[0, length)``; ``0`` for an empty sequence."""
    if length <= 0:
        return 0
    return max(0, min(int(index), length - 1))


class SelectionContext:
    """Current index within a fixed ordered path sequence.

    Navigation wraps at both ends and never leaves the range.
    """

    def __init__(self, ordered_paths: list[str] | tuple[str, ...] = (), current_index: int = 0) -> None:
        self.ordered_paths: tuple[str, ...] = tuple(ordered_paths)
        self.current_index = clamp_index(current_index, len(self.ordered_paths))

    def __len__(self) -> int:
        return len(self.ordered_paths)

    def __repr__(self) -> str:
        return f"SelectionContext(len={len(self.ordered_paths)}, current_index={self.current_index})"

    @property
    def is_empty(self) -> bool:
        return not self.ordered_paths

    def _entry_at(self, index: int) -> tuple[str, str]:
        path = self.ordered_paths[index]
        return path, basename(path)

    def current_entry(self) -> tuple[str, str] | None:
        """Return ``(path, display_name)`` of the current item."""
        if self.is_empty:
            return None
        return self._entry_at(self.current_index)

    def advance(self, direction: Direction) -> tuple[str, str] | None:
        """Move one step with wrap-around and return the new current item."""
        if self.is_empty:
            return None
        length = len(self.ordered_paths)
        step = 1 if direction is Direction.NEXT else -1
        self.current_index = (self.current_index + step) % length
        return self._entry_at(self.current_index)

    def index_of(self, path: str, case_insensitive: bool | None = None) -> int | None:
        for idx, candidate in enumerate(self.ordered_paths):
            if candidate == path or equals(candidate, path, case_insensitive):
                return idx
        return None

    def select_path(self, path: str, case_insensitive: bool | None = None) -> bool:
        """Make ``path`` current when it is in the sequence."""
        idx = self.index_of(path, case_insensitive)
        if idx is None:
            return False
        self.current_index = idx
        return True

    def snapshot(self) -> SelectionContext:
        """Return an independent copy."""
        return SelectionContext(self.ordered_paths, self.current_index)


__all__ = [
    "Direction",
    "clamp_index",
    "SelectionContext",
]
