"""Secondary single-item viewer context.

The primary browser publishes a snapshot of its sequence into a
``ViewerContextStore``; the viewer works on a private copy through a
``ViewerHandle`` and pulls fresh state with ``resync`` when it regains focus.
"""

from __future__ import annotations

from .context import Direction, SelectionContext, clamp_index


class ViewerContextStore:
    """Process-wide viewer context: the last published sequence and index."""

    def __init__(self) -> None:
        self._paths: tuple[str, ...] = ()
        self._index = 0
        self._open = False

    @property
    def is_open(self) -> bool:
        return self._open

    def publish(self, ordered_paths: list[str] | tuple[str, ...], index: int) -> None:
        """Replace the stored sequence; ``index`` is clamped into range."""
        self._paths = tuple(ordered_paths)
        self._index = clamp_index(index, len(self._paths))

    def open_secondary_context(self, ordered_paths: list[str] | tuple[str, ...], start_index: int) -> ViewerHandle:
        """Snapshot ``ordered_paths`` for a viewer starting at ``start_index``."""
        self.publish(ordered_paths, start_index)
        self._open = True
        return ViewerHandle(self)

    def close(self) -> None:
        self._open = False

    def get_viewer_context(self) -> tuple[tuple[str, ...], int]:
        return self._paths, self._index

    def set_viewer_index(self, index: int) -> None:
        self._index = clamp_index(index, len(self._paths))


class ViewerHandle:
    """A viewer's private navigation state bound to a store."""

    def __init__(self, store: ViewerContextStore) -> None:
        self._store = store
        paths, index = store.get_viewer_context()
        self.context = SelectionContext(paths, index)

    def current_entry(self) -> tuple[str, str] | None:
        return self.context.current_entry()

    def advance(self, direction: Direction) -> tuple[str, str] | None:
        """Step the private copy and record the new index in the store."""
        entry = self.context.advance(direction)
        if entry is not None:
            self._store.set_viewer_index(self.context.current_index)
        return entry

    def resync(self) -> tuple[str, str] | None:
        """Pull the latest published sequence and index (on focus)."""
        paths, index = self._store.get_viewer_context()
        if not paths:
            return self.context.current_entry()
        self.context = SelectionContext(paths, index)
        return self.context.current_entry()


__all__ = [
    "ViewerContextStore",
    "ViewerHandle",
]
