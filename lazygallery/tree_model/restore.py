"""Reopen a previously selected folder by expanding the tree one segment at a time."""

from __future__ import annotations

from dataclasses import dataclass

from loguru import logger

from ..paths import normalize, segments
from .model import DirectoryTreeModel
from .types import FolderNode


@dataclass(frozen=True)
class RestoreResult:
    """Outcome of one restore walk.

    A walk that stops early is not an error: ``restored`` is ``False`` and
    ``missing_segment`` names the first segment that could not be matched or
    expanded.
    """

    target: str
    restored: bool
    matched_path: str | None = None
    missing_segment: str | None = None

    @classmethod
    def aborted(cls, target: str, matched_path: str | None, missing_segment: str | None) -> RestoreResult:
        return cls(target=target, restored=False, matched_path=matched_path, missing_segment=missing_segment)


class RestoreEngine:
    """Drives sequential expansions of a ``DirectoryTreeModel`` toward a path.

    The engine keeps no node references between walks; it looks nodes up by
    path on the tree each time.
    """

    def __init__(self, tree: DirectoryTreeModel) -> None:
        self.tree = tree

    async def restore(self, full_path: str) -> RestoreResult:
        """Expand every ancestor of ``full_path`` in order, then select it.

        Each segment's expansion completes before the next segment is looked
        up. A segment with no matching node, or whose listing fails, ends the
        walk silently; nodes expanded so far stay expanded.
        """
        target = normalize(full_path)
        chain = segments(target)
        if not chain:
            return RestoreResult.aborted(target, None, None)

        # Roots are not always volume roots (a home directory, for example),
        # so the walk starts at the first segment that is itself a root.
        start = next(
            (idx for idx, segment in enumerate(chain) if self.tree.find_child(None, segment) is not None),
            None,
        )
        if start is None:
            logger.debug("Restore of {} stopped: no root contains it", target)
            return RestoreResult.aborted(target, None, chain[0])

        parent: FolderNode | None = None
        for segment in chain[start:]:
            node = self.tree.find_child(parent, segment)
            if node is None:
                logger.debug("Restore of {} stopped: {} not found", target, segment)
                return RestoreResult.aborted(target, parent.path if parent else None, segment)
            error = await self.tree.expand(node)
            if error is not None or not node.loaded:
                logger.debug("Restore of {} stopped: {} could not be listed", target, segment)
                return RestoreResult.aborted(target, node.path, segment)
            parent = node

        if parent is None:
            return RestoreResult.aborted(target, None, None)
        self.tree.select(parent, programmatic=True)
        logger.debug("Restored {}", parent.path)
        return RestoreResult(target=target, restored=True, matched_path=parent.path)

    def select_default(self) -> FolderNode | None:
        """Select the first root when nothing is selected yet."""
        if self.tree.selected is not None:
            return None
        if not self.tree.roots:
            return None
        first = self.tree.roots[0]
        self.tree.select(first, programmatic=True)
        return first

    async def restore_or_default(self, full_path: str | None) -> RestoreResult | None:
        """Attempt a restore, then fall back to the first root.

        The fallback only runs after the restore walk has finished.
        """
        result: RestoreResult | None = None
        if full_path and normalize(full_path):
            result = await self.restore(full_path)
        self.select_default()
        return result


__all__ = [
    "RestoreEngine",
    "RestoreResult",
]
