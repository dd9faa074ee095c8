"""Lazy folder tree: expansion state, listing requests, and selection.

The model never scans recursively. Children of a node are listed the first
time it is expanded and cached until ``refresh`` rebuilds the whole tree.
All mutation happens on the event loop; listing results are applied after
the awaited collaborator call returns.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable, Iterator

from loguru import logger

from ..errors import ListingError
from ..file_tree_model.types import ListingResult
from ..paths import equals, normalize
from ..protocols import DirectoryLister
from .types import FolderNode

FolderSelectedListener = Callable[[str, bool], None]
ListingErrorListener = Callable[[ListingError], None]

READ_FAILED_MESSAGE = "Could not read folder"
ROOTS_FAILED_MESSAGE = "Failed to load roots"


async def _safe_listing(call: Callable[[], Awaitable[ListingResult]]) -> ListingResult:
    """Await one lister call, converting unexpected exceptions into failures."""
    try:
        result = await call()
    except Exception as exc:
        return ListingResult.failure(str(exc) or exc.__class__.__name__)
    if not isinstance(result, ListingResult):
        return ListingResult.failure(READ_FAILED_MESSAGE)
    return result


class DirectoryTreeModel:
    """Owner of every ``FolderNode`` in one folder tree."""

    def __init__(self, lister: DirectoryLister, *, case_insensitive: bool | None = None) -> None:
        self._lister = lister
        self.case_insensitive = case_insensitive
        self.roots: list[FolderNode] = []
        self.roots_error: ListingError | None = None
        self.selected: FolderNode | None = None
        self._pending: dict[FolderNode, asyncio.Task[ListingError | None]] = {}
        self._roots_request = 0
        self._folder_selected_listeners: list[FolderSelectedListener] = []
        self._error_listeners: list[ListingErrorListener] = []

    # listeners

    def add_folder_selected_listener(self, listener: FolderSelectedListener) -> None:
        """Register ``listener(path, programmatic)`` for directory selections."""
        self._folder_selected_listeners.append(listener)

    def add_error_listener(self, listener: ListingErrorListener) -> None:
        """Register a callback for listing failures (roots or nodes)."""
        self._error_listeners.append(listener)

    def _report_error(self, error: ListingError) -> None:
        logger.warning("Listing {} failed: {}", error.path or "<roots>", error.message)
        for listener in list(self._error_listeners):
            listener(error)

    # roots

    def _reset(self) -> None:
        self.roots = []
        self.roots_error = None
        self.selected = None
        # Abandoned requests notice the cleared table and drop their results.
        self._pending.clear()

    async def load_roots(self) -> ListingError | None:
        """Fetch top-level roots and replace the entire tree."""
        self._reset()
        self._roots_request += 1
        request = self._roots_request

        result = await _safe_listing(self._lister.get_folder_roots)
        if request != self._roots_request:
            return None
        if not result.ok or result.entries is None:
            error = ListingError("", result.error or ROOTS_FAILED_MESSAGE)
            self.roots_error = error
            self._report_error(error)
            return error

        self.roots = [
            FolderNode(path=normalize(entry.path), name=entry.name or entry.path, depth=0)
            for entry in result.entries
        ]
        logger.debug("Loaded {} root(s)", len(self.roots))
        return None

    async def refresh(self) -> ListingError | None:
        """Discard every node and cached listing, then reload the roots."""
        return await self.load_roots()

    # expansion

    async def expand(self, node: FolderNode) -> ListingError | None:
        """Expand ``node``, listing its children on first use.

        Already-loaded nodes only become visible again. While a listing for
        ``node`` is in flight, further calls wait for that same request. An
        expanded node that failed stays failed until ``retry``.
        """
        if not node.is_directory:
            return None
        if node.expanded and node.error is not None and node not in self._pending:
            return node.error
        node.expanded = True
        if node.loaded:
            return None

        pending = self._pending.get(node)
        if pending is None:
            pending = asyncio.ensure_future(self._load_children(node))
            self._pending[node] = pending
        return await asyncio.shield(pending)

    def collapse(self, node: FolderNode) -> None:
        """Hide ``node``'s children; cached children are kept."""
        node.expanded = False
        if self._pending.pop(node, None) is not None:
            node.loading = False

    async def toggle(self, node: FolderNode) -> ListingError | None:
        """Collapse an expanded node, expand a collapsed one."""
        if node.expanded:
            self.collapse(node)
            return None
        return await self.expand(node)

    async def retry(self, node: FolderNode) -> ListingError | None:
        """Re-issue the listing for ``node`` after a failure."""
        if node in self._pending:
            return await asyncio.shield(self._pending[node])
        node.loaded = False
        node.children = []
        node.error = None
        node.expanded = False
        return await self.expand(node)

    async def _load_children(self, node: FolderNode) -> ListingError | None:
        task = asyncio.current_task()
        if self._pending.get(node) is not task:
            # Abandoned before it started.
            return None
        node.loading = True
        node.error = None
        logger.debug("Listing {}", node.path)

        result = await _safe_listing(lambda: self._lister.list_directory(node.path))
        if self._pending.get(node) is not task:
            logger.debug("Discarding stale listing for {}", node.path)
            return None
        del self._pending[node]
        node.loading = False

        if not result.ok or result.entries is None:
            error = ListingError(node.path, result.error or READ_FAILED_MESSAGE)
            node.error = error
            self._report_error(error)
            return error

        node.children = [
            FolderNode(
                path=normalize(entry.path),
                name=entry.name or entry.path,
                depth=node.depth + 1,
            )
            for entry in result.entries
            if entry.is_dir
        ]
        node.loaded = True
        return None

    # selection

    def select(self, node: FolderNode, *, programmatic: bool = False) -> None:
        """Mark ``node`` as the single selection and notify for directories."""
        self.selected = node
        if not node.is_directory:
            return
        for listener in list(self._folder_selected_listeners):
            listener(node.path, programmatic)

    # lookup

    def find_child(self, parent: FolderNode | None, path: str) -> FolderNode | None:
        """Find a materialized child of ``parent`` (roots when ``None``) by path."""
        level = self.roots if parent is None else parent.children
        for candidate in level:
            if equals(candidate.path, path, self.case_insensitive):
                return candidate
        return None

    def iter_visible(self) -> Iterator[FolderNode]:
        """Yield nodes in display order, descending only into expanded nodes."""
        stack = list(reversed(self.roots))
        while stack:
            node = stack.pop()
            yield node
            if node.expanded and node.loaded:
                stack.extend(reversed(node.children))


__all__ = [
    "DirectoryTreeModel",
    "FolderSelectedListener",
    "ListingErrorListener",
]
