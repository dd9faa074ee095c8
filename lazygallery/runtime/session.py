"""One browsing pane: folder tree, restore, media sequence and selection.

``BrowserSession`` wires the tree's folder-selected notifications into the
media resolver and keeps the persisted folder/file keys in step with what the
user selects. Two sessions (gallery and music) can share one persistence
store; each uses its own pair of keys.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from dataclasses import dataclass

from loguru import logger

from ..errors import ListingError
from ..media.decode import FileMediaDecoder
from ..media.kinds import BrowseMode
from ..media.loading import DisplayPurpose, MediaDisplay
from ..media.resolver import MediaEntryResolver
from ..media.types import MediaEntry
from ..paths import equals, normalize, parent
from ..protocols import DirectoryLister, MediaDecoder, PersistenceBackend
from ..selection.context import Direction, SelectionContext
from ..selection.viewer import ViewerContextStore, ViewerHandle
from ..tree_model.model import DirectoryTreeModel
from ..tree_model.restore import RestoreEngine, RestoreResult
from .persistence import (
    LAST_FOLDER_KEY,
    LAST_MUSIC_FOLDER_KEY,
    LAST_SELECTED_FILE_KEY,
    LAST_SELECTED_TRACK_KEY,
)

EntriesListener = Callable[[list[MediaEntry], SelectionContext], None]
ErrorListener = Callable[[ListingError], None]


@dataclass(frozen=True)
class PaneKeys:
    """Persistence keys for one pane's folder and selected file."""

    folder_key: str
    file_key: str


GALLERY_KEYS = PaneKeys(folder_key=LAST_FOLDER_KEY, file_key=LAST_SELECTED_FILE_KEY)
MUSIC_KEYS = PaneKeys(folder_key=LAST_MUSIC_FOLDER_KEY, file_key=LAST_SELECTED_TRACK_KEY)


class BrowserSession:
    """State and wiring for one folder-tree + media-sequence pane."""

    def __init__(
        self,
        lister: DirectoryLister,
        store: PersistenceBackend,
        *,
        mode: BrowseMode = BrowseMode.GALLERY,
        keys: PaneKeys | None = None,
        viewer_store: ViewerContextStore | None = None,
        decoder: MediaDecoder | None = None,
        case_insensitive: bool | None = None,
    ) -> None:
        self.mode = mode
        self.keys = keys or (MUSIC_KEYS if mode is BrowseMode.MUSIC else GALLERY_KEYS)
        self.case_insensitive = case_insensitive
        self.tree = DirectoryTreeModel(lister, case_insensitive=case_insensitive)
        self.restorer = RestoreEngine(self.tree)
        self.resolver = MediaEntryResolver(lister, mode)
        self.viewer_store = viewer_store or ViewerContextStore()
        self.decoder = decoder or FileMediaDecoder()
        self._store = store

        self.current_folder = ""
        self.entries: list[MediaEntry] = []
        self.selection = SelectionContext()
        self.folder_error: ListingError | None = None

        self._pending_restore_file: str | None = None
        self._viewer_folder: str | None = None
        self._folder_request = 0
        self._folder_task: asyncio.Task[None] | None = None
        self._entries_listeners: list[EntriesListener] = []
        self._error_listeners: list[ErrorListener] = []

        self.tree.add_folder_selected_listener(self._on_folder_selected)
        self.tree.add_error_listener(self._report_error)

    # listeners

    def add_entries_listener(self, listener: EntriesListener) -> None:
        self._entries_listeners.append(listener)

    def add_error_listener(self, listener: ErrorListener) -> None:
        self._error_listeners.append(listener)

    def _report_error(self, error: ListingError) -> None:
        for listener in list(self._error_listeners):
            listener(error)

    # startup

    async def start(self) -> RestoreResult | None:
        """Load roots and reopen the persisted folder and file.

        The restore target is the folder holding the persisted file when one
        is stored, else the persisted folder. Without a usable target the
        first root is selected.
        """
        folder = await self._store.get_persisted(self.keys.folder_key)
        selected_file = await self._store.get_persisted(self.keys.file_key)
        self._pending_restore_file = normalize(selected_file) or None
        target = parent(selected_file) if selected_file else normalize(folder)
        logger.debug("Restoring {} pane to {}", self.mode.value, target or "(none)")
        if target:
            self.current_folder = target

        await self.tree.load_roots()
        result = await self.restorer.restore_or_default(target or None)
        await self.settle()
        return result

    async def refresh(self) -> RestoreResult | None:
        """Rebuild the tree and reopen the current folder when it still exists."""
        folder = self.current_folder
        current = self.selection.current_entry()
        self._pending_restore_file = current[0] if current else None
        await self.tree.refresh()
        result = await self.restorer.restore_or_default(folder or None)
        await self.settle()
        return result

    # folder pipeline

    def _on_folder_selected(self, path: str, programmatic: bool) -> None:
        self.current_folder = path
        if not programmatic:
            self._store.set_persisted(self.keys.folder_key, path)
        initial_file = self._pending_restore_file
        self._pending_restore_file = None
        self._folder_request += 1
        self._folder_task = asyncio.get_running_loop().create_task(
            self._load_folder(path, self._folder_request, initial_file)
        )

    async def _load_folder(self, folder: str, request: int, initial_file: str | None) -> None:
        entries, error = await self.resolver.resolve(folder)
        if request != self._folder_request:
            logger.debug("Discarding superseded listing of {}", folder)
            return

        self.entries = entries
        self.folder_error = error
        if error is not None:
            self._report_error(error)

        selection = SelectionContext([entry.path for entry in entries])
        if initial_file:
            selection.select_path(initial_file, self.case_insensitive)
        self.selection = selection
        self._persist_selection()

        if (
            self.viewer_store.is_open
            and self._viewer_folder is not None
            and equals(self._viewer_folder, folder, self.case_insensitive)
        ):
            self._republish_to_viewer(selection)

        for listener in list(self._entries_listeners):
            listener(entries, selection)

    def _republish_to_viewer(self, selection: SelectionContext) -> None:
        """Hand the viewer the reloaded sequence, keeping its own current item.

        The viewer's index is only ever moved by the viewer. Its current path
        is looked up in the new sequence; when that path is gone the old
        index is kept, clamped into the new range.
        """
        old_paths, old_index = self.viewer_store.get_viewer_context()
        index = old_index
        if old_paths:
            found = selection.index_of(old_paths[old_index], self.case_insensitive)
            if found is not None:
                index = found
        self.viewer_store.publish(selection.ordered_paths, index)

    async def reload_folder(self) -> None:
        """Re-list the current folder (retry after a listing error)."""
        if not self.current_folder:
            return
        current = self.selection.current_entry()
        self._pending_restore_file = current[0] if current else None
        self._on_folder_selected(self.current_folder, True)
        await self.settle()

    async def settle(self) -> None:
        """Wait until the most recent folder load has been applied."""
        while self._folder_task is not None and not self._folder_task.done():
            await self._folder_task

    # selection

    def _persist_selection(self) -> None:
        current = self.selection.current_entry()
        if current is None:
            return
        path = current[0]
        self._store.set_persisted(self.keys.file_key, path)
        folder = parent(path)
        if folder:
            self._store.set_persisted(self.keys.folder_key, folder)

    def current_entry(self) -> MediaEntry | None:
        if self.selection.is_empty:
            return None
        return self.entries[self.selection.current_index]

    def select_entry(self, path: str) -> bool:
        """Select an entry of the current sequence by path."""
        if not self.selection.select_path(path, self.case_insensitive):
            return False
        self._persist_selection()
        return True

    def advance(self, direction: Direction) -> MediaEntry | None:
        """Step the primary selection with wrap-around."""
        if self.selection.advance(direction) is None:
            return None
        self._persist_selection()
        return self.current_entry()

    def display_for(self, entry: MediaEntry, purpose: DisplayPurpose = DisplayPurpose.PREVIEW) -> MediaDisplay:
        """Return the fallback chain that loads ``entry`` for display."""
        return MediaDisplay(entry, self.decoder, purpose=purpose)

    # secondary viewer

    def open_viewer(self, index: int | None = None) -> ViewerHandle | None:
        """Snapshot the current sequence into the secondary viewer context."""
        if self.selection.is_empty:
            return None
        start = self.selection.current_index if index is None else index
        self._viewer_folder = self.current_folder
        return self.viewer_store.open_secondary_context(self.selection.ordered_paths, start)

    # shutdown

    def persist_current_state(self) -> None:
        """Write the current folder and selection (on exit)."""
        if self.current_folder:
            self._store.set_persisted(self.keys.folder_key, self.current_folder)
        current = self.selection.current_entry()
        if current is not None:
            self._store.set_persisted(self.keys.file_key, current[0])


__all__ = [
    "PaneKeys",
    "GALLERY_KEYS",
    "MUSIC_KEYS",
    "BrowserSession",
]
