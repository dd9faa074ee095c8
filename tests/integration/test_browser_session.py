"""End-to-end browsing sessions over in-memory listings and state."""

from __future__ import annotations

import asyncio
import unittest

from lazygallery.errors import ListingError
from lazygallery.media import BrowseMode, MediaKind
from lazygallery.runtime.session import GALLERY_KEYS, MUSIC_KEYS, BrowserSession
from lazygallery.selection import Direction, ViewerContextStore
from tests.fakes import FakeDecoder, FakeLister, FakeStore

PHOTOS_2023 = "C:\\Photos\\2023"
PHOTOS_2024 = "C:\\Photos\\2024"


def _library() -> FakeLister:
    return FakeLister(
        ["C:\\"],
        dirs=[PHOTOS_2023, PHOTOS_2024, "C:\\Music"],
        files=[
            PHOTOS_2023 + "\\b.jpg",
            PHOTOS_2023 + "\\A.PNG",
            PHOTOS_2023 + "\\c.mp4",
            PHOTOS_2023 + "\\d.txt",
            PHOTOS_2024 + "\\z.jpg",
            "C:\\top.jpg",
            "C:\\Music\\song.mp3",
            "C:\\Music\\clip.webm",
        ],
    )


class BrowserSessionTests(unittest.IsolatedAsyncioTestCase):
    def _session(self, values: dict[str, str] | None = None, **kwargs) -> BrowserSession:
        self.lister = _library()
        self.store = FakeStore(values)
        return BrowserSession(self.lister, self.store, decoder=FakeDecoder(), case_insensitive=False, **kwargs)

    def _node(self, session: BrowserSession, *chain: str):
        node = None
        for path in chain:
            node = session.tree.find_child(node, path)
        return node

    async def test_missing_file_restores_its_folder_and_selects_first_entry(self) -> None:
        session = self._session({GALLERY_KEYS.file_key: PHOTOS_2023 + "\\missing.jpg"})

        result = await session.start()

        self.assertTrue(result.restored)
        self.assertEqual(session.current_folder, PHOTOS_2023)
        self.assertEqual(
            [(entry.display_name, entry.kind) for entry in session.entries],
            [("A.PNG", MediaKind.IMAGE), ("b.jpg", MediaKind.IMAGE), ("c.mp4", MediaKind.VIDEO)],
        )
        self.assertEqual(session.selection.current_index, 0)
        self.assertEqual(self.store.values[GALLERY_KEYS.file_key], PHOTOS_2023 + "\\A.PNG")
        self.assertEqual(self.store.values[GALLERY_KEYS.folder_key], PHOTOS_2023)

    async def test_persisted_file_becomes_the_current_entry(self) -> None:
        session = self._session({GALLERY_KEYS.file_key: PHOTOS_2023 + "\\b.jpg"})

        await session.start()

        self.assertEqual(session.selection.current_index, 1)
        self.assertEqual(session.current_entry().display_name, "b.jpg")

    async def test_persisted_folder_is_used_without_a_file(self) -> None:
        session = self._session({GALLERY_KEYS.folder_key: PHOTOS_2024})

        await session.start()

        self.assertEqual(session.current_folder, PHOTOS_2024)
        self.assertEqual([entry.display_name for entry in session.entries], ["z.jpg"])

    async def test_vanished_folder_falls_back_to_first_root(self) -> None:
        session = self._session({GALLERY_KEYS.folder_key: "C:\\Gone\\Deeper"})

        result = await session.start()

        self.assertFalse(result.restored)
        self.assertEqual(session.current_folder, "C:\\")
        self.assertEqual([entry.display_name for entry in session.entries], ["top.jpg"])

    async def test_programmatic_selection_of_empty_folder_persists_nothing(self) -> None:
        session = self._session({GALLERY_KEYS.folder_key: "C:\\Photos"})

        await session.start()

        self.assertEqual(session.entries, [])
        self.assertEqual(self.store.writes, [])

    async def test_user_folder_selection_is_persisted(self) -> None:
        session = self._session({GALLERY_KEYS.file_key: PHOTOS_2023 + "\\b.jpg"})
        await session.start()

        session.tree.select(self._node(session, "C:\\", "C:\\Photos", PHOTOS_2024))
        await session.settle()

        self.assertIn((GALLERY_KEYS.folder_key, PHOTOS_2024), self.store.writes)
        self.assertEqual(self.store.values[GALLERY_KEYS.file_key], PHOTOS_2024 + "\\z.jpg")

    async def test_latest_folder_request_wins(self) -> None:
        session = self._session({GALLERY_KEYS.folder_key: PHOTOS_2023})
        await session.start()
        gate = asyncio.Event()
        self.lister.gates[PHOTOS_2024] = gate
        delivered: list[list[str]] = []
        session.add_entries_listener(lambda entries, _selection: delivered.append([e.display_name for e in entries]))

        session.tree.select(self._node(session, "C:\\", "C:\\Photos", PHOTOS_2024))
        session.tree.select(self._node(session, "C:\\", "C:\\Photos", PHOTOS_2023))
        await session.settle()
        gate.set()
        for _ in range(5):
            await asyncio.sleep(0)

        self.assertEqual(session.current_folder, PHOTOS_2023)
        self.assertEqual([entry.display_name for entry in session.entries], ["A.PNG", "b.jpg", "c.mp4"])
        self.assertEqual(delivered, [["A.PNG", "b.jpg", "c.mp4"]])

    async def test_advance_wraps_and_persists(self) -> None:
        session = self._session({GALLERY_KEYS.folder_key: PHOTOS_2023})
        await session.start()

        entry = session.advance(Direction.PREVIOUS)

        self.assertEqual(entry.display_name, "c.mp4")
        self.assertEqual(self.store.values[GALLERY_KEYS.file_key], PHOTOS_2023 + "\\c.mp4")
        self.assertTrue(session.select_entry(PHOTOS_2023 + "\\b.jpg"))
        self.assertFalse(session.select_entry(PHOTOS_2023 + "\\nope.jpg"))
        self.assertEqual(session.current_entry().display_name, "b.jpg")

    async def test_viewer_sees_folder_reload_after_resync(self) -> None:
        viewer_store = ViewerContextStore()
        session = self._session({GALLERY_KEYS.folder_key: PHOTOS_2023}, viewer_store=viewer_store)
        await session.start()
        handle = session.open_viewer()

        self.assertEqual(handle.advance(Direction.NEXT)[1], "b.jpg")
        self.assertEqual(session.current_entry().display_name, "A.PNG")

        self.lister.add(PHOTOS_2023 + "\\0.jpg", is_dir=False)
        await session.reload_folder()
        self.assertEqual(len(handle.context), 3)

        handle.resync()
        self.assertEqual(len(handle.context), 4)
        self.assertEqual(handle.current_entry()[1], "b.jpg")
        self.assertEqual(session.current_entry().display_name, "A.PNG")

    async def test_unchanged_reload_keeps_viewer_position(self) -> None:
        session = self._session({GALLERY_KEYS.folder_key: PHOTOS_2023})
        await session.start()
        handle = session.open_viewer()
        handle.advance(Direction.NEXT)
        handle.advance(Direction.NEXT)

        await session.reload_folder()
        handle.resync()

        self.assertEqual(handle.current_entry()[1], "c.mp4")
        self.assertEqual(session.current_entry().display_name, "A.PNG")

    async def test_viewer_entry_removed_on_reload_falls_back_to_clamped_index(self) -> None:
        session = self._session({GALLERY_KEYS.folder_key: PHOTOS_2023})
        await session.start()
        handle = session.open_viewer(2)
        self.lister.children[PHOTOS_2023] = [
            entry for entry in self.lister.children[PHOTOS_2023] if entry.name != "c.mp4"
        ]

        await session.reload_folder()
        handle.resync()

        self.assertEqual(len(handle.context), 2)
        self.assertEqual(handle.current_entry()[1], "b.jpg")

    async def test_folder_listing_error_is_reported(self) -> None:
        session = self._session({GALLERY_KEYS.folder_key: PHOTOS_2023})
        await session.start()
        errors: list[ListingError] = []
        session.add_error_listener(errors.append)

        self.lister.failures[PHOTOS_2023] = "Access denied."
        await session.reload_folder()

        self.assertEqual(session.entries, [])
        self.assertEqual(session.folder_error, ListingError(PHOTOS_2023, "Access denied."))
        self.assertEqual(errors, [session.folder_error])

    async def test_refresh_keeps_folder_and_selection(self) -> None:
        session = self._session({GALLERY_KEYS.file_key: PHOTOS_2023 + "\\b.jpg"})
        await session.start()

        await session.refresh()

        self.assertEqual(self.lister.root_calls, 2)
        self.assertEqual(session.current_folder, PHOTOS_2023)
        self.assertEqual(session.current_entry().display_name, "b.jpg")

    async def test_music_session_uses_its_own_keys(self) -> None:
        session = self._session({MUSIC_KEYS.file_key: "C:\\Music\\song.mp3"}, mode=BrowseMode.MUSIC)

        await session.start()

        self.assertEqual(session.keys, MUSIC_KEYS)
        self.assertEqual([entry.display_name for entry in session.entries], ["clip.webm", "song.mp3"])
        self.assertEqual({entry.kind for entry in session.entries}, {MediaKind.AUDIO})
        self.assertEqual(session.current_entry().display_name, "song.mp3")
        self.assertNotIn(GALLERY_KEYS.file_key, self.store.values)

    async def test_display_for_uses_the_session_decoder(self) -> None:
        session = self._session({MUSIC_KEYS.folder_key: "C:\\Music"}, mode=BrowseMode.MUSIC)
        await session.start()

        source = await session.display_for(session.current_entry()).start()

        self.assertEqual(source.value, "data:audio/mpeg;base64,AAAA")

    async def test_persist_current_state_writes_folder_and_file(self) -> None:
        session = self._session({GALLERY_KEYS.folder_key: PHOTOS_2024})
        await session.start()
        self.store.writes.clear()

        session.persist_current_state()

        self.assertEqual(
            self.store.writes,
            [(GALLERY_KEYS.folder_key, PHOTOS_2024), (GALLERY_KEYS.file_key, PHOTOS_2024 + "\\z.jpg")],
        )


if __name__ == "__main__":
    unittest.main()
