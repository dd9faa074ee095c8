"""Tests for reopening a persisted folder by sequential expansion."""

from __future__ import annotations

import unittest

from lazygallery.tree_model import DirectoryTreeModel, RestoreEngine
from tests.fakes import FakeLister


class RestoreEngineTests(unittest.IsolatedAsyncioTestCase):
    async def _engine(self, lister: FakeLister, *, case_insensitive: bool = False) -> RestoreEngine:
        tree = DirectoryTreeModel(lister, case_insensitive=case_insensitive)
        self.selections: list[tuple[str, bool]] = []
        tree.add_folder_selected_listener(lambda path, programmatic: self.selections.append((path, programmatic)))
        await tree.load_roots()
        return RestoreEngine(tree)

    async def test_restores_drive_path_one_level_at_a_time(self) -> None:
        lister = FakeLister(["C:\\"], dirs=["C:\\Photos\\2023", "C:\\Music"])
        engine = await self._engine(lister)

        result = await engine.restore("C:\\Photos\\2023")

        self.assertTrue(result.restored)
        self.assertEqual(result.matched_path, "C:\\Photos\\2023")
        self.assertEqual(lister.calls, ["C:\\", "C:\\Photos", "C:\\Photos\\2023"])
        self.assertEqual(engine.tree.selected.path, "C:\\Photos\\2023")
        self.assertEqual(self.selections, [("C:\\Photos\\2023", True)])

    async def test_case_insensitive_match_uses_tree_spelling(self) -> None:
        lister = FakeLister(["C:\\"], dirs=["C:\\Photos\\2023"])
        engine = await self._engine(lister, case_insensitive=True)

        result = await engine.restore("c:/photos/2023/")

        self.assertTrue(result.restored)
        self.assertEqual(engine.tree.selected.path, "C:\\Photos\\2023")

    async def test_missing_intermediate_folder_falls_back_to_first_root(self) -> None:
        lister = FakeLister(["C:\\", "D:\\"], dirs=["C:\\Photos"])
        engine = await self._engine(lister)

        result = await engine.restore_or_default("C:\\Photos\\Gone\\Deeper")

        self.assertFalse(result.restored)
        self.assertEqual(result.missing_segment, "C:\\Photos\\Gone")
        self.assertEqual(result.matched_path, "C:\\Photos")
        photos = engine.tree.find_child(engine.tree.roots[0], "C:\\Photos")
        self.assertTrue(photos.expanded)
        self.assertEqual(engine.tree.selected.path, "C:\\")
        self.assertEqual(self.selections, [("C:\\", True)])

    async def test_listing_failure_mid_walk_stops_the_restore(self) -> None:
        lister = FakeLister(["C:\\"], dirs=["C:\\Photos\\2023"])
        lister.failures["C:\\Photos"] = "Access denied."
        engine = await self._engine(lister)

        result = await engine.restore("C:\\Photos\\2023")

        self.assertFalse(result.restored)
        self.assertEqual(result.missing_segment, "C:\\Photos")
        self.assertIsNone(engine.tree.selected)
        self.assertNotIn("C:\\Photos\\2023", lister.calls)

    async def test_walk_starts_at_a_home_directory_root(self) -> None:
        lister = FakeLister(["/home/me"], dirs=["/home/me/Pictures/2024"])
        engine = await self._engine(lister)

        result = await engine.restore("/home/me/Pictures/2024")

        self.assertTrue(result.restored)
        self.assertEqual(lister.calls, ["/home/me", "/home/me/Pictures", "/home/me/Pictures/2024"])

    async def test_path_outside_every_root_aborts(self) -> None:
        lister = FakeLister(["/home/me"])
        engine = await self._engine(lister)

        result = await engine.restore("/srv/media")

        self.assertFalse(result.restored)
        self.assertEqual(result.missing_segment, "/")
        self.assertEqual(lister.calls, [])

    async def test_default_selection_does_not_override_existing_selection(self) -> None:
        lister = FakeLister(["C:\\", "D:\\"])
        engine = await self._engine(lister)

        await engine.restore_or_default(None)
        engine.tree.select(engine.tree.roots[1])
        await engine.restore_or_default("")

        self.assertEqual(engine.tree.selected.path, "D:\\")


if __name__ == "__main__":
    unittest.main()
