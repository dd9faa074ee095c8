"""Tests for lazy folder-tree expansion, failures and selection."""

from __future__ import annotations

import asyncio
import unittest

from lazygallery.errors import ListingError
from lazygallery.file_tree_model.types import ListingResult
from lazygallery.tree_model import DirectoryTreeModel
from tests.fakes import FakeLister


async def _yield_to_loop(times: int = 5) -> None:
    for _ in range(times):
        await asyncio.sleep(0)


class DirectoryTreeModelTests(unittest.IsolatedAsyncioTestCase):
    def setUp(self) -> None:
        self.lister = FakeLister(["/r"], dirs=["/r/b", "/r/A/deep"], files=["/r/x.jpg"])
        self.tree = DirectoryTreeModel(self.lister, case_insensitive=False)

    async def _root(self):
        await self.tree.load_roots()
        return self.tree.roots[0]

    async def test_load_roots_builds_top_level_nodes(self) -> None:
        root = await self._root()

        self.assertEqual(self.lister.root_calls, 1)
        self.assertEqual((root.path, root.name, root.depth), ("/r", "r", 0))
        self.assertFalse(root.loaded)
        self.assertEqual(self.lister.calls, [])

    async def test_expand_lists_only_directories_one_level_deep(self) -> None:
        root = await self._root()

        error = await self.tree.expand(root)

        self.assertIsNone(error)
        self.assertTrue(root.loaded)
        self.assertTrue(root.expanded)
        self.assertEqual([child.name for child in root.children], ["A", "b"])
        self.assertEqual({child.depth for child in root.children}, {1})
        self.assertTrue(all(not child.loaded for child in root.children))
        self.assertEqual(self.lister.calls, ["/r"])

    async def test_concurrent_expands_share_one_listing(self) -> None:
        root = await self._root()
        gate = asyncio.Event()
        self.lister.gates["/r"] = gate

        first = asyncio.create_task(self.tree.expand(root))
        second = asyncio.create_task(self.tree.expand(root))
        await _yield_to_loop()
        self.assertTrue(root.loading)
        gate.set()
        results = await asyncio.gather(first, second)

        self.assertEqual(results, [None, None])
        self.assertEqual(self.lister.calls, ["/r"])
        self.assertFalse(root.loading)

    async def test_reexpanding_a_loaded_node_does_not_list_again(self) -> None:
        root = await self._root()
        await self.tree.expand(root)

        self.tree.collapse(root)
        self.assertFalse(root.expanded)
        self.assertEqual(len(root.children), 2)
        await self.tree.expand(root)

        self.assertEqual(self.lister.calls, ["/r"])

    async def test_toggle_flips_expansion(self) -> None:
        root = await self._root()

        await self.tree.toggle(root)
        self.assertTrue(root.expanded)
        await self.tree.toggle(root)
        self.assertFalse(root.expanded)
        self.assertTrue(root.loaded)

    async def test_failed_listing_stays_failed_until_retry(self) -> None:
        root = await self._root()
        reported: list[ListingError] = []
        self.tree.add_error_listener(reported.append)
        self.lister.failures["/r"] = "Access denied."

        error = await self.tree.expand(root)
        again = await self.tree.expand(root)

        self.assertEqual(error, ListingError("/r", "Access denied."))
        self.assertIs(again, root.error)
        self.assertTrue(root.expanded)
        self.assertFalse(root.loaded)
        self.assertEqual(reported, [error])
        self.assertEqual(self.lister.calls, ["/r"])

        del self.lister.failures["/r"]
        retried = await self.tree.retry(root)

        self.assertIsNone(retried)
        self.assertIsNone(root.error)
        self.assertTrue(root.loaded)
        self.assertEqual(self.lister.calls, ["/r", "/r"])

    async def test_collapse_during_listing_discards_the_result(self) -> None:
        root = await self._root()
        gate = asyncio.Event()
        self.lister.gates["/r"] = gate

        pending = asyncio.create_task(self.tree.expand(root))
        await _yield_to_loop()
        self.tree.collapse(root)
        self.assertFalse(root.loading)
        gate.set()
        self.assertIsNone(await pending)

        self.assertFalse(root.loaded)
        self.assertEqual(root.children, [])

        await self.tree.expand(root)
        self.assertTrue(root.loaded)
        self.assertEqual(self.lister.calls, ["/r", "/r"])

    async def test_listing_abandoned_before_it_starts_leaves_node_untouched(self) -> None:
        root = await self._root()

        pending = asyncio.create_task(self.tree.expand(root))
        await asyncio.sleep(0)
        self.tree.collapse(root)
        self.assertIsNone(await pending)

        self.assertFalse(root.loading)
        self.assertFalse(root.loaded)
        self.assertEqual(self.lister.calls, [])

    async def test_refresh_rebuilds_the_tree_from_roots(self) -> None:
        root = await self._root()
        await self.tree.expand(root)
        self.tree.select(root)

        await self.tree.refresh()

        self.assertEqual(self.lister.root_calls, 2)
        self.assertIsNot(self.tree.roots[0], root)
        self.assertFalse(self.tree.roots[0].loaded)
        self.assertIsNone(self.tree.selected)

    async def test_roots_failure_is_recorded_and_reported(self) -> None:
        self.lister.roots_failure = "boom"
        reported: list[ListingError] = []
        self.tree.add_error_listener(reported.append)

        error = await self.tree.load_roots()

        self.assertEqual(error.message, "boom")
        self.assertEqual(self.tree.roots, [])
        self.assertIs(self.tree.roots_error, error)
        self.assertEqual(reported, [error])

    async def test_lister_exceptions_become_listing_errors(self) -> None:
        class ExplodingLister(FakeLister):
            async def list_directory(self, path: str) -> ListingResult:
                raise RuntimeError("kaput")

        tree = DirectoryTreeModel(ExplodingLister(["/r"]))
        await tree.load_roots()

        error = await tree.expand(tree.roots[0])

        self.assertEqual(error.message, "kaput")

    async def test_select_notifies_with_programmatic_flag(self) -> None:
        root = await self._root()
        seen: list[tuple[str, bool]] = []
        self.tree.add_folder_selected_listener(lambda path, programmatic: seen.append((path, programmatic)))

        self.tree.select(root)
        self.tree.select(root, programmatic=True)

        self.assertEqual(seen, [("/r", False), ("/r", True)])
        self.assertIs(self.tree.selected, root)

    async def test_iter_visible_descends_only_into_expanded_nodes(self) -> None:
        root = await self._root()
        await self.tree.expand(root)
        folder_a = self.tree.find_child(root, "/r/A")
        await self.tree.expand(folder_a)

        self.assertEqual([node.path for node in self.tree.iter_visible()], ["/r", "/r/A", "/r/A/deep", "/r/b"])
        self.tree.collapse(root)
        self.assertEqual([node.path for node in self.tree.iter_visible()], ["/r"])


if __name__ == "__main__":
    unittest.main()
