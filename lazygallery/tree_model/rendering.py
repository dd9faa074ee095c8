"""Plain-text formatting for folder-tree rows."""

from __future__ import annotations

from .model import DirectoryTreeModel
from .types import FolderNode

LOADING_LABEL = "Loading…"


def format_tree_node(node: FolderNode, *, selected: bool = False) -> str:
    """Render one folder row with its expansion marker."""
    indent = "  " * node.depth
    marker = "▾ " if node.expanded else "▸ "
    cursor = "> " if selected else "  "
    return f"{cursor}{indent}{marker}{node.label}"


def format_tree_rows(tree: DirectoryTreeModel) -> list[str]:
    """Render visible rows, including inline loading and error rows."""
    rows: list[str] = []
    if tree.roots_error is not None:
        return [f"  ! {tree.roots_error.message}"]
    for node in tree.iter_visible():
        rows.append(format_tree_node(node, selected=node is tree.selected))
        if not node.expanded:
            continue
        # Status rows sit one level below the node, where its children would be.
        status_indent = "  " + "  " * (node.depth + 1)
        if node.loading:
            rows.append(f"{status_indent}{LOADING_LABEL}")
        elif node.error is not None:
            rows.append(f"{status_indent}! {node.error.message} (retry)")
    return rows


__all__ = [
    "LOADING_LABEL",
    "format_tree_node",
    "format_tree_rows",
]
