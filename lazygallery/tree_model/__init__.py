"""Lazy folder tree, path-based restore, and row formatting.

Defines ``FolderNode`` and the model that owns it, plus the engine that
re-expands a persisted path segment by segment on startup.
"""

from __future__ import annotations

from .types import FolderNode
from .model import DirectoryTreeModel, FolderSelectedListener, ListingErrorListener
from .restore import RestoreEngine, RestoreResult
from .rendering import format_tree_node, format_tree_rows

__all__ = [
    "FolderNode",
    "DirectoryTreeModel",
    "FolderSelectedListener",
    "ListingErrorListener",
    "RestoreEngine",
    "RestoreResult",
    "format_tree_node",
    "format_tree_rows",
]
