"""Folder-tree node datatypes."""

from __future__ import annotations

from dataclasses import dataclass, field

from ..errors import ListingError


@dataclass(eq=False)
class FolderNode:
    """One directory in the lazily materialized folder tree.

    Nodes compare and hash by identity; only ``DirectoryTreeModel`` mutates
    them. ``children`` stays empty until ``loaded`` is set, and ``error`` holds
    the last listing failure until a retry succeeds.
    """

    path: str
    name: str
    is_directory: bool = True
    depth: int = 0
    loaded: bool = False
    expanded: bool = False
    loading: bool = False
    error: ListingError | None = None
    children: list[FolderNode] = field(default_factory=list)

    @property
    def label(self) -> str:
        return self.name or self.path


__all__ = ["FolderNode"]
