"""Directory-listing collaborator: listing datatypes and the filesystem lister.

This package contains non-UI listing primitives:
- entry/result datatypes shared with any lister implementation
- ``os.scandir`` listings with friendly error messages
- volume/home roots for the top level of the tree
"""

from __future__ import annotations

from .types import DirEntry, ListingResult
from .fs import FilesystemLister, friendly_error, get_folder_roots, list_directory

__all__ = [
    "DirEntry",
    "ListingResult",
    "FilesystemLister",
    "friendly_error",
    "get_folder_roots",
    "list_directory",
]
