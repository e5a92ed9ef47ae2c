"""Git status snapshots and the directory tree caches built on them.

This package contains the non-UI core:
- immutable status snapshots narrowed per directory
- status-annotated file/directory rows with visibility filtering
- a lazily populated working-tree cache with change detection
- an index-only tree of staged changes
"""

from __future__ import annotations

from .types import FsObject
from .fs import ListedEntry, current_listing_digest, is_real_dir, list_directory_entries
from .snapshot import Snapshot, SnapshotChild
from .dir_node import DirNode
from .db import GitFsDb
from .index_db import GitIndexDb, IndexDirNode

__all__ = [
    "FsObject",
    "ListedEntry",
    "is_real_dir",
    "list_directory_entries",
    "current_listing_digest",
    "Snapshot",
    "SnapshotChild",
    "DirNode",
    "GitFsDb",
    "GitIndexDb",
    "IndexDirNode",
]
