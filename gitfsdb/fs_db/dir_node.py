"""Lazily populated directory node of the status tree cache."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

from ..paths import CUR_DIR
from ..watch import build_listing_digest
from .fs import current_listing_digest, list_directory_entries
from .snapshot import Snapshot
from .types import FsObject


class DirNode:
    """Cached listing of one directory merged with its narrowed snapshot.

    Populating lists the directory, merges in paths only git knows about
    (deleted files still get a row), and creates an unpopulated child node
    for every subdirectory. Visibility flags only re-filter what is already
    cached; they never trigger a new listing.
    """

    def __init__(
        self,
        path: str,
        snapshot: Snapshot,
        show_hidden: bool = False,
        hide_clean: bool = False,
    ) -> None:
        self.path = path
        self.snapshot = snapshot
        self.show_hidden = show_hidden
        self.hide_clean = hide_clean
        self.dirs_unfiltered: list[FsObject] = []
        self.files_unfiltered: list[FsObject] = []
        self.dirs_filtered: list[FsObject] = []
        self.files_filtered: list[FsObject] = []
        self.content_hash: bytes | None = None
        self.children: dict[str, DirNode] = {}

    @classmethod
    def new_root(cls, snapshot: Snapshot, show_hidden: bool = False, hide_clean: bool = False) -> DirNode:
        return cls(CUR_DIR, snapshot, show_hidden, hide_clean)

    @property
    def root(self) -> Path:
        return self.snapshot.root

    @property
    def is_populated(self) -> bool:
        return self.content_hash is not None

    def current_hash_digest(self) -> bytes:
        return current_listing_digest(self.root, self.path)

    def is_current(self) -> bool:
        """True when neither this listing nor any populated descendant changed.

        An unpopulated node has nothing to compare yet and counts as current.
        """
        if self.content_hash is None:
            return True
        if self.content_hash != self.current_hash_digest():
            return False
        return all(child.is_current() for child in self.children.values())

    def _new_child(self, path: str, snapshot: Snapshot) -> DirNode:
        return DirNode(path, snapshot, self.show_hidden, self.hide_clean)

    def populate(self) -> None:
        entries, _scan_error = list_directory_entries(self.root, self.path)
        dirs: dict[str, FsObject] = {}
        files: dict[str, FsObject] = {}
        children: dict[str, DirNode] = {}
        for entry in entries:
            if entry.is_dir:
                child = self._new_child(entry.path, self.snapshot.narrowed_for_dir_path(entry.path))
                children[entry.name] = child
                dirs[entry.name] = FsObject(
                    entry.name,
                    entry.path,
                    True,
                    child.snapshot.status,
                    child.snapshot.clean_status,
                )
            else:
                files[entry.name] = FsObject(entry.name, entry.path, False)

        for name, path, is_dir, status, related_file_data in self.snapshot.iter():
            # A name listed as a file on disk stays one row.
            if is_dir and name not in files:
                child = children.get(name)
                if child is None:
                    child = self._new_child(path, self.snapshot.narrowed_for_dir_path(path))
                    children[name] = child
                dir_data = dirs.get(name) or FsObject(name, path, True)
                dirs[name] = dir_data.with_status(child.snapshot.status, child.snapshot.clean_status)
            else:
                file_data = files.get(name) or FsObject(name, path, False)
                files[name] = file_data.with_status(status, related_file_data=related_file_data)

        self.children = children
        self.dirs_unfiltered = sorted(dirs.values(), key=lambda item: item.name)
        self.files_unfiltered = sorted(files.values(), key=lambda item: item.name)
        self.content_hash = build_listing_digest(entry.path for entry in entries)
        self.filter_data()

    def filter_data(self) -> None:
        self.dirs_filtered = [
            item for item in self.dirs_unfiltered if item.is_visible(self.show_hidden, self.hide_clean)
        ]
        self.files_filtered = [
            item for item in self.files_unfiltered if item.is_visible(self.show_hidden, self.hide_clean)
        ]

    def set_visibility(self, show_hidden: bool, hide_clean: bool) -> None:
        self.show_hidden = show_hidden
        self.hide_clean = hide_clean
        for child in self.children.values():
            child.set_visibility(show_hidden, hide_clean)

    def re_filter_data(self) -> None:
        """Re-apply the visibility filter over the populated part of the subtree."""
        if self.content_hash is None:
            return
        self.filter_data()
        for child in self.children.values():
            child.re_filter_data()

    def find_dir(self, components: Sequence[str]) -> DirNode | None:
        """Walk down by name, populating each node on first visit."""
        if self.content_hash is None:
            self.populate()
        if not components:
            return self
        child = self.children.get(components[0])
        if child is None:
            return None
        return child.find_dir(components[1:])

    def dirs_and_files(self) -> tuple[list[FsObject], list[FsObject]]:
        return list(self.dirs_filtered), list(self.files_filtered)


__all__ = ["DirNode"]
