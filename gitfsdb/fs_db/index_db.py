"""Index-only status tree (staged changes), built from git output alone.

Unlike ``GitFsDb`` this tree never lists directories: every row comes from
``git status --porcelain --untracked-files=no`` and directory statuses are
accumulated while files are added.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from pathlib import Path

from ..git import DEFAULT_TIMEOUT_SECONDS, get_index_snapshot_text, get_show_prefix
from ..paths import CUR_DIR, join_path, normalize_rel_path, path_components
from ..porcelain import RelatedFileData, parse_porcelain_text
from ..status_codes import (
    ORDERED_DIR_CLEAN_STATUS_LIST,
    ORDERED_DIR_STATUS_LIST,
    StatusCode,
    first_status_in_set,
)
from .db import current_root
from .fs import is_real_dir
from .types import FsObject

logger = logging.getLogger(__name__)


class IndexDirNode:
    def __init__(self, path: str, status: StatusCode, root: Path, hide_clean: bool = False) -> None:
        self.path = path
        self.root = root
        self.hide_clean = hide_clean
        self.dirs_unfiltered: list[FsObject] = []
        self.files_unfiltered: list[FsObject] = []
        self.dirs_filtered: list[FsObject] = []
        self.files_filtered: list[FsObject] = []
        self.children: dict[str, IndexDirNode] = {}
        self.status_set: set[StatusCode] = {status}

    def add_file(
        self,
        components: Sequence[str],
        status: StatusCode,
        related_file_data: RelatedFileData | None,
    ) -> None:
        self.status_set.add(status)
        name = components[0]
        path = join_path(self.path, name)
        # A single component can still be a directory: a submodule.
        if len(components) > 1 or is_real_dir(self.root / path):
            child = self.children.get(name)
            if child is None:
                child = IndexDirNode(path, status, self.root, self.hide_clean)
                self.children[name] = child
            if len(components) > 1:
                child.add_file(components[1:], status, related_file_data)
        else:
            self.files_unfiltered.append(FsObject(name, path, False, status, related_file_data=related_file_data))

    def finalize(self) -> None:
        self.files_unfiltered.sort(key=lambda item: item.name)
        for name, child in self.children.items():
            child.finalize()
            self.dirs_unfiltered.append(
                FsObject(
                    name,
                    child.path,
                    True,
                    first_status_in_set(ORDERED_DIR_STATUS_LIST, child.status_set),
                    first_status_in_set(ORDERED_DIR_CLEAN_STATUS_LIST, child.status_set),
                )
            )
        self.dirs_unfiltered.sort(key=lambda item: item.name)
        self.filter_data()

    def filter_data(self) -> None:
        # Index entries are never hidden, only filtered as clean.
        self.dirs_filtered = [item for item in self.dirs_unfiltered if item.is_visible(True, self.hide_clean)]
        self.files_filtered = [item for item in self.files_unfiltered if item.is_visible(True, self.hide_clean)]

    def set_visibility(self, hide_clean: bool) -> None:
        self.hide_clean = hide_clean
        for child in self.children.values():
            child.set_visibility(hide_clean)

    def re_filter_data(self) -> None:
        self.filter_data()
        for child in self.children.values():
            child.re_filter_data()

    def find_dir(self, components: Sequence[str]) -> IndexDirNode | None:
        if not components:
            return self
        child = self.children.get(components[0])
        if child is None:
            return None
        return child.find_dir(components[1:])


class GitIndexDb:
    """Tree of paths with staged changes."""

    honours_hide_clean = True
    honours_show_hidden = False

    def __init__(
        self,
        root: Path | None = None,
        *,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
    ) -> None:
        self._fixed_root = root.resolve() if root is not None else None
        self.timeout_seconds = timeout_seconds
        self._curr_dir = current_root(self._fixed_root)
        self._prefix = ""
        self._populated_digest = b""
        self._base_dir = IndexDirNode(CUR_DIR, StatusCode.NO_STATUS, self._curr_dir)
        self.reset()

    @property
    def root(self) -> Path:
        return self._curr_dir

    def populate(self, text: str, digest: bytes) -> None:
        hide_clean = self._base_dir.hide_clean
        base_dir = IndexDirNode(CUR_DIR, StatusCode.NO_STATUS, self._curr_dir, hide_clean)
        file_status_data = parse_porcelain_text(text, prefix=self._prefix, reverse_relations=False)
        for key in sorted(file_status_data):
            entry = file_status_data[key]
            if not entry.status.in_index:
                continue
            components = path_components(key)[1:]
            if not components:
                continue
            base_dir.add_file(components, entry.status, entry.related_file_data)
        base_dir.finalize()
        self._base_dir = base_dir
        self._populated_digest = digest

    def reset(self) -> None:
        curr_dir = current_root(self._fixed_root)
        self._curr_dir = curr_dir
        self._prefix = get_show_prefix(curr_dir, self.timeout_seconds)
        snapshot_text = get_index_snapshot_text(curr_dir, self.timeout_seconds)
        self.populate(snapshot_text.text, snapshot_text.digest)
        logger.debug(f"Index tree reset for {curr_dir}")

    def update_if_necessary(self) -> bool:
        if self._curr_dir != current_root(self._fixed_root):
            self.reset()
            return True
        snapshot_text = get_index_snapshot_text(self._curr_dir, self.timeout_seconds)
        if snapshot_text.digest != self._populated_digest:
            logger.debug("Index status changed; rebuilding index tree")
            self.populate(snapshot_text.text, snapshot_text.digest)
            return True
        return False

    def dir_contents(
        self,
        dir_path: str = ".",
        show_hidden: bool = False,
        hide_clean: bool = False,
    ) -> tuple[list[FsObject], list[FsObject]]:
        """Return ``(dirs, files)`` for ``dir_path``; ``show_hidden`` has no effect."""
        rel_path = normalize_rel_path(dir_path)
        if self._base_dir.hide_clean != hide_clean:
            self._base_dir.set_visibility(hide_clean)
            self._base_dir.re_filter_data()
        node = self._base_dir.find_dir(path_components(rel_path)[1:])
        if node is None:
            return [], []
        return list(node.dirs_filtered), list(node.files_filtered)


__all__ = ["GitIndexDb", "IndexDirNode"]
