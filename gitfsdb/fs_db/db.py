"""Working-tree status database: the polling entry point for tree views.

A consumer calls ``dir_contents`` to fill a tree view and
``update_if_necessary`` on a timer. Any change (working directory, git
status output, or a directory listing) rebuilds the tree wholesale; toggling
visibility flags only re-filters rows that are already cached.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from pathlib import Path

from ..git import DEFAULT_TIMEOUT_SECONDS, get_show_prefix, get_snapshot_text
from ..gitignore import ignore_check_for_root
from ..paths import normalize_rel_path, path_components
from ..status_codes import StatusCode
from .dir_node import DirNode
from .snapshot import Snapshot
from .types import FsObject

logger = logging.getLogger(__name__)


def current_root(fixed_root: Path | None) -> Path:
    """Return ``fixed_root`` or, when following the process, the current directory."""
    if fixed_root is not None:
        return fixed_root
    return Path.cwd().resolve()


class GitFsDb:
    """Status-annotated directory tree for a git working directory.

    With ``root=None`` the database follows the process's current directory
    and resets itself when it changes; otherwise it is pinned to ``root``.
    """

    honours_hide_clean = True
    honours_show_hidden = True

    def __init__(
        self,
        root: Path | None = None,
        *,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        is_ignored: Callable[[str], bool] | None = None,
    ) -> None:
        self._fixed_root = root.resolve() if root is not None else None
        self.timeout_seconds = timeout_seconds
        self._is_ignored = is_ignored
        self._curr_dir = current_root(self._fixed_root)
        self._prefix = ""
        self._snapshot_digest = b""
        self._base_dir = DirNode.new_root(Snapshot.empty(self._curr_dir))
        self.reset()

    @property
    def root(self) -> Path:
        return self._curr_dir

    @property
    def snapshot(self) -> Snapshot:
        return self._base_dir.snapshot

    @property
    def status(self) -> StatusCode:
        """Rolled-up status of the whole working directory."""
        return self._base_dir.snapshot.status

    @property
    def clean_status(self) -> StatusCode:
        return self._base_dir.snapshot.clean_status

    def _ignore_check(self, root: Path) -> Callable[[str], bool]:
        return self._is_ignored if self._is_ignored is not None else ignore_check_for_root(root)

    def _build_snapshot(self, text: str) -> Snapshot:
        return Snapshot.from_text(
            text,
            self._curr_dir,
            self._ignore_check(self._curr_dir),
            prefix=self._prefix,
        )

    def _rebuild(self, snapshot: Snapshot) -> None:
        self._base_dir = DirNode.new_root(
            snapshot,
            self._base_dir.show_hidden,
            self._base_dir.hide_clean,
        )

    def _curr_dir_changed(self) -> bool:
        return self._curr_dir != current_root(self._fixed_root)

    def _check_visibility(self, show_hidden: bool, hide_clean: bool) -> None:
        base_dir = self._base_dir
        if base_dir.show_hidden != show_hidden or base_dir.hide_clean != hide_clean:
            base_dir.set_visibility(show_hidden, hide_clean)
            base_dir.re_filter_data()

    def reset(self) -> None:
        """Re-read the current directory and git status and rebuild from scratch."""
        curr_dir = current_root(self._fixed_root)
        prefix = get_show_prefix(curr_dir, self.timeout_seconds)
        snapshot_text = get_snapshot_text(curr_dir, self.timeout_seconds)
        self._curr_dir = curr_dir
        self._prefix = prefix
        self._snapshot_digest = snapshot_text.digest
        self._rebuild(self._build_snapshot(snapshot_text.text))
        logger.debug(f"Status tree reset for {curr_dir}")

    def update_if_necessary(self) -> bool:
        """Poll for changes and rebuild when needed; return whether anything changed."""
        if self._curr_dir_changed():
            logger.debug("Current directory changed; resetting status tree")
            self.reset()
            return True
        snapshot_text = get_snapshot_text(self._curr_dir, self.timeout_seconds)
        if snapshot_text.digest != self._snapshot_digest:
            logger.debug("git status output changed; rebuilding status tree")
            self._snapshot_digest = snapshot_text.digest
            self._rebuild(self._build_snapshot(snapshot_text.text))
            return True
        if not self._base_dir.is_current():
            logger.debug("Directory listing changed; rebuilding status tree")
            self._rebuild(self._base_dir.snapshot)
            return True
        return False

    def is_current(self) -> bool:
        return self._base_dir.is_current()

    def dir_contents(
        self,
        dir_path: str = ".",
        show_hidden: bool = False,
        hide_clean: bool = False,
    ) -> tuple[list[FsObject], list[FsObject]]:
        """Return the visible ``(dirs, files)`` of a directory relative to the root.

        Unknown directories yield two empty lists.
        """
        rel_path = normalize_rel_path(dir_path)
        self._check_visibility(show_hidden, hide_clean)
        node = self._base_dir.find_dir(path_components(rel_path)[1:])
        if node is None:
            return [], []
        return node.dirs_and_files()


__all__ = ["GitFsDb", "current_root"]
