"""Gitignore classification for directories with no status of their own.

git reports ignored paths it finds while scanning, but a directory narrowed
out of a snapshot may have no entries at all. The roll-up then asks an
``is_ignored`` callback; the one built here answers from the output of
``git ls-files --others -i --exclude-standard --directory``, cached per root
with bounded staleness.
"""

from __future__ import annotations

import logging
import time
from collections import OrderedDict
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from .errors import SnapshotError
from .git import DEFAULT_TIMEOUT_SECONDS, run_git
from .paths import CUR_DIR, join_path, path_components, to_string_path

logger = logging.getLogger(__name__)

IGNORED_PATHS_CACHE_MAX = 64
IGNORED_PATHS_CACHE_TTL_SECONDS = 2.0

IGNORED_LIST_ARGS = ("ls-files", "-z", "--others", "-i", "--exclude-standard", "--directory")


@dataclass(frozen=True)
class IgnoredPaths:
    """``./``-keyed ignored files and directories below one scan root."""

    files: frozenset[str]
    dirs: frozenset[str]

    def contains(self, rel_path: str) -> bool:
        """Whether ``rel_path`` is ignored itself or lies in an ignored directory."""
        if rel_path in self.files or rel_path in self.dirs:
            return True
        components = path_components(rel_path)
        for end in range(len(components) - 1, 1, -1):
            if to_string_path(components[:end]) in self.dirs:
                return True
        return False


@dataclass(frozen=True)
class _CacheEntry:
    ignored: IgnoredPaths | None
    root_mtime_ns: int | None
    loaded_at: float


_IGNORED_PATHS_CACHE: OrderedDict[str, _CacheEntry] = OrderedDict()


def clear_gitignore_cache() -> None:
    _IGNORED_PATHS_CACHE.clear()


def parse_ignored_listing(raw: bytes) -> IgnoredPaths:
    """Parse NUL-separated ``ls-files`` output; directories end with ``/``."""
    files: set[str] = set()
    dirs: set[str] = set()
    for item in raw.split(b"\0"):
        if not item:
            continue
        text = item.decode("utf-8", errors="replace")
        is_dir = text.endswith("/")
        text = text.rstrip("/")
        if not text:
            continue
        key = join_path(CUR_DIR, to_string_path(text.split("/")))
        (dirs if is_dir else files).add(key)
    return IgnoredPaths(files=frozenset(files), dirs=frozenset(dirs))


def _load_ignored_paths(root: Path, timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS) -> IgnoredPaths | None:
    """Ask git for the ignored paths below ``root``; ``None`` outside a repository."""
    try:
        raw = run_git(root, IGNORED_LIST_ARGS, timeout_seconds)
    except SnapshotError as exc:
        logger.debug(f"No ignore information for {root}: {exc}")
        return None
    return parse_ignored_listing(raw)


def get_ignored_paths(root: Path) -> IgnoredPaths | None:
    """Return the cached ignore listing for ``root``.

    An entry is reused while the root directory's mtime is unchanged and it
    is younger than ``IGNORED_PATHS_CACHE_TTL_SECONDS``.
    """
    resolved_root = root.resolve()
    key = str(resolved_root)
    try:
        root_mtime_ns: int | None = resolved_root.stat().st_mtime_ns
    except OSError:
        root_mtime_ns = None
    now = time.monotonic()

    cached = _IGNORED_PATHS_CACHE.get(key)
    if (
        cached is not None
        and cached.root_mtime_ns == root_mtime_ns
        and now - cached.loaded_at <= IGNORED_PATHS_CACHE_TTL_SECONDS
    ):
        _IGNORED_PATHS_CACHE.move_to_end(key)
        return cached.ignored

    ignored = _load_ignored_paths(resolved_root)
    _IGNORED_PATHS_CACHE[key] = _CacheEntry(ignored, root_mtime_ns, now)
    _IGNORED_PATHS_CACHE.move_to_end(key)
    while len(_IGNORED_PATHS_CACHE) > IGNORED_PATHS_CACHE_MAX:
        _IGNORED_PATHS_CACHE.popitem(last=False)
    return ignored


def ignore_check_for_root(root: Path) -> Callable[[str], bool]:
    """Return an ``is_ignored(rel_path)`` callback for ``./`` paths below ``root``.

    The listing is looked up through the cache on every call, so a long-lived
    callback follows ``.gitignore`` edits within the cache TTL.
    """

    def is_ignored(rel_path: str) -> bool:
        ignored = get_ignored_paths(root)
        return ignored is not None and ignored.contains(rel_path)

    return is_ignored


__all__ = [
    "IgnoredPaths",
    "clear_gitignore_cache",
    "parse_ignored_listing",
    "get_ignored_paths",
    "ignore_check_for_root",
]
