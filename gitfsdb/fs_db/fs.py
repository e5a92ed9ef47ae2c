"""Directory listing for tree-cache nodes."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from ..paths import join_path
from ..watch import build_listing_digest

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ListedEntry:
    """One directory entry as seen on disk."""

    name: str
    path: str
    is_dir: bool


def is_real_dir(path: Path) -> bool:
    """Directory check matching the listing: symlinks never count as directories."""
    return not path.is_symlink() and path.is_dir()


def list_directory_entries(
    root: Path,
    dir_path: str,
    *,
    quiet: bool = False,
) -> tuple[list[ListedEntry], OSError | None]:
    """List ``dir_path`` (relative to ``root``) sorted by name.

    Returns ``(entries, scan_error)``. A directory that cannot be read yields
    no entries; the error is logged (unless ``quiet``) and returned so callers
    can degrade without losing the rest of the tree.
    """
    directory = root / os.path.normpath(dir_path)
    entries: list[ListedEntry] = []
    try:
        with os.scandir(directory) as scanned:
            for child in scanned:
                try:
                    is_dir = child.is_dir(follow_symlinks=False)
                except OSError:
                    is_dir = False
                entries.append(ListedEntry(child.name, join_path(dir_path, child.name), is_dir))
    except FileNotFoundError as exc:
        # Directories that only exist in git's view (deleted on disk) land here.
        logger.debug(f"Directory vanished or never existed: {directory}")
        return [], exc
    except OSError as exc:
        if not quiet:
            logger.warning(f"Skipping unreadable directory {directory}: {exc}")
        return [], exc

    entries.sort(key=lambda item: item.name)
    return entries, None


def current_listing_digest(root: Path, dir_path: str) -> bytes:
    """Digest of the entry paths currently listed for ``dir_path``."""
    entries, _scan_error = list_directory_entries(root, dir_path, quiet=True)
    return build_listing_digest(entry.path for entry in entries)


__all__ = [
    "ListedEntry",
    "is_real_dir",
    "list_directory_entries",
    "current_listing_digest",
]
