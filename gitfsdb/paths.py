"""Relative path strings shared by directory listings and git snapshots.

Both sides key on ``./``-prefixed, OS-separator joined strings so a listed
entry and a porcelain record for the same file compare equal.
"""

from __future__ import annotations

import os

CUR_DIR = os.curdir


def join_path(dir_path: str, name: str) -> str:
    return dir_path + os.sep + name


def path_components(path: str) -> list[str]:
    """Split a relative path into components, keeping the leading ``.``."""
    return [part for part in path.split(os.sep) if part]


def path_starts_with(path: str, dir_path: str) -> bool:
    """Return whether ``path`` is ``dir_path`` itself or lies beneath it."""
    if path == dir_path:
        return True
    return path.startswith(dir_path.rstrip(os.sep) + os.sep)


def to_string_path(components: list[str]) -> str:
    return os.sep.join(components)


def normalize_rel_path(path: str) -> str:
    """Return ``path`` as a ``./``-prefixed path beneath the scanned root.

    Raises ``ValueError`` for absolute paths and paths that climb out of the
    root with ``..``.
    """
    if not path:
        return CUR_DIR
    if os.path.isabs(path):
        raise ValueError(f"expected a path relative to the scanned root: {path!r}")
    normalized = os.path.normpath(path)
    if normalized == os.pardir or normalized.startswith(os.pardir + os.sep):
        raise ValueError(f"path escapes the scanned root: {path!r}")
    if normalized == CUR_DIR:
        return CUR_DIR
    return join_path(CUR_DIR, normalized)


__all__ = [
    "CUR_DIR",
    "join_path",
    "path_components",
    "path_starts_with",
    "to_string_path",
    "normalize_rel_path",
]
