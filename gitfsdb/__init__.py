"""Public package surface for gitfsdb.

Exports ``GitFsDb``/``GitIndexDb`` for embedding status trees and ``main``
for programmatic CLI invocation.
"""

from __future__ import annotations

from .errors import GitCommandError, GitFsDbError, GitProcessError, PorcelainParseError, SnapshotError
from .fs_db import FsObject, GitFsDb, GitIndexDb
from .status_codes import StatusCode


def main(*args, **kwargs):
    """Lazily import CLI entrypoint to keep package imports lightweight."""
    from .cli import main as _main

    return _main(*args, **kwargs)

__all__ = [
    "main",
    "FsObject",
    "GitFsDb",
    "GitIndexDb",
    "StatusCode",
    "GitFsDbError",
    "PorcelainParseError",
    "SnapshotError",
    "GitProcessError",
    "GitCommandError",
]
