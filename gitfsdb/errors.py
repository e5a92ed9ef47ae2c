"""Exception hierarchy for snapshot capture and porcelain parsing.

Every error raised by the package derives from ``GitFsDbError`` so callers
can decide in one place whether to retry or show a degraded (empty) tree.
"""

from __future__ import annotations

from collections.abc import Sequence


class GitFsDbError(Exception):
    """Base class for all gitfsdb failures."""


class PorcelainParseError(GitFsDbError):
    """A ``git status --porcelain`` line did not match the expected grammar."""

    def __init__(self, line: str, reason: str = "malformed porcelain line") -> None:
        super().__init__(f"{reason}: {line!r}")
        self.line = line
        self.reason = reason


class SnapshotError(GitFsDbError):
    """A git snapshot could not be obtained."""


class GitProcessError(SnapshotError):
    """git could not be launched, or did not finish within its timeout."""

    def __init__(self, args: Sequence[str], reason: str) -> None:
        super().__init__(f"{' '.join(args)}: {reason}")
        self.args_used = tuple(args)
        self.reason = reason


class GitCommandError(SnapshotError):
    """git ran but exited with a non-zero status (e.g. not a repository)."""

    def __init__(self, args: Sequence[str], returncode: int, stderr: str = "") -> None:
        detail = stderr.strip().splitlines()[0] if stderr.strip() else "no error output"
        super().__init__(f"{' '.join(args)} exited with status {returncode}: {detail}")
        self.args_used = tuple(args)
        self.returncode = returncode
        self.stderr = stderr


__all__ = [
    "GitFsDbError",
    "PorcelainParseError",
    "SnapshotError",
    "GitProcessError",
    "GitCommandError",
]
