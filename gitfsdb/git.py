"""Blocking git invocations with timeouts.

This is the only place the package spawns processes for status snapshots.
Failures are raised as ``GitProcessError``/``GitCommandError`` instead of
being reported as an empty (clean-looking) result.
"""

from __future__ import annotations

import subprocess
from dataclasses import dataclass
from pathlib import Path

from .errors import GitCommandError, GitProcessError
from .watch import build_text_digest

DEFAULT_TIMEOUT_SECONDS = 10.0

FULL_STATUS_ARGS = (
    "status",
    "--porcelain",
    "--ignored",
    "--untracked=all",
    "--ignore-submodules=none",
)
INDEX_STATUS_ARGS = (
    "status",
    "--porcelain",
    "--untracked-files=no",
    "--ignore-submodules=none",
)


@dataclass(frozen=True)
class SnapshotText:
    """Decoded git output plus a digest of the raw bytes."""

    text: str
    digest: bytes


def run_git(
    root: Path,
    args: list[str] | tuple[str, ...],
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
) -> bytes:
    """Run ``git -C root *args`` and return its raw stdout.

    Raises ``GitProcessError`` when git cannot be started or times out and
    ``GitCommandError`` when it exits non-zero.
    """
    cmd = ["git", "-C", str(root), *args]
    try:
        proc = subprocess.run(
            cmd,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            check=False,
            timeout=timeout_seconds,
        )
    except subprocess.TimeoutExpired as exc:
        raise GitProcessError(cmd, f"timed out after {timeout_seconds}s") from exc
    except OSError as exc:
        raise GitProcessError(cmd, str(exc)) from exc
    if proc.returncode != 0:
        raise GitCommandError(
            cmd,
            proc.returncode,
            proc.stderr.decode("utf-8", errors="replace"),
        )
    return proc.stdout


def _snapshot_text(root: Path, args: tuple[str, ...], timeout_seconds: float) -> SnapshotText:
    stdout = run_git(root, args, timeout_seconds)
    return SnapshotText(
        text=stdout.decode("utf-8", errors="replace"),
        digest=build_text_digest(stdout),
    )


def get_snapshot_text(root: Path, timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS) -> SnapshotText:
    """Full working-tree status including untracked and ignored paths."""
    return _snapshot_text(root, FULL_STATUS_ARGS, timeout_seconds)


def get_index_snapshot_text(root: Path, timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS) -> SnapshotText:
    """Status without untracked files, used by the index tree."""
    return _snapshot_text(root, INDEX_STATUS_ARGS, timeout_seconds)


def get_show_prefix(root: Path, timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS) -> str:
    """Return ``root``'s path inside its repository (``""`` at the top level).

    Porcelain paths are relative to the repository root, so this prefix is
    what has to be stripped to make them relative to ``root``.
    """
    stdout = run_git(root, ["rev-parse", "--show-prefix"], timeout_seconds)
    return stdout.decode("utf-8", errors="replace").strip()


__all__ = [
    "DEFAULT_TIMEOUT_SECONDS",
    "FULL_STATUS_ARGS",
    "INDEX_STATUS_ARGS",
    "SnapshotText",
    "run_git",
    "get_snapshot_text",
    "get_index_snapshot_text",
    "get_show_prefix",
]
