"""Git diff retrieval and terminal colouring.

Diff text comes from ``git diff`` through the same timeout-guarded runner as
status snapshots; colouring goes through Pygments' diff lexer.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from enum import Enum
from pathlib import Path

from pygments import highlight
from pygments.formatters import TerminalFormatter
from pygments.lexers import DiffLexer
from pygments.styles import get_style_by_name
from pygments.util import ClassNotFound

from .git import DEFAULT_TIMEOUT_SECONDS, run_git

logger = logging.getLogger(__name__)

DEFAULT_STYLE = "monokai"


class DiffMode(Enum):
    WORKING = ()
    STAGED = ("--staged",)
    HEAD = ("HEAD",)

    @property
    def args(self) -> tuple[str, ...]:
        return self.value


def get_diff_text(
    root: Path,
    paths: Sequence[str] = (),
    mode: DiffMode = DiffMode.WORKING,
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
) -> str:
    """Return the unified diff for ``paths`` (everything when empty).

    Errors from git propagate as ``GitProcessError``/``GitCommandError``.
    """
    stdout = run_git(root, ["diff", *mode.args, "--no-color", "--", *paths], timeout_seconds)
    return stdout.decode("utf-8", errors="replace")


def _resolve_style(style: str) -> str | None:
    try:
        get_style_by_name(style)
    except ClassNotFound:
        logger.warning(f"Unknown Pygments style {style!r}; printing diff uncoloured")
        return None
    return style


def colorize_diff(text: str, style: str = DEFAULT_STYLE) -> str:
    """Colour ``text`` with ANSI escapes; unknown styles return it unchanged."""
    if not text:
        return text
    resolved = _resolve_style(style)
    if resolved is None:
        return text
    return highlight(text, DiffLexer(), TerminalFormatter(style=resolved))


__all__ = ["DEFAULT_STYLE", "DiffMode", "get_diff_text", "colorize_diff"]
