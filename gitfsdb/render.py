"""Plain-text rendering of status trees.

Each row carries the two-character status column, the name, and for
renames/copies the relation and related path. Status decorations map to ANSI
foreground colours, italic for renamed/copied/untracked/ignored rows.
"""

from __future__ import annotations

from dataclasses import dataclass

from .fs_db import FsObject, GitFsDb, GitIndexDb
from .status_codes import StatusCode

RESET = "\033[0m"
ITALIC = "\033[3m"

_ANSI_FOREGROUND = {
    "default": "\033[39m",
    "blue": "\033[34m",
    "red": "\033[31m",
    "darkgreen": "\033[32m",
    "green": "\033[92m",
    "pink": "\033[38;5;218m",
    "magenta": "\033[35m",
    "cyan": "\033[36m",
    "grey": "\033[90m",
}


@dataclass(frozen=True)
class Decoration:
    color: str
    italic: bool = False


_DEFAULT_DECORATION = Decoration("default")

_S = StatusCode
DECORATIONS: dict[StatusCode, Decoration] = {
    _S.NO_STATUS: _DEFAULT_DECORATION,
    _S.UNMODIFIED: _DEFAULT_DECORATION,
    _S.WD_ONLY_MODIFIED: Decoration("blue"),
    _S.WD_ONLY_DELETED: Decoration("red"),
    _S.MODIFIED: Decoration("blue"),
    _S.MODIFIED_MODIFIED: Decoration("blue"),
    _S.MODIFIED_DELETED: Decoration("red"),
    _S.ADDED: Decoration("darkgreen"),
    _S.ADDED_MODIFIED: Decoration("blue"),
    _S.ADDED_DELETED: Decoration("red"),
    _S.DELETED: Decoration("red"),
    _S.DELETED_MODIFIED: Decoration("blue"),
    _S.RENAMED: Decoration("pink", italic=True),
    _S.RENAMED_MODIFIED: Decoration("blue", italic=True),
    _S.RENAMED_DELETED: Decoration("red", italic=True),
    _S.COPIED: Decoration("green", italic=True),
    _S.COPIED_MODIFIED: Decoration("blue", italic=True),
    _S.COPIED_DELETED: Decoration("red", italic=True),
    _S.UNMERGED: Decoration("magenta"),
    _S.UNMERGED_ADDED: Decoration("magenta"),
    _S.UNMERGED_ADDED_US: Decoration("magenta"),
    _S.UNMERGED_ADDED_THEM: Decoration("magenta"),
    _S.UNMERGED_DELETED: Decoration("magenta"),
    _S.UNMERGED_DELETED_US: Decoration("magenta"),
    _S.UNMERGED_DELETED_THEM: Decoration("magenta"),
    _S.NOT_TRACKED: Decoration("cyan", italic=True),
    _S.IGNORED: Decoration("grey", italic=True),
}


def status_decoration(status: StatusCode) -> Decoration:
    return DECORATIONS.get(status, _DEFAULT_DECORATION)


def _style_prefix(status: StatusCode) -> str:
    decoration = status_decoration(status)
    prefix = _ANSI_FOREGROUND.get(decoration.color, _ANSI_FOREGROUND["default"])
    if decoration.italic:
        prefix = ITALIC + prefix
    return prefix


def format_fs_object(item: FsObject, depth: int = 0, colorize: bool = True) -> str:
    """Render one row: indent, status column, name, and rename relation."""
    indent = "  " * depth
    status_column = item.status.value.ljust(2)
    name = item.name + ("/" if item.is_dir else "")
    related = ""
    if item.related_file_data is not None:
        related = f" {item.related_file_data.relation.value} {item.related_file_data.file_path}"
    if not colorize:
        return f"{indent}{status_column} {name}{related}"
    return f"{indent}{_style_prefix(item.status)}{status_column} {name}{related}{RESET}"


def render_tree(
    db: GitFsDb | GitIndexDb,
    dir_path: str = ".",
    show_hidden: bool = False,
    hide_clean: bool = False,
    colorize: bool = True,
    max_depth: int | None = None,
) -> list[str]:
    """Render ``dir_path`` and its visible descendants, directories first."""
    lines: list[str] = []

    def walk(path: str, depth: int) -> None:
        dirs, files = db.dir_contents(path, show_hidden, hide_clean)
        for item in dirs:
            lines.append(format_fs_object(item, depth, colorize))
            if max_depth is None or depth + 1 < max_depth:
                walk(item.path, depth + 1)
        for item in files:
            lines.append(format_fs_object(item, depth, colorize))

    walk(dir_path, 0)
    return lines


__all__ = [
    "Decoration",
    "DECORATIONS",
    "status_decoration",
    "format_fs_object",
    "render_tree",
]
