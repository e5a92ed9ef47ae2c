"""Parser for ``git status --porcelain`` (v1) output.

Each line is ``XY PATH`` or ``XY ORIG -> PATH`` where paths containing
special characters are double-quoted and C-escaped. Keys produced here are
``./``-prefixed so they line up with paths built from directory listings.
"""

from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass
from enum import Enum

from .errors import PorcelainParseError
from .paths import CUR_DIR, join_path
from .status_codes import StatusCode

logger = logging.getLogger(__name__)

_QUOTED = r'"(?:[^"\\]|\\.)*"'
_QUOTED_RE = re.compile(_QUOTED)
_RENAME_RE = re.compile(rf"(?P<src>{_QUOTED}|.+?) -> (?P<dst>{_QUOTED}|.+)")
_OCTAL_RE = re.compile(r"[0-7]{3}")
_C_ESCAPES = {
    "a": 0x07,
    "b": 0x08,
    "t": 0x09,
    "n": 0x0A,
    "v": 0x0B,
    "f": 0x0C,
    "r": 0x0D,
    '"': 0x22,
    "\\": 0x5C,
}


class Relation(str, Enum):
    """Direction of a rename/copy relationship as seen from the entry holding it."""

    RENAMED_TO = "->"
    RENAMED_FROM = "<-"


@dataclass(frozen=True)
class RelatedFileData:
    """The other end of a rename or copy."""

    file_path: str
    relation: Relation


@dataclass(frozen=True)
class PorcelainRecord:
    """One parsed porcelain line."""

    path: str
    status: StatusCode
    related: RelatedFileData | None = None


@dataclass(frozen=True)
class StatusEntry:
    """Value stored per path in a snapshot's status map."""

    status: StatusCode
    related_file_data: RelatedFileData | None = None


def unquote_c_style(body: str) -> str:
    """Undo git's C-style quoting for the text between the double quotes."""
    out = bytearray()
    index = 0
    while index < len(body):
        ch = body[index]
        if ch != "\\":
            out.extend(ch.encode("utf-8"))
            index += 1
            continue
        escaped = body[index + 1 : index + 2]
        if escaped in _C_ESCAPES:
            out.append(_C_ESCAPES[escaped])
            index += 2
            continue
        octal = body[index + 1 : index + 4]
        if _OCTAL_RE.fullmatch(octal):
            out.append(int(octal, 8) & 0xFF)
            index += 4
            continue
        raise ValueError(f"invalid escape sequence at offset {index}")
    return out.decode("utf-8", errors="replace")


def _path_token(token: str, line: str) -> str:
    if token.startswith('"'):
        if _QUOTED_RE.fullmatch(token) is None:
            raise PorcelainParseError(line, "unterminated quoted path")
        try:
            token = unquote_c_style(token[1:-1])
        except ValueError as exc:
            raise PorcelainParseError(line, str(exc)) from exc
    # git reports ignored/untracked directories with a trailing slash.
    token = token.rstrip("/")
    if not token:
        raise PorcelainParseError(line, "empty path")
    return token


def split_porcelain_line(line: str) -> tuple[StatusCode, str, str | None]:
    """Split ``line`` into ``(status, git_path, other_git_path)``.

    Paths are returned exactly as git reports them (repository-relative,
    ``/`` separated, unquoted). ``other_git_path`` is only set for
    rename/copy lines.

    A typechange (``T``) is reported as the matching modification code.
    """
    line = line.rstrip("\r\n")
    if len(line) < 4 or line[2] != " ":
        raise PorcelainParseError(line)
    status = StatusCode.from_code(line[:2])
    if status is None and "T" in line[:2]:
        status = StatusCode.from_code(line[:2].replace("T", "M"))
        if status is not None:
            logger.warning(f"Treating typechange {line[:2]!r} as {status.value!r}: {line[3:]}")
    if status is None or status is StatusCode.NO_STATUS:
        raise PorcelainParseError(line, f"unknown status code {line[:2]!r}")
    remainder = line[3:]
    if status.is_rename_or_copy:
        match = _RENAME_RE.fullmatch(remainder)
        if match is None:
            raise PorcelainParseError(line, "rename without ' -> ' target")
        return status, _path_token(match.group("src"), line), _path_token(match.group("dst"), line)
    return status, _path_token(remainder, line), None


def _key_for(git_path: str, prefix: str) -> str | None:
    """Map a repository-relative git path to a ``./`` key below ``prefix``."""
    if prefix:
        bare_prefix = prefix.rstrip("/")
        if git_path == bare_prefix:
            return CUR_DIR
        if not git_path.startswith(bare_prefix + "/"):
            return None
        git_path = git_path[len(bare_prefix) + 1 :]
    return join_path(CUR_DIR, git_path.replace("/", os.sep))


def _related_path(git_path: str, prefix: str) -> str:
    bare_prefix = prefix.rstrip("/")
    if bare_prefix and git_path.startswith(bare_prefix + "/"):
        return git_path[len(bare_prefix) + 1 :]
    return git_path


def parse_porcelain_line(line: str) -> PorcelainRecord:
    """Parse one porcelain line into a ``./``-keyed record.

    For renames and copies the record is keyed on the source path and points
    at the destination with ``Relation.RENAMED_TO``.
    """
    status, git_path, other = split_porcelain_line(line)
    related = RelatedFileData(other, Relation.RENAMED_TO) if other is not None else None
    key = _key_for(git_path, "")
    assert key is not None
    return PorcelainRecord(path=key, status=status, related=related)


def parse_porcelain_text(
    text: str,
    *,
    strict: bool = False,
    prefix: str = "",
    reverse_relations: bool = True,
) -> dict[str, StatusEntry]:
    """Parse a whole porcelain output into a path -> ``StatusEntry`` map.

    ``prefix`` is the scanned directory's position inside the repository
    (``git rev-parse --show-prefix``); records outside it are dropped and the
    prefix is stripped from keys. With ``strict`` a malformed line raises
    ``PorcelainParseError``, otherwise it is logged and skipped.

    With ``reverse_relations`` each rename/copy destination also gets an
    entry pointing back at its source, unless git already reported that path
    with related data of its own.
    """
    file_status_data: dict[str, StatusEntry] = {}
    reverse: list[tuple[str, StatusCode, str]] = []
    for line in text.splitlines():
        if not line.strip():
            continue
        try:
            status, git_path, other = split_porcelain_line(line)
        except PorcelainParseError as exc:
            if strict:
                raise
            logger.warning(f"Skipping git status line: {exc}")
            continue
        key = _key_for(git_path, prefix)
        if key is None:
            continue
        related = None
        if other is not None:
            related = RelatedFileData(_related_path(other, prefix), Relation.RENAMED_TO)
            other_key = _key_for(other, prefix)
            if other_key is not None:
                reverse.append((other_key, status, _related_path(git_path, prefix)))
        file_status_data[key] = StatusEntry(status, related)

    if reverse_relations:
        for other_key, status, source_path in reverse:
            existing = file_status_data.get(other_key)
            if existing is not None:
                if existing.related_file_data is not None:
                    continue
                status = existing.status
            file_status_data[other_key] = StatusEntry(
                status,
                RelatedFileData(source_path, Relation.RENAMED_FROM),
            )
    return file_status_data


__all__ = [
    "Relation",
    "RelatedFileData",
    "PorcelainRecord",
    "StatusEntry",
    "unquote_c_style",
    "split_porcelain_line",
    "parse_porcelain_line",
    "parse_porcelain_text",
]
