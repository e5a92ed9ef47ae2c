"""Git porcelain status codes and directory roll-up precedence.

A directory needs a single decoration even though its descendants carry a
mix of statuses. The ordered tables here define which status "wins": the
one most likely to need the user's attention.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from enum import Enum


class StatusCode(str, Enum):
    """Two-character ``XY`` code from ``git status --porcelain``."""

    NO_STATUS = ""
    UNMODIFIED = "  "
    WD_ONLY_MODIFIED = " M"
    WD_ONLY_DELETED = " D"
    MODIFIED = "M "
    MODIFIED_MODIFIED = "MM"
    MODIFIED_DELETED = "MD"
    ADDED = "A "
    ADDED_MODIFIED = "AM"
    ADDED_DELETED = "AD"
    DELETED = "D "
    DELETED_MODIFIED = "DM"
    RENAMED = "R "
    RENAMED_MODIFIED = "RM"
    RENAMED_DELETED = "RD"
    COPIED = "C "
    COPIED_MODIFIED = "CM"
    COPIED_DELETED = "CD"
    UNMERGED = "UU"
    UNMERGED_ADDED = "AA"
    UNMERGED_ADDED_US = "AU"
    UNMERGED_ADDED_THEM = "UA"
    UNMERGED_DELETED = "DD"
    UNMERGED_DELETED_US = "DU"
    UNMERGED_DELETED_THEM = "DA"
    NOT_TRACKED = "??"
    IGNORED = "!!"

    @classmethod
    def from_code(cls, code: str) -> StatusCode | None:
        """Return the member for ``code`` or ``None`` when git emitted something unknown."""
        try:
            return cls(code)
        except ValueError:
            return None

    @property
    def is_rename_or_copy(self) -> bool:
        return "R" in self.value or "C" in self.value

    @property
    def in_index(self) -> bool:
        """Whether the index column carries a change."""
        return bool(self.value) and self.value[0] not in (" ", "?", "!")


_S = StatusCode

# Order is preference order for directory decoration based on contents' states.
MODIFIED_LIST: tuple[StatusCode, ...] = (
    _S.WD_ONLY_MODIFIED, _S.WD_ONLY_DELETED,
    _S.MODIFIED_MODIFIED, _S.MODIFIED_DELETED,
    _S.ADDED_MODIFIED, _S.ADDED_DELETED,
    _S.DELETED_MODIFIED,
    _S.RENAMED_MODIFIED, _S.RENAMED_DELETED,
    _S.COPIED_MODIFIED, _S.COPIED_DELETED,
    _S.UNMERGED,
    _S.UNMERGED_ADDED, _S.UNMERGED_ADDED_US, _S.UNMERGED_ADDED_THEM,
    _S.UNMERGED_DELETED, _S.UNMERGED_DELETED_US, _S.UNMERGED_DELETED_THEM,
    _S.MODIFIED, _S.ADDED, _S.DELETED, _S.RENAMED, _S.COPIED,
)

MODIFIED_SET: frozenset[StatusCode] = frozenset(MODIFIED_LIST)

CLEAN_SET: frozenset[StatusCode] = frozenset(
    {_S.UNMODIFIED, _S.MODIFIED, _S.ADDED, _S.DELETED, _S.RENAMED, _S.COPIED, _S.IGNORED, _S.NO_STATUS}
)

SIGNIFICANT_SET: frozenset[StatusCode] = MODIFIED_SET | {_S.NOT_TRACKED}

ORDERED_DIR_STATUS_LIST: tuple[StatusCode, ...] = MODIFIED_LIST + (_S.NOT_TRACKED,)

ORDERED_DIR_CLEAN_STATUS_LIST: tuple[StatusCode, ...] = tuple(
    status for status in MODIFIED_LIST if status not in CLEAN_SET
) + (_S.NOT_TRACKED,)


def first_status_in_set(
    status_list: Iterable[StatusCode],
    status_set: Iterable[StatusCode],
    path: str | None = None,
    is_ignored: Callable[[str], bool] | None = None,
) -> StatusCode:
    """Pick the representative status for ``status_set``.

    Returns the first entry of ``status_list`` present in ``status_set``.
    When none is present, ``is_ignored(path or ".")`` decides between
    ``IGNORED`` and ``NO_STATUS``; without a callback the answer is
    ``NO_STATUS``.
    """
    present = status_set if isinstance(status_set, (set, frozenset)) else set(status_set)
    for status in status_list:
        if status in present:
            return status
    if is_ignored is not None and is_ignored(path if path is not None else "."):
        return StatusCode.IGNORED
    return StatusCode.NO_STATUS


def dir_status_pair(
    status_set: Iterable[StatusCode],
    path: str | None = None,
    is_ignored: Callable[[str], bool] | None = None,
) -> tuple[StatusCode, StatusCode]:
    """Return ``(status, clean_status)`` for a directory's descendant statuses."""
    present = set(status_set)
    status = first_status_in_set(ORDERED_DIR_STATUS_LIST, present, path, is_ignored)
    clean_status = first_status_in_set(ORDERED_DIR_CLEAN_STATUS_LIST, present, path, is_ignored)
    return status, clean_status


__all__ = [
    "StatusCode",
    "MODIFIED_LIST",
    "MODIFIED_SET",
    "CLEAN_SET",
    "SIGNIFICANT_SET",
    "ORDERED_DIR_STATUS_LIST",
    "ORDERED_DIR_CLEAN_STATUS_LIST",
    "first_status_in_set",
    "dir_status_pair",
]
