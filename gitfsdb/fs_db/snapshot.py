"""Immutable capture of one ``git status`` run, narrowable per directory."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import NamedTuple

from ..paths import CUR_DIR, path_components, path_starts_with, to_string_path
from ..porcelain import PorcelainRecord, RelatedFileData, StatusEntry, parse_porcelain_text
from ..status_codes import StatusCode, dir_status_pair
from .fs import is_real_dir


class SnapshotChild(NamedTuple):
    """An immediate child of the snapshot's directory as git sees it."""

    name: str
    path: str
    is_dir: bool
    status: StatusCode
    related_file_data: RelatedFileData | None


@dataclass(frozen=True)
class Snapshot:
    """Path -> status map for one ``git status`` run.

    The full map is shared between a snapshot and everything narrowed from
    it; ``relevant_keys`` is the per-directory view.
    """

    dir_path: str
    num_dir_components: int
    relevant_keys: tuple[str, ...]
    status: StatusCode
    clean_status: StatusCode
    file_status_data: Mapping[str, StatusEntry] = field(compare=False, repr=False)
    root: Path = field(compare=False, repr=False, default=Path(CUR_DIR))
    is_ignored: Callable[[str], bool] | None = field(compare=False, repr=False, default=None)

    @classmethod
    def from_status_data(
        cls,
        file_status_data: Mapping[str, StatusEntry],
        root: Path = Path(CUR_DIR),
        is_ignored: Callable[[str], bool] | None = None,
    ) -> Snapshot:
        """Build the root-directory snapshot over every reported path."""
        data = MappingProxyType(dict(file_status_data))
        status, clean_status = dir_status_pair(
            (entry.status for entry in data.values()),
            None,
            is_ignored,
        )
        return cls(
            dir_path=CUR_DIR,
            num_dir_components=1,
            relevant_keys=tuple(sorted(data)),
            status=status,
            clean_status=clean_status,
            file_status_data=data,
            root=root,
            is_ignored=is_ignored,
        )

    @classmethod
    def from_records(
        cls,
        records: Iterable[PorcelainRecord],
        is_ignored: Callable[[str], bool] | None = None,
        root: Path = Path(CUR_DIR),
    ) -> Snapshot:
        """Build the root snapshot from parsed lines; later records win."""
        return cls.from_status_data(
            {record.path: StatusEntry(record.status, record.related) for record in records},
            root,
            is_ignored,
        )

    @classmethod
    def from_text(
        cls,
        text: str,
        root: Path = Path(CUR_DIR),
        is_ignored: Callable[[str], bool] | None = None,
        *,
        prefix: str = "",
    ) -> Snapshot:
        return cls.from_status_data(parse_porcelain_text(text, prefix=prefix), root, is_ignored)

    @classmethod
    def empty(cls, root: Path = Path(CUR_DIR)) -> Snapshot:
        return cls.from_status_data({}, root)

    def narrowed_for_dir_path(self, dir_path: str) -> Snapshot:
        """Restrict to keys at or below ``dir_path`` and roll their statuses up."""
        relevant_keys = tuple(key for key in self.relevant_keys if path_starts_with(key, dir_path))
        status, clean_status = dir_status_pair(
            (self.file_status_data[key].status for key in relevant_keys),
            dir_path,
            self.is_ignored,
        )
        return Snapshot(
            dir_path=dir_path,
            num_dir_components=len(path_components(dir_path)),
            relevant_keys=relevant_keys,
            status=status,
            clean_status=clean_status,
            file_status_data=self.file_status_data,
            root=self.root,
            is_ignored=self.is_ignored,
        )

    def get(self, path: str) -> StatusEntry | None:
        return self.file_status_data.get(path)

    def iter(self) -> Iterator[SnapshotChild]:
        """Yield one ``SnapshotChild`` per immediate child name.

        A name can be reached through several keys (a directory with changed
        descendants); only the first is reported. A key naming this
        directory itself (a submodule root) is skipped.
        """
        depth = self.num_dir_components
        already_seen: set[str] = set()
        for key in self.relevant_keys:
            components = path_components(key)
            if len(components) <= depth:
                continue
            name = components[depth]
            if name in already_seen:
                continue
            already_seen.add(name)
            entry = self.file_status_data[key]
            path = to_string_path(components[: depth + 1])
            is_dir = len(components) > depth + 1 or is_real_dir(self.root / path)
            yield SnapshotChild(name, path, is_dir, entry.status, entry.related_file_data)

    def __iter__(self) -> Iterator[SnapshotChild]:
        return self.iter()


__all__ = ["Snapshot", "SnapshotChild"]
