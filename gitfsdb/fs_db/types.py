"""File/directory rows annotated with git status."""

from __future__ import annotations

from dataclasses import dataclass, replace

from ..porcelain import RelatedFileData
from ..status_codes import CLEAN_SET, SIGNIFICANT_SET, StatusCode


@dataclass(frozen=True)
class FsObject:
    """One file or directory row.

    ``clean_status`` is only meaningful for directories: it is the most
    significant non-clean status among the directory's descendants.
    """

    name: str
    path: str
    is_dir: bool
    status: StatusCode = StatusCode.NO_STATUS
    clean_status: StatusCode = StatusCode.NO_STATUS
    related_file_data: RelatedFileData | None = None

    def with_status(
        self,
        status: StatusCode,
        clean_status: StatusCode | None = None,
        related_file_data: RelatedFileData | None = None,
    ) -> FsObject:
        return replace(
            self,
            status=status,
            clean_status=self.clean_status if clean_status is None else clean_status,
            related_file_data=related_file_data,
        )

    def is_hidden(self) -> bool:
        """Dot-prefixed with nothing significant to show, or ignored by git."""
        if self.name.startswith("."):
            if self.is_dir:
                return self.status not in SIGNIFICANT_SET and self.clean_status not in SIGNIFICANT_SET
            return self.status not in SIGNIFICANT_SET
        return self.status is StatusCode.IGNORED

    def is_clean(self) -> bool:
        """Nothing left to do in the working tree for this entry."""
        if self.is_dir:
            return self.status in CLEAN_SET and self.clean_status not in SIGNIFICANT_SET
        return self.status in CLEAN_SET

    def is_visible(self, show_hidden: bool, hide_clean: bool) -> bool:
        return (show_hidden or not self.is_hidden()) and (not hide_clean or not self.is_clean())


__all__ = ["FsObject"]
