"""Real-repository tests for status trees, change detection, and diffs.

Each test builds a throwaway repository with the git binary and checks the
tree the database reports for it.
"""

from __future__ import annotations

import os
import shutil
import subprocess
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from gitfsdb.diff import DiffMode, get_diff_text
from gitfsdb.errors import GitCommandError
from gitfsdb.fs_db import GitFsDb, GitIndexDb
from gitfsdb.gitignore import clear_gitignore_cache
from gitfsdb.porcelain import RelatedFileData, Relation
from gitfsdb.status_codes import StatusCode


def _by_name(items) -> dict:
    return {item.name: item for item in items}


@unittest.skipIf(shutil.which("git") is None, "git is required for status tree tests")
class StatusTreeIntegrationTests(unittest.TestCase):
    def setUp(self) -> None:
        clear_gitignore_cache()
        self._tmp = tempfile.TemporaryDirectory()
        self.root = Path(self._tmp.name).resolve()
        self._git("init", "-q")
        (self.root / "a.txt").write_text("a\n", encoding="utf-8")
        (self.root / "b.txt").write_text("v1\n", encoding="utf-8")
        (self.root / "sub").mkdir()
        (self.root / "sub" / "x.txt").write_text("x1\n", encoding="utf-8")
        self._git("add", "-A")
        self._git("commit", "-q", "-m", "initial")

    def tearDown(self) -> None:
        clear_gitignore_cache()
        self._tmp.cleanup()

    def _git(self, *args: str) -> None:
        subprocess.run(
            [
                "git",
                "-c",
                "user.email=tests@example.com",
                "-c",
                "user.name=Tests",
                "-c",
                "commit.gpgsign=false",
                *args,
            ],
            cwd=self.root,
            check=True,
        )

    def test_modified_and_untracked_files(self) -> None:
        (self.root / "b.txt").write_text("v2\n", encoding="utf-8")
        (self.root / "c.txt").write_text("c\n", encoding="utf-8")

        db = GitFsDb(self.root)

        self.assertIs(db.status, StatusCode.WD_ONLY_MODIFIED)
        _dirs, files = db.dir_contents(".")
        statuses = {item.name: item.status for item in files}
        self.assertEqual(
            statuses,
            {
                "a.txt": StatusCode.NO_STATUS,
                "b.txt": StatusCode.WD_ONLY_MODIFIED,
                "c.txt": StatusCode.NOT_TRACKED,
            },
        )
        dirs, files = db.dir_contents(".", False, True)
        self.assertEqual([item.name for item in files], ["b.txt", "c.txt"])
        self.assertEqual(dirs, [])

    def test_dot_git_directory_is_hidden_by_default(self) -> None:
        db = GitFsDb(self.root)
        dirs, _files = db.dir_contents(".")
        self.assertNotIn(".git", _by_name(dirs))
        dirs, _files = db.dir_contents(".", True, False)
        self.assertIn(".git", _by_name(dirs))

    def test_rename_shows_both_ends(self) -> None:
        self._git("mv", "a.txt", "renamed.txt")

        _dirs, files = GitFsDb(self.root).dir_contents(".")
        rows = _by_name(files)

        self.assertIs(rows["a.txt"].status, StatusCode.RENAMED)
        self.assertEqual(rows["a.txt"].related_file_data, RelatedFileData("renamed.txt", Relation.RENAMED_TO))
        self.assertEqual(rows["renamed.txt"].related_file_data, RelatedFileData("a.txt", Relation.RENAMED_FROM))

    def test_symlinked_directory_is_listed_once_as_file(self) -> None:
        (self.root / "real").mkdir()
        (self.root / "real" / "f.txt").write_text("f\n", encoding="utf-8")
        try:
            (self.root / "link").symlink_to(self.root / "real", target_is_directory=True)
        except (OSError, NotImplementedError):
            self.skipTest("symlinks are not available")

        dirs, files = GitFsDb(self.root).dir_contents(".")

        self.assertNotIn("link", _by_name(dirs))
        self.assertEqual([item.name for item in files].count("link"), 1)
        self.assertIs(_by_name(files)["link"].status, StatusCode.NOT_TRACKED)
        self.assertIs(_by_name(dirs)["real"].status, StatusCode.NOT_TRACKED)

    def test_ignored_directory_is_hidden_unless_requested(self) -> None:
        (self.root / ".gitignore").write_text("build/\n", encoding="utf-8")
        (self.root / "build").mkdir()
        (self.root / "build" / "out.o").write_text("bin", encoding="utf-8")

        db = GitFsDb(self.root)

        dirs, files = db.dir_contents(".")
        self.assertNotIn("build", _by_name(dirs))
        self.assertIs(_by_name(files)[".gitignore"].status, StatusCode.NOT_TRACKED)
        dirs, _files = db.dir_contents(".", True, False)
        self.assertIs(_by_name(dirs)["build"].status, StatusCode.IGNORED)

    def test_deleted_file_keeps_a_row(self) -> None:
        (self.root / "sub" / "x.txt").unlink()

        db = GitFsDb(self.root)

        dirs, _files = db.dir_contents(".")
        self.assertIs(_by_name(dirs)["sub"].status, StatusCode.WD_ONLY_DELETED)
        _dirs, files = db.dir_contents("sub")
        self.assertIs(_by_name(files)["x.txt"].status, StatusCode.WD_ONLY_DELETED)

    def test_update_detects_new_file_then_settles(self) -> None:
        db = GitFsDb(self.root)
        db.dir_contents(".")
        self.assertFalse(db.update_if_necessary())

        (self.root / "d.txt").write_text("d\n", encoding="utf-8")

        self.assertTrue(db.update_if_necessary())
        _dirs, files = db.dir_contents(".")
        self.assertIs(_by_name(files)["d.txt"].status, StatusCode.NOT_TRACKED)
        self.assertFalse(db.update_if_necessary())

    def test_subdirectory_root_strips_repository_prefix(self) -> None:
        (self.root / "sub" / "x.txt").write_text("x2\n", encoding="utf-8")
        (self.root / "b.txt").write_text("v2\n", encoding="utf-8")

        db = GitFsDb(self.root / "sub")

        _dirs, files = db.dir_contents(".")
        self.assertEqual([(item.name, item.status) for item in files], [("x.txt", StatusCode.WD_ONLY_MODIFIED)])
        self.assertIs(db.status, StatusCode.WD_ONLY_MODIFIED)

    def test_index_tree_lists_staged_changes_only(self) -> None:
        (self.root / "b.txt").write_text("v2\n", encoding="utf-8")
        (self.root / "c.txt").write_text("c\n", encoding="utf-8")
        (self.root / "sub" / "x.txt").write_text("x2\n", encoding="utf-8")
        self._git("add", "b.txt")

        _dirs, files = GitIndexDb(self.root).dir_contents(".")

        self.assertEqual([(item.name, item.status) for item in files], [("b.txt", StatusCode.MODIFIED)])

    def test_diff_text_for_working_tree_and_index(self) -> None:
        (self.root / "b.txt").write_text("v2\n", encoding="utf-8")

        self.assertIn("+v2", get_diff_text(self.root, ["b.txt"]))
        self.assertEqual(get_diff_text(self.root, ["b.txt"], DiffMode.STAGED), "")
        self._git("add", "b.txt")
        self.assertIn("+v2", get_diff_text(self.root, ["b.txt"], DiffMode.STAGED))


@unittest.skipIf(shutil.which("git") is None, "git is required for status tree tests")
class NotARepositoryTests(unittest.TestCase):
    def test_outside_repository_raises(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp).resolve()
            with mock.patch.dict(os.environ, {"GIT_CEILING_DIRECTORIES": str(root.parent)}):
                with self.assertRaises(GitCommandError):
                    GitFsDb(root)


if __name__ == "__main__":
    unittest.main()
