"""CLI argument handling, error reporting, and watch loop tests."""

from __future__ import annotations

import io
import tempfile
import unittest
from pathlib import Path
from types import SimpleNamespace
from unittest import mock

from gitfsdb import cli
from gitfsdb.config import Settings
from gitfsdb.diff import DiffMode
from gitfsdb.errors import GitCommandError, GitProcessError


class CliTests(unittest.TestCase):
    def setUp(self) -> None:
        settings_patch = mock.patch("gitfsdb.cli.load_settings", return_value=Settings())
        settings_patch.start()
        self.addCleanup(settings_patch.stop)
        self._tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self._tmp.cleanup)
        self.root = Path(self._tmp.name).resolve()

    def test_prints_tree_for_explicit_path(self) -> None:
        stdout = io.StringIO()
        with mock.patch("gitfsdb.cli.GitFsDb") as db_cls, mock.patch(
            "gitfsdb.cli.render_tree",
            return_value=[" M b.txt"],
        ) as render_tree, mock.patch("sys.stdout", stdout):
            db_cls.return_value.root = self.root
            cli.main([str(self.root), "--hide-clean", "--depth", "2"])

        db_cls.assert_called_once_with(self.root, timeout_seconds=10.0)
        render_tree.assert_called_once_with(
            db_cls.return_value,
            show_hidden=False,
            hide_clean=True,
            colorize=False,
            max_depth=2,
        )
        self.assertEqual(stdout.getvalue(), f"{self.root}\n M b.txt\n")

    def test_without_path_follows_current_directory(self) -> None:
        with mock.patch("gitfsdb.cli.GitFsDb") as db_cls, mock.patch(
            "gitfsdb.cli.render_tree",
            return_value=[],
        ), mock.patch("sys.stdout", io.StringIO()):
            cli.main([])

        self.assertIsNone(db_cls.call_args.args[0])

    def test_index_flag_uses_index_tree(self) -> None:
        with mock.patch("gitfsdb.cli.GitIndexDb") as index_cls, mock.patch("gitfsdb.cli.GitFsDb") as db_cls, mock.patch(
            "gitfsdb.cli.render_tree",
            return_value=[],
        ), mock.patch("sys.stdout", io.StringIO()):
            cli.main([str(self.root), "--index", "--timeout", "3"])

        index_cls.assert_called_once_with(self.root, timeout_seconds=3.0)
        db_cls.assert_not_called()

    def test_git_failure_exits_with_status_one(self) -> None:
        stderr = io.StringIO()
        error = GitCommandError(["git", "status"], 128, "fatal: not a git repository\n")
        with mock.patch("gitfsdb.cli.GitFsDb", side_effect=error), mock.patch("sys.stderr", stderr):
            with self.assertRaises(SystemExit) as ctx:
                cli.main([str(self.root)])

        self.assertEqual(ctx.exception.code, 1)
        self.assertIn("not a git repository", stderr.getvalue())

    def test_missing_path_exits(self) -> None:
        with self.assertRaises(SystemExit) as ctx:
            cli.main([str(self.root / "missing")])
        self.assertIn("Path not found", str(ctx.exception.code))

    def test_diff_mode_and_files(self) -> None:
        stdout = io.StringIO()
        with mock.patch("gitfsdb.cli.get_diff_text", return_value="+v2\n") as get_diff_text, mock.patch(
            "gitfsdb.cli.GitFsDb",
        ) as db_cls, mock.patch("sys.stdout", stdout):
            cli.main([str(self.root), "--diff", "b.txt", "--staged"])

        get_diff_text.assert_called_once_with(self.root, ["b.txt"], DiffMode.STAGED, 10.0)
        db_cls.assert_not_called()
        self.assertEqual(stdout.getvalue(), "+v2\n")

    def test_staged_without_diff_is_a_usage_error(self) -> None:
        with mock.patch("sys.stderr", io.StringIO()):
            with self.assertRaises(SystemExit) as ctx:
                cli.main(["--staged"])
        self.assertEqual(ctx.exception.code, 2)

    def test_save_defaults_stores_flags(self) -> None:
        with mock.patch("gitfsdb.cli.save_settings") as save_settings, mock.patch("gitfsdb.cli.GitFsDb"), mock.patch(
            "gitfsdb.cli.render_tree",
            return_value=[],
        ), mock.patch("sys.stdout", io.StringIO()):
            cli.main([str(self.root), "--show-hidden", "--interval", "5", "--save-defaults"])

        save_settings.assert_called_once_with(
            Settings(show_hidden=True, hide_clean=False, git_timeout_seconds=10.0, poll_interval_seconds=5.0)
        )


class WatchLoopTests(unittest.TestCase):
    def test_failures_are_logged_and_changes_reprinted(self) -> None:
        db = mock.Mock()
        db.root = Path("/repo")
        db.update_if_necessary.side_effect = [GitProcessError(["git", "status"], "timed out"), False, True]
        args = SimpleNamespace(interval=0.5, show_hidden=False, hide_clean=False, depth=None)

        with mock.patch("gitfsdb.cli.time.sleep") as sleep, mock.patch(
            "gitfsdb.cli.render_tree",
            return_value=["?? c.txt"],
        ) as render_tree, mock.patch("sys.stdout", io.StringIO()) as stdout:
            with self.assertLogs("gitfsdb.cli", level="ERROR"):
                cli.watch_loop(db, args, colorize=False, max_polls=3)

        self.assertEqual(sleep.call_count, 3)
        sleep.assert_called_with(0.5)
        render_tree.assert_called_once()
        self.assertIn("?? c.txt", stdout.getvalue())


if __name__ == "__main__":
    unittest.main()
