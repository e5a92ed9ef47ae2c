"""Tests for diff retrieval and colouring."""

from __future__ import annotations

import unittest
from pathlib import Path
from unittest import mock

from gitfsdb.diff import DiffMode, colorize_diff, get_diff_text

SAMPLE_DIFF = (
    "diff --git a/b.txt b/b.txt\n"
    "--- a/b.txt\n"
    "+++ b/b.txt\n"
    "@@ -1 +1 @@\n"
    "-v1\n"
    "+v2\n"
)


class GetDiffTextTests(unittest.TestCase):
    def test_mode_and_paths_are_passed_to_git(self) -> None:
        root = Path("/repo")
        with mock.patch("gitfsdb.diff.run_git", return_value=SAMPLE_DIFF.encode("utf-8")) as run_git:
            text = get_diff_text(root, ["b.txt"], DiffMode.STAGED, 4.0)

        self.assertEqual(text, SAMPLE_DIFF)
        run_git.assert_called_once_with(root, ["diff", "--staged", "--no-color", "--", "b.txt"], 4.0)

    def test_working_mode_without_paths_diffs_everything(self) -> None:
        with mock.patch("gitfsdb.diff.run_git", return_value=b"") as run_git:
            get_diff_text(Path("/repo"))

        self.assertEqual(run_git.call_args.args[1], ["diff", "--no-color", "--"])

    def test_head_mode_compares_against_head(self) -> None:
        self.assertEqual(DiffMode.HEAD.args, ("HEAD",))
        self.assertEqual(DiffMode.WORKING.args, ())


class ColorizeDiffTests(unittest.TestCase):
    def test_known_style_adds_ansi_escapes(self) -> None:
        rendered = colorize_diff(SAMPLE_DIFF, "monokai")
        self.assertIn("\033[", rendered)
        self.assertIn("+v2", rendered)

    def test_unknown_style_returns_plain_text(self) -> None:
        with self.assertLogs("gitfsdb.diff", level="WARNING"):
            rendered = colorize_diff(SAMPLE_DIFF, "no-such-style")
        self.assertEqual(rendered, SAMPLE_DIFF)

    def test_empty_diff_stays_empty(self) -> None:
        self.assertEqual(colorize_diff(""), "")


if __name__ == "__main__":
    unittest.main()
