"""Command-line front door for gitfsdb.

Prints the status-annotated tree of a working directory (or of the index),
optionally re-printing it whenever the tree changes, or prints a coloured
diff for selected files.
"""

from __future__ import annotations

import argparse
import logging
import sys
import time
from pathlib import Path

from .config import Settings, load_settings, save_settings
from .diff import DEFAULT_STYLE, DiffMode, colorize_diff, get_diff_text
from .errors import GitFsDbError
from .fs_db import GitFsDb, GitIndexDb
from .render import render_tree

logger = logging.getLogger(__name__)

CLEAR_SCREEN = "\033[H\033[2J"


def _positive_int(value: str) -> int:
    """argparse type for positive integer values."""
    try:
        parsed = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid integer value: {value!r}") from exc
    if parsed <= 0:
        raise argparse.ArgumentTypeError("value must be >= 1")
    return parsed


def _positive_float(value: str) -> float:
    try:
        parsed = float(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid number: {value!r}") from exc
    if parsed <= 0:
        raise argparse.ArgumentTypeError("value must be > 0")
    return parsed


def build_parser(settings: Settings) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gitfsdb",
        description="Print a git status-annotated directory tree.",
    )
    parser.add_argument("path", nargs="?", default=None, help="Working directory. Defaults to the current directory.")
    parser.add_argument("--show-hidden", action="store_true", default=settings.show_hidden, help="Include dot-files.")
    parser.add_argument("--hide-clean", action="store_true", default=settings.hide_clean, help="Omit clean entries.")
    parser.add_argument("--index", action="store_true", help="Show only changes staged in the index.")
    parser.add_argument("--depth", type=_positive_int, default=None, help="Limit how many directory levels are shown.")
    parser.add_argument("--no-color", action="store_true", help="Disable color output even on TTY.")
    parser.add_argument("--watch", action="store_true", help="Re-print the tree whenever it changes.")
    parser.add_argument(
        "--interval",
        type=_positive_float,
        default=settings.poll_interval_seconds,
        help="Seconds between polls in --watch mode.",
    )
    parser.add_argument(
        "--timeout",
        type=_positive_float,
        default=settings.git_timeout_seconds,
        help="Timeout in seconds for each git invocation.",
    )
    parser.add_argument(
        "--diff",
        nargs="*",
        metavar="FILE",
        default=None,
        help="Print the diff for FILEs (all changes when none are given) and exit.",
    )
    mode = parser.add_mutually_exclusive_group()
    mode.add_argument("--staged", action="store_true", help="With --diff, diff the index against HEAD.")
    mode.add_argument("--head", action="store_true", help="With --diff, diff the working tree against HEAD.")
    parser.add_argument("--style", default=DEFAULT_STYLE, help="Pygments style name for --diff output.")
    parser.add_argument(
        "--save-defaults",
        action="store_true",
        help="Store --show-hidden, --hide-clean, --interval and --timeout as defaults.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log debug output to stderr.")
    return parser


def _diff_mode(args: argparse.Namespace) -> DiffMode:
    if args.staged:
        return DiffMode.STAGED
    if args.head:
        return DiffMode.HEAD
    return DiffMode.WORKING


def _print_tree(db: GitFsDb | GitIndexDb, args: argparse.Namespace, colorize: bool) -> None:
    lines = render_tree(
        db,
        show_hidden=args.show_hidden,
        hide_clean=args.hide_clean,
        colorize=colorize,
        max_depth=args.depth,
    )
    sys.stdout.write(f"{db.root}\n")
    for line in lines:
        sys.stdout.write(f"{line}\n")
    sys.stdout.flush()


def watch_loop(
    db: GitFsDb | GitIndexDb,
    args: argparse.Namespace,
    colorize: bool,
    max_polls: int | None = None,
) -> None:
    """Poll ``db`` and re-print on change; git failures are logged and retried."""
    polls = 0
    while max_polls is None or polls < max_polls:
        time.sleep(args.interval)
        polls += 1
        try:
            changed = db.update_if_necessary()
        except GitFsDbError as exc:
            logger.error(f"Refresh failed, retrying: {exc}")
            continue
        if changed:
            if colorize:
                sys.stdout.write(CLEAR_SCREEN)
            _print_tree(db, args, colorize)


def run(args: argparse.Namespace) -> None:
    root = Path(args.path).resolve() if args.path is not None else None
    if root is not None and not root.is_dir():
        raise SystemExit(f"Path not found: {args.path}")
    colorize = not args.no_color and sys.stdout.isatty()

    if args.save_defaults:
        save_settings(
            Settings(
                show_hidden=args.show_hidden,
                hide_clean=args.hide_clean,
                git_timeout_seconds=args.timeout,
                poll_interval_seconds=args.interval,
            )
        )

    if args.diff is not None:
        text = get_diff_text(root or Path.cwd(), args.diff, _diff_mode(args), args.timeout)
        sys.stdout.write(colorize_diff(text, args.style) if colorize else text)
        return

    if args.index:
        db: GitFsDb | GitIndexDb = GitIndexDb(root, timeout_seconds=args.timeout)
    else:
        db = GitFsDb(root, timeout_seconds=args.timeout)
    _print_tree(db, args, colorize)

    if args.watch:
        try:
            watch_loop(db, args, colorize)
        except KeyboardInterrupt:
            pass


def main(argv: list[str] | None = None) -> None:
    """Parse CLI arguments and print the tree or diff.

    Git failures are reported on stderr with exit status 1.
    """
    parser = build_parser(load_settings())
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    if (args.staged or args.head) and args.diff is None:
        parser.error("--staged and --head require --diff")
    try:
        run(args)
    except GitFsDbError as exc:
        sys.stderr.write(f"gitfsdb: {exc}\n")
        raise SystemExit(1) from exc


if __name__ == "__main__":
    main()
