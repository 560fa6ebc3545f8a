"""CLI entry point for starwalk: I/O boundary only."""

from __future__ import annotations

import argparse
import logging
import os
import stat
import sys
from pathlib import Path

from starwalk import StarwalkError
from starwalk.glob import GlobOptions, glob
from starwalk.matcher import Matcher, MultiMatcher, PatternMatcher, Result


class ExcludingMatcher:
    """Match *includes* unless *excludes* matches.

    An excluded directory becomes ``NOT_MATCHED``, so its whole subtree is
    pruned.
    """

    def __init__(self, includes: Matcher, excludes: Matcher) -> None:
        self._includes = includes
        self._excludes = excludes

    def match(self, pathname: str) -> Result:
        if self._excludes.match(pathname) is Result.MATCHED:
            return Result.NOT_MATCHED
        return self._includes.match(pathname)


def build_parser() -> argparse.ArgumentParser:
    """Build and return the CLI argument parser.

    Returns:
        argparse.ArgumentParser: Configured parser for the ``starwalk`` command.
    """
    parser = argparse.ArgumentParser(
        prog="starwalk",
        description="find files matching globstar patterns",
    )
    parser.add_argument(
        "patterns",
        nargs="+",
        metavar="PATTERN",
        help="Pattern relative to the root directory; '**' spans directories",
    )
    parser.add_argument(
        "-C",
        "--directory",
        default=".",
        help="Root directory to search (default: current directory)",
    )
    parser.add_argument(
        "-x",
        "--exclude",
        action="append",
        default=[],
        dest="excludes",
        metavar="PATTERN",
        help="Exclude entries matching pattern (can be specified multiple times)",
    )
    parser.add_argument(
        "-i",
        "--ignore-case",
        action="store_true",
        dest="ignore_case",
        help="Match case-insensitively",
    )
    parser.add_argument(
        "--gitignore",
        action="store_true",
        help="Skip entries ignored by the root .gitignore",
    )
    parser.add_argument(
        "-j",
        "--jobs",
        type=int,
        default=1,
        help="Number of threads used to read directories (default: 1)",
    )
    parser.add_argument(
        "--order",
        choices=["asc", "desc"],
        default="asc",
        help="Sort direction: asc (default) or desc",
    )
    parser.add_argument(
        "-o",
        "--output",
        type=str,
        default=None,
        dest="output_file",
        help="Write output to a file instead of stdout",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log debug messages to stderr",
    )
    return parser


def run_starwalk(argv: list[str] | None = None) -> str:
    """Run starwalk with provided CLI args and return formatted output.

    Args:
        argv: Command-line argument list without program name. If ``None``,
            uses process arguments via ``argparse`` defaults.

    Returns:
        str: Matched paths, one per line.

    Raises:
        StarwalkError: On any user-facing validation error or bad pattern.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    return _run_with_args(args)


def _build_matcher(args: argparse.Namespace) -> Matcher:
    """Build the include/exclude matcher from CLI options.

    Args:
        args: Parsed CLI namespace.

    Returns:
        Matcher: Combined matcher.
    """

    def _compile(patterns: list[str]) -> Matcher:
        if args.ignore_case:
            patterns = [p.lower() for p in patterns]
        return MultiMatcher(*(PatternMatcher(p) for p in patterns))

    includes = _compile(args.patterns)
    if not args.excludes:
        return includes
    return ExcludingMatcher(includes, _compile(args.excludes))


def _format_output(
    root: Path, matches: dict[Path, os.stat_result], descending: bool
) -> str:
    """Render matched paths relative to *root*.

    Directories are suffixed with ``/``.
    """
    lines = []
    for path, entry_stat in matches.items():
        rel = path.relative_to(root).as_posix()
        if stat.S_ISDIR(entry_stat.st_mode):
            rel += "/"
        lines.append(rel)
    lines.sort(reverse=descending)
    return "\n".join(lines)


def _run_with_args(args: argparse.Namespace) -> str:
    """Run the glob pipeline for parsed arguments.

    Args:
        args: Parsed CLI namespace.

    Returns:
        str: Rendered output.

    Raises:
        StarwalkError: On any user-facing validation error or bad pattern.
    """
    if args.jobs < 1:
        raise StarwalkError("--jobs must be a positive integer")

    root = Path(args.directory)
    options = GlobOptions(
        path_transform=str.lower if args.ignore_case else None,
        workers=args.jobs,
        gitignore=args.gitignore,
    )
    matches = glob(root, _build_matcher(args), options)
    return _format_output(root, matches, args.order == "desc")


def main() -> None:
    """Run the CLI entry point with process arguments.

    Parses args exactly once and writes output to stdout or ``-o`` file.
    Exits with code 1 on user-facing errors.
    """
    parser = build_parser()
    args = parser.parse_args()  # single parse

    if args.verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(name)s: %(levelname)s: %(message)s",
        )

    try:
        output = _run_with_args(args)
    except StarwalkError as exc:
        sys.stderr.write(f"starwalk: {exc}\n")
        sys.exit(1)

    # One path per line; no matches means no output at all
    text = output + "\n" if output else ""

    if not args.output_file:
        sys.stdout.write(text)
        return

    try:
        Path(args.output_file).write_text(text, encoding="utf-8", newline="")
    except OSError as exc:
        sys.stderr.write(f"starwalk: cannot write to '{args.output_file}': {exc}\n")
        sys.exit(1)
