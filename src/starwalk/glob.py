"""Glob driver: match a directory tree against a Matcher with pruning."""

from __future__ import annotations

import logging
import os
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Callable

from starwalk import GlobCancelledError, StarwalkError, WalkCancelledError
from starwalk.gitignore import GitignoreFilter
from starwalk.matcher import Matcher, Result
from starwalk.walker import Entry, WalkAction, WalkOptions, walk

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class GlobOptions:
    """Options controlling glob behavior.

    Attributes:
        path_transform: Applied to every relative path before matching,
            e.g. ``str.lower`` for case-insensitive globbing. Called
            concurrently when ``workers > 1``; it must be pure.
        workers: Number of walker threads.
        gitignore: Whether to prune entries ignored by ``root/.gitignore``.
    """

    path_transform: Callable[[str], str] | None = None
    workers: int = 1
    gitignore: bool = False


def ignore_access_errors(path: Path, exc: OSError) -> None:
    """Walker error handler treating unreadable entries as absent."""
    logger.debug("Ignoring inaccessible entry %s: %s", path, exc)


def relative_pathname(root: Path, entry: Entry) -> str:
    """Return the slash-separated path of *entry* relative to *root*.

    Directories get a trailing ``/`` so that matchers can tell a directory
    probe from a leaf.
    """
    rel = entry.path.relative_to(root).as_posix()
    if entry.is_dir:
        rel += "/"
    return rel


def glob(
    root: Path | str,
    matcher: Matcher,
    options: GlobOptions | None = None,
    *,
    cancel: threading.Event | None = None,
) -> dict[Path, os.stat_result]:
    """Return every entry below *root* matched by *matcher*.

    Paths are matched relative to *root* with ``/`` separators. Matching
    is case sensitive; use ``GlobOptions(path_transform=str.lower)`` with
    lower-cased patterns for case-insensitive globbing. Directories the
    matcher reports as ``NOT_MATCHED`` are not descended into. The root
    itself is never matched.

    Permission and other I/O errors raised while reading the tree are
    ignored: an unreadable subtree is treated as absent.

    Args:
        root: Directory to glob.
        matcher: Matcher deciding which entries to collect.
        options: Glob options. Defaults to ``GlobOptions()``.
        cancel: Event that stops the glob once set.

    Returns:
        dict[Path, os.stat_result]: Matched paths and their ``lstat`` data.

    Raises:
        StarwalkError: If *root* is not a directory.
        BadPatternError: If the matcher hit a malformed pattern.
        GlobCancelledError: If *cancel* was set; carries partial matches.
    """
    glob_options = options or GlobOptions()
    root_path = Path(root)
    if not root_path.is_dir():
        raise StarwalkError(f"'{root}' is not a directory")

    ignore_filter = GitignoreFilter.load(root_path) if glob_options.gitignore else None
    transform = glob_options.path_transform

    matches: dict[Path, os.stat_result] = {}
    lock = threading.Lock()

    def visit(entry: Entry) -> WalkAction:
        rel = relative_pathname(root_path, entry)

        if ignore_filter is not None and ignore_filter.is_ignored(rel):
            result = Result.NOT_MATCHED
        else:
            if transform is not None:
                rel = transform(rel)
            result = matcher.match(rel)

        if result is Result.MATCHED:
            with lock:
                matches[entry.path] = entry.stat

        if entry.is_dir and result is Result.NOT_MATCHED:
            return WalkAction.SKIP_SUBTREE
        return WalkAction.CONTINUE

    try:
        walk(
            root_path,
            visit,
            WalkOptions(workers=glob_options.workers),
            on_error=ignore_access_errors,
            cancel=cancel,
        )
    except WalkCancelledError as exc:
        with lock:
            partial = dict(matches)
        raise GlobCancelledError(str(exc), partial) from exc

    return matches
