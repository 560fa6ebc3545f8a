"""Directory walker using os.scandir with subtree pruning and cancellation."""

from __future__ import annotations

import enum
import logging
import os
import stat
import threading
from concurrent.futures import FIRST_COMPLETED, Future, ThreadPoolExecutor, wait
from dataclasses import dataclass
from pathlib import Path
from typing import Callable

from starwalk import WalkCancelledError

logger = logging.getLogger(__name__)


class WalkAction(enum.Enum):
    """Instruction returned by a visit callback."""

    CONTINUE = "continue"
    SKIP_SUBTREE = "skip_subtree"


@dataclass(frozen=True, slots=True)
class Entry:
    """A single filesystem entry discovered during the walk.

    Attributes:
        path: Path of the entry, rooted at the walk root.
        name: Basename of the entry.
        is_dir: Whether the entry is a directory (symlinks never are).
        depth: Parent directory depth from the walk root.
        parent_path: Parent directory path.
        stat: ``lstat`` result for the entry.
    """

    path: Path
    name: str
    is_dir: bool
    depth: int
    parent_path: Path
    stat: os.stat_result


@dataclass(frozen=True, slots=True)
class WalkOptions:
    """Options controlling walker behavior.

    Attributes:
        workers: Number of threads reading directories. With ``1`` the walk
            runs on the calling thread in sorted depth-first order.
    """

    workers: int = 1


VisitFunc = Callable[[Entry], "WalkAction | None"]
ErrorHandler = Callable[[Path, OSError], None]


def _raise_error(path: Path, exc: OSError) -> None:
    raise exc


def _check_cancelled(cancel: threading.Event | None) -> None:
    if cancel is not None and cancel.is_set():
        raise WalkCancelledError("walk cancelled")


def _scan_dir(
    current_dir: Path,
    depth: int,
    visit: VisitFunc,
    handle_error: ErrorHandler,
    cancel: threading.Event | None,
) -> list[tuple[Path, int]]:
    """Visit the entries of one directory.

    Returns:
        list[tuple[Path, int]]: Child directories to descend into, with
        their depth, in name order.
    """
    _check_cancelled(cancel)

    try:
        with os.scandir(current_dir) as it:
            raw_entries = list(it)
    except OSError as exc:
        handle_error(current_dir, exc)
        return []

    raw_entries.sort(key=lambda e: e.name)

    child_dirs: list[tuple[Path, int]] = []
    for dir_entry in raw_entries:
        _check_cancelled(cancel)

        entry_path = Path(dir_entry.path)
        try:
            entry_stat = dir_entry.stat(follow_symlinks=False)
        except OSError as exc:
            handle_error(entry_path, exc)
            continue

        entry = Entry(
            path=entry_path,
            name=dir_entry.name,
            is_dir=stat.S_ISDIR(entry_stat.st_mode),
            depth=depth,
            parent_path=current_dir,
            stat=entry_stat,
        )
        action = visit(entry)

        if not entry.is_dir:
            continue
        if action is WalkAction.SKIP_SUBTREE:
            logger.debug("Skipping subtree: %s", entry_path)
            continue
        child_dirs.append((entry_path, depth + 1))

    return child_dirs


def _walk_serial(
    root: Path,
    visit: VisitFunc,
    handle_error: ErrorHandler,
    cancel: threading.Event | None,
) -> None:
    # Stack items: (directory_path, depth)
    stack: list[tuple[Path, int]] = [(root, 0)]
    while stack:
        current_dir, depth = stack.pop()
        children = _scan_dir(current_dir, depth, visit, handle_error, cancel)
        # Push children in reverse so first-alphabetical is popped first
        stack.extend(reversed(children))


def _walk_concurrent(
    root: Path,
    visit: VisitFunc,
    handle_error: ErrorHandler,
    cancel: threading.Event | None,
    workers: int,
) -> None:
    with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="starwalk") as pool:
        pending: set[Future[list[tuple[Path, int]]]] = {
            pool.submit(_scan_dir, root, 0, visit, handle_error, cancel)
        }
        try:
            while pending:
                done, pending = wait(pending, return_when=FIRST_COMPLETED)
                for future in done:
                    for child_dir, depth in future.result():
                        _check_cancelled(cancel)
                        pending.add(
                            pool.submit(
                                _scan_dir, child_dir, depth, visit, handle_error, cancel
                            )
                        )
        except BaseException:
            for future in pending:
                future.cancel()
            raise


def walk(
    root: Path | str,
    visit: VisitFunc,
    options: WalkOptions | None = None,
    *,
    on_error: ErrorHandler | None = None,
    cancel: threading.Event | None = None,
) -> None:
    """Walk the tree below *root*, calling *visit* for every entry.

    The root itself is not visited. Returning ``WalkAction.SKIP_SUBTREE``
    from *visit* for a directory prevents descending into it. Symlinks are
    reported but never followed.

    With more than one worker, *visit* is called concurrently from pool
    threads and must be thread-safe.

    Args:
        root: Directory to walk.
        visit: Per-entry callback.
        options: Walker options. Defaults to ``WalkOptions()``.
        on_error: Receives every ``OSError`` raised while listing a
            directory or reading entry metadata. It may return to skip the
            entry, or raise to abort the walk. Without a handler the error
            propagates.
        cancel: Event that stops the walk once set.

    Raises:
        WalkCancelledError: If *cancel* was set before the walk completed.
        ValueError: If ``options.workers`` is less than 1.
    """
    walk_options = options or WalkOptions()
    if walk_options.workers < 1:
        raise ValueError(f"workers must be at least 1, got {walk_options.workers}")

    handle_error = on_error or _raise_error
    root_path = Path(root)

    if walk_options.workers == 1:
        _walk_serial(root_path, visit, handle_error, cancel)
    else:
        _walk_concurrent(root_path, visit, handle_error, cancel, walk_options.workers)
