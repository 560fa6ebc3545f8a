"""starwalk: globstar path matching with pruned directory traversal."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import os
    from pathlib import Path

__version__ = "0.1.0"


class StarwalkError(Exception):
    """User-facing error.

    Base class for every error raised by starwalk. The CLI prints the
    message to stderr and exits with code 1.
    """


class BadPatternError(StarwalkError, ValueError):
    """A pattern segment is malformed.

    Raised lazily, when a segment comparison reaches the malformed part
    (unterminated bracket class, dangling escape, empty class).
    """


class PatternTooDeepError(StarwalkError):
    """Globstar expansion exceeded the configured recursion depth."""


class WalkCancelledError(StarwalkError):
    """The directory walk observed a cancellation request."""


class GlobCancelledError(WalkCancelledError):
    """A glob was cancelled.

    Attributes:
        matches: Entries matched before cancellation was observed.
    """

    def __init__(self, message: str, matches: dict[Path, os.stat_result]) -> None:
        super().__init__(message)
        self.matches = matches
