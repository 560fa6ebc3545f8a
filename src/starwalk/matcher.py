"""Globstar-aware path matching with a three-valued result."""

from __future__ import annotations

import enum
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Final, Protocol

from starwalk import PatternTooDeepError
from starwalk.segment import SegmentMatchFunc, match_segment

SEPARATOR: Final = "/"
GLOBSTAR: Final = "**"


class Result(enum.Enum):
    """Outcome of matching a path against a pattern.

    ``FOLLOW`` means the path does not match yet, but a longer path below
    it might. Walkers descend into directories that are ``MATCHED`` or
    ``FOLLOW`` and prune ``NOT_MATCHED`` ones.
    """

    NOT_MATCHED = 0
    MATCHED = 1
    FOLLOW = 2


class Matcher(Protocol):
    """Protocol for anything that can match a slash-separated path.

    Implementations must be safe to call from several threads at once.
    """

    def match(self, pathname: str) -> Result: ...


@dataclass(frozen=True, slots=True)
class MatchOptions:
    """Options controlling pattern matching.

    Attributes:
        match_func: Comparison used for every non-globstar segment.
        max_globstar_depth: Maximum globstar recursion depth before
            :class:`~starwalk.PatternTooDeepError` is raised.
    """

    match_func: SegmentMatchFunc = match_segment
    max_globstar_depth: int = 64


class PatternMatcher:
    """Match paths against one globstar pattern.

    The pattern is split on ``/``. A segment that is exactly ``**`` matches
    zero or more whole path segments; every other segment is compared with
    ``options.match_func``. Malformed segments are not rejected here; they
    raise :class:`~starwalk.BadPatternError` when a comparison reaches them.
    """

    __slots__ = ("_pattern", "_options")

    def __init__(self, pattern: str, options: MatchOptions | None = None) -> None:
        self._pattern: tuple[str, ...] = tuple(pattern.split(SEPARATOR))
        self._options = options or MatchOptions()

    @property
    def pattern(self) -> str:
        return SEPARATOR.join(self._pattern)

    def __repr__(self) -> str:
        return f"{type(self).__qualname__}({self.pattern!r})"

    def match(self, pathname: str) -> Result:
        """Match *pathname* against the pattern.

        A trailing ``/`` on *pathname* marks a directory probe: a failed
        comparison against the final empty segment yields ``FOLLOW`` since
        entries below the directory may still match.

        Args:
            pathname: Slash-separated path relative to the glob root.

        Returns:
            Result: ``MATCHED``, ``NOT_MATCHED`` or ``FOLLOW``.

        Raises:
            BadPatternError: If a segment comparison hits malformed syntax.
            PatternTooDeepError: If globstar recursion is too deep.
        """
        return self._match(self._pattern, pathname.split(SEPARATOR), 0)

    def _match(self, pattern: Sequence[str], parts: Sequence[str], depth: int) -> Result:
        match_func = self._options.match_func
        while True:
            if not pattern and not parts:
                return Result.MATCHED
            if not parts:
                return Result.FOLLOW
            if not pattern:
                return Result.NOT_MATCHED

            if pattern[0] == GLOBSTAR:
                if len(pattern) == 1:
                    return Result.MATCHED
                return self._match_globstar(pattern[1:], parts, depth + 1)

            if not match_func(pattern[0], parts[0]):
                if len(parts) == 1 and parts[0] == "":
                    return Result.FOLLOW
                return Result.NOT_MATCHED

            pattern = pattern[1:]
            parts = parts[1:]

    def _match_globstar(
        self, rest: Sequence[str], parts: Sequence[str], depth: int
    ) -> Result:
        """Try *rest* at every split point of *parts*."""
        if depth > self._options.max_globstar_depth:
            raise PatternTooDeepError(
                f"pattern {self.pattern!r} exceeds globstar depth "
                f"{self._options.max_globstar_depth}"
            )
        for i in range(len(parts)):
            if self._match(rest, parts[i:], depth) is Result.MATCHED:
                return Result.MATCHED
        # more segments may still arrive for the globstar to absorb
        return Result.FOLLOW


class MultiMatcher:
    """Combine matchers with first-match-wins semantics.

    Returns ``MATCHED`` as soon as one member matches, ``FOLLOW`` when no
    member matched but at least one followed, and ``NOT_MATCHED``
    otherwise. An exception from any member aborts evaluation.
    """

    __slots__ = ("_matchers",)

    def __init__(self, *matchers: Matcher) -> None:
        self._matchers: tuple[Matcher, ...] = matchers

    def __repr__(self) -> str:
        inner = ", ".join(repr(m) for m in self._matchers)
        return f"{type(self).__qualname__}({inner})"

    def match(self, pathname: str) -> Result:
        follow = False
        for matcher in self._matchers:
            result = matcher.match(pathname)
            if result is Result.MATCHED:
                return Result.MATCHED
            if result is Result.FOLLOW:
                follow = True
        return Result.FOLLOW if follow else Result.NOT_MATCHED


def match(pattern: str, pathname: str, options: MatchOptions | None = None) -> bool:
    """Report whether *pathname* fully matches *pattern*.

    Same rules as :class:`PatternMatcher`, collapsed to a boolean: only
    ``MATCHED`` is ``True``.

    Raises:
        BadPatternError: If *pattern* is malformed where it was compared.
    """
    return PatternMatcher(pattern, options).match(pathname) is Result.MATCHED
