"""Single-segment shell glob matching.

A segment is one ``/``-delimited component of a path. The default
matcher follows POSIX shell (and Go ``path.Match``) semantics and reports
malformed patterns instead of silently treating them as literals, which
``fnmatch`` does.
"""

from __future__ import annotations

from fnmatch import fnmatchcase
from typing import Callable

from starwalk import BadPatternError

SegmentMatchFunc = Callable[[str, str], bool]
"""Signature of a segment comparison: ``(pattern, name) -> matched``.

Implementations raise :class:`~starwalk.BadPatternError` for a malformed
pattern.
"""

_NEGATORS = "^!"


def _bad_pattern(pattern: str) -> BadPatternError:
    return BadPatternError(f"syntax error in pattern: {pattern!r}")


def _scan_chunk(pattern: str) -> tuple[bool, str, str]:
    """Split off the next chunk of *pattern*.

    A chunk is the run of non-star pattern text following an optional
    sequence of leading stars.

    Returns:
        tuple[bool, str, str]: ``(star, chunk, rest)``.
    """
    star = False
    while pattern.startswith("*"):
        pattern = pattern[1:]
        star = True

    in_range = False
    i = 0
    while i < len(pattern):
        ch = pattern[i]
        if ch == "\\":
            # dangling escape is reported by _match_chunk
            if i + 1 < len(pattern):
                i += 1
        elif ch == "[":
            in_range = True
        elif ch == "]":
            in_range = False
        elif ch == "*" and not in_range:
            break
        i += 1
    return star, pattern[:i], pattern[i:]


def _get_esc(chunk: str, pattern: str) -> tuple[str, str]:
    """Read one possibly escaped character of a bracket class.

    Returns:
        tuple[str, str]: The character and the remaining chunk.

    Raises:
        BadPatternError: On an empty member, an unescaped ``-`` or ``]``,
            or a class left unterminated.
    """
    if not chunk or chunk[0] in "-]":
        raise _bad_pattern(pattern)
    if chunk[0] == "\\":
        chunk = chunk[1:]
        if not chunk:
            raise _bad_pattern(pattern)
    ch, rest = chunk[0], chunk[1:]
    if not rest:
        raise _bad_pattern(pattern)
    return ch, rest


def _match_chunk(chunk: str, name: str, pattern: str) -> str | None:
    """Match *chunk* against the beginning of *name*.

    Returns:
        str | None: The unmatched remainder of *name*, or ``None`` when the
        chunk does not match.

    Raises:
        BadPatternError: When the scan reaches a malformed construct.
    """
    while chunk:
        if not name:
            return None

        ch = chunk[0]
        if ch == "[":
            target, name = name[0], name[1:]
            chunk = chunk[1:]
            negated = bool(chunk) and chunk[0] in _NEGATORS
            if negated:
                chunk = chunk[1:]

            matched = False
            members = 0
            while True:
                if chunk.startswith("]") and members > 0:
                    chunk = chunk[1:]
                    break
                lo, chunk = _get_esc(chunk, pattern)
                hi = lo
                if chunk[0] == "-":
                    hi, chunk = _get_esc(chunk[1:], pattern)
                if lo <= target <= hi:
                    matched = True
                members += 1

            if matched == negated:
                return None

        elif ch == "?":
            if name[0] == "/":
                return None
            name = name[1:]
            chunk = chunk[1:]

        else:
            if ch == "\\":
                chunk = chunk[1:]
                if not chunk:
                    raise _bad_pattern(pattern)
            if chunk[0] != name[0]:
                return None
            name = name[1:]
            chunk = chunk[1:]

    return name


def _match_after_star(chunk: str, name: str, last: bool, pattern: str) -> str | None:
    """Retry *chunk* after letting a star absorb 1..n leading characters.

    A star never absorbs ``/``. When *chunk* is the last one, only a match
    that consumes the whole name counts.
    """
    for i, ch in enumerate(name):
        if ch == "/":
            break
        rest = _match_chunk(chunk, name[i + 1 :], pattern)
        if rest is not None and not (last and rest):
            return rest
    return None


def match_segment(pattern: str, name: str) -> bool:
    """Report whether *name* matches the shell glob *pattern*.

    Supported syntax: ``*`` (any run of non-``/`` characters), ``?`` (one
    non-``/`` character), ``[...]`` classes with ``a-z`` ranges and ``^`` or
    ``!`` negation, and ``\\`` escapes.

    Malformed syntax is reported only once the comparison reaches it, so a
    broken tail behind a mismatch goes unnoticed.

    Args:
        pattern: Glob pattern for one segment.
        name: Literal segment to test.

    Returns:
        bool: ``True`` when *name* matches.

    Raises:
        BadPatternError: If *pattern* is malformed.
    """
    full_pattern = pattern
    while pattern:
        star, chunk, pattern = _scan_chunk(pattern)
        if star and not chunk:
            # trailing star matches the rest unless it holds a separator
            return "/" not in name

        rest = _match_chunk(chunk, name, full_pattern)
        if rest is not None and (not rest or pattern):
            name = rest
            continue

        if star:
            rest = _match_after_star(chunk, name, not pattern, full_pattern)
            if rest is not None:
                name = rest
                continue

        return False

    return not name


def fnmatch_segment(pattern: str, name: str) -> bool:
    """Segment comparison backed by :func:`fnmatch.fnmatchcase`.

    Never raises: malformed brackets are matched literally, and ``[!...]``
    is the only negation form.
    """
    return fnmatchcase(name, pattern)
