"""Tests for starwalk.segment."""

import pytest

from starwalk import BadPatternError
from starwalk.segment import fnmatch_segment, match_segment


class TestMatchSegment:
    @pytest.mark.parametrize(
        ("pattern", "name", "expected"),
        [
            ("abc", "abc", True),
            ("*", "abc", True),
            ("*c", "abc", True),
            ("a*", "a", True),
            ("a*", "abc", True),
            ("a*b?c*x", "abxbbxdbxebxczzx", True),
            ("a*b?c*x", "abxbbxdbxebxczzy", False),
            ("ab[c]", "abc", True),
            ("ab[b-d]", "abc", True),
            ("ab[e-g]", "abc", False),
            ("*x", "xxx", True),
            ("", "", True),
            ("", "foo", False),
            ("*", "", True),
            ("?", "", False),
        ],
    )
    def test_wildcards(self, pattern: str, name: str, expected: bool) -> None:
        assert match_segment(pattern, name) is expected

    @pytest.mark.parametrize(
        ("pattern", "name", "expected"),
        [
            ("ab[^c]", "abc", False),
            ("ab[^e-g]", "abc", True),
            ("ab[!c]", "abc", False),
            ("ab[!e-g]", "abc", True),
            ("a[^a]b", "a☺b", True),
            ("[a^bc]", "^", True),
            ("[a!bc]", "!", True),
        ],
    )
    def test_negated_classes(self, pattern: str, name: str, expected: bool) -> None:
        assert match_segment(pattern, name) is expected

    @pytest.mark.parametrize(
        ("pattern", "name", "expected"),
        [
            ("a\\*b", "a*b", True),
            ("a\\*b", "ab", False),
            (r"\a\b\c", "abc", True),
            (r"\[ab]", "[ab]", True),
            (r"[\]]", "]", True),
            (r"[\\]", "\\", True),
            (r"[\-x]", "-", True),
        ],
    )
    def test_escapes(self, pattern: str, name: str, expected: bool) -> None:
        assert match_segment(pattern, name) is expected

    @pytest.mark.parametrize(
        ("pattern", "name"),
        [
            ("*", "a/b"),
            ("a?b", "a/b"),
            ("a*b", "a/b"),
        ],
    )
    def test_wildcards_never_match_separator(self, pattern: str, name: str) -> None:
        assert match_segment(pattern, name) is False

    @pytest.mark.parametrize(
        ("pattern", "name"),
        [
            ("[", "a"),
            ("[^", "a"),
            ("[!", "a"),
            ("[^bc", "a"),
            ("\\", "a"),
            ("[]a]", "]"),
            ("[!]-]", "]"),
            ("[-]", "-"),
            ("[x-]", "x"),
            ("[a-b-c]", "a"),
            ("a[", "ab"),
        ],
    )
    def test_malformed_pattern_raises(self, pattern: str, name: str) -> None:
        with pytest.raises(BadPatternError, match="syntax error in pattern"):
            match_segment(pattern, name)

    @pytest.mark.parametrize(
        ("pattern", "name"),
        [
            ("a[", "a"),
            ("\\", ""),
            ("[", ""),
        ],
    )
    def test_unreached_malformed_tail_is_a_mismatch(self, pattern: str, name: str) -> None:
        assert match_segment(pattern, name) is False

    def test_bad_pattern_is_value_error(self) -> None:
        with pytest.raises(ValueError):
            match_segment("[", "a")


class TestFnmatchSegment:
    @pytest.mark.parametrize(
        ("pattern", "name", "expected"),
        [
            ("*.txt", "file.txt", True),
            ("*.txt", "file.TXT", False),
            ("file?.txt", "file1.txt", True),
            ("[!a]*", "bcd", True),
            ("[", "[", True),
        ],
    )
    def test_matching(self, pattern: str, name: str, expected: bool) -> None:
        assert fnmatch_segment(pattern, name) is expected
