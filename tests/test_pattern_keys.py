"""Tests for ordering of exports/imports pattern keys."""

import functools

import pytest

from esmresolve import compare_pattern_keys


class TestComparePatternKeys:
    """Tests for compare_pattern_keys."""

    @pytest.mark.parametrize(
        "key_a, key_b, expected",
        [
            ("./*", "./foo/", 1),
            ("./*", "./foo/*", 1),
            ("./", "./foo/", 1),
            ("./foo/ab/", "./foo/a/*", 1),
            ("./foo/*/bar", "./foo/*/bar/baz", 1),
            ("./foo/", "./foo/", 1),
            ("./foo/", "./*", -1),
            ("./foo/*", "./*", -1),
            ("./foo/", "./", -1),
            ("./foo/a/*", "./foo/ab/", -1),
            ("./foo/*/bar/baz", "./foo/*/bar", -1),
            ("./*", "./*", 0),
        ],
    )
    def test_comparison_table(self, key_a, key_b, expected):
        """Test the comparator against known key pairs."""
        assert compare_pattern_keys(key_a, key_b) == expected

    def test_sorts_most_specific_first(self):
        """Test sorting a set of keys with cmp_to_key."""
        keys = ["./*", "./a/*", "./a/b/*.js", "./a/b/*"]
        ordered = sorted(keys, key=functools.cmp_to_key(compare_pattern_keys))
        assert ordered == ["./a/b/*.js", "./a/b/*", "./a/*", "./*"]

    def test_invalid_key(self):
        """Test that keys without a single "*" or trailing "/" are rejected."""
        with pytest.raises(AssertionError):
            compare_pattern_keys("./foo", "./*")
