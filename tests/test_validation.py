"""Tests for the validators."""

import pytest

from esmresolve import InvalidPackageConfigurationError
from esmresolve.validation import (
    is_valid_path,
    is_valid_path_segments,
    validate_exports_object,
    validate_pattern_key,
)


class TestPathValidation:
    """Tests for path and segment validation."""

    def test_valid_segments(self):
        """Test segments without forbidden values."""
        assert is_valid_path_segments(["foo", "bar"]) is True

    @pytest.mark.parametrize("segment", [".", "..", "node_modules", "", "%2e", "%2E%2e", "node%5Fmodules"])
    def test_invalid_segments(self, segment):
        """Test forbidden segments, including percent-encoded ones."""
        assert is_valid_path_segments(["foo", segment]) is False

    @pytest.mark.parametrize("path", ["foo/bar", "foo\\bar", "foo/bar.js", "a/b/c"])
    def test_valid_paths(self, path):
        """Test paths without forbidden segments."""
        assert is_valid_path(path) is True

    @pytest.mark.parametrize("segment", [".", "..", "node_modules", ""])
    def test_invalid_paths(self, segment):
        """Test forbidden segments after either separator."""
        assert is_valid_path(f"foo/{segment}") is False
        assert is_valid_path(f"foo\\{segment}") is False

    def test_case_insensitive(self):
        """Test that node_modules is matched in any case."""
        assert is_valid_path("foo/NODE_MODULES") is False


class TestExportsObjectValidation:
    """Tests for validate_exports_object."""

    def test_relative_keys(self):
        """Test an object with only subpath keys."""
        validate_exports_object("/foo", {"./foo": "./bar.js", ".": "./index.js"})

    def test_condition_keys(self):
        """Test an object with only condition keys."""
        validate_exports_object("/foo", {"import": "./a.mjs", "require": "./a.cjs"})

    def test_mixed_keys(self):
        """Test that mixed keys are rejected."""
        with pytest.raises(InvalidPackageConfigurationError, match='"/foo"'):
            validate_exports_object("/foo", {"./foo": "./bar.js", "import": "./a.js"})

    @pytest.mark.parametrize("key", ["0", "12", "-1", " 3", "+4", "5abc"])
    def test_index_keys(self, key):
        """Test that keys parsed as integers are rejected."""
        with pytest.raises(InvalidPackageConfigurationError):
            validate_exports_object("/foo", {key: "./bar.js"})

    def test_non_index_keys(self):
        """Test that keys merely containing digits are accepted."""
        validate_exports_object("/foo", {"node18": "./a.js", "es2020": "./b.js"})


class TestPatternKeyValidation:
    """Tests for validate_pattern_key."""

    @pytest.mark.parametrize("key", ["./foo/", "./foo/*", "#foo/*.js"])
    def test_valid(self, key):
        """Test keys with one "*" or a trailing "/"."""
        validate_pattern_key(key)

    @pytest.mark.parametrize("key", ["./foo", "./*/*"])
    def test_invalid(self, key):
        """Test keys without a usable pattern."""
        with pytest.raises(AssertionError):
            validate_pattern_key(key)
