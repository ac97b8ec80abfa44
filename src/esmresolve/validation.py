"""Validators for export targets, exports objects and pattern keys."""

from __future__ import annotations

import re
import urllib.parse
from typing import Any, Dict, Iterable

from .errors import InvalidPackageConfigurationError
from .utils import get_character_count


_INVALID_SEGMENTS = frozenset({"", ".", "..", "node_modules"})

# Keys that JavaScript's parseInt() reads as a number are array index keys.
_INDEX_KEY_PATTERN = re.compile(r"^\s*[+-]?\d")


def is_valid_path_segments(path_segments: Iterable[str]) -> bool:
    """Check that no segment is empty, ".", ".." or "node_modules"."""
    return not any(
        segment in _INVALID_SEGMENTS
        or urllib.parse.unquote(segment) in _INVALID_SEGMENTS
        for segment in path_segments
    )


def is_valid_path(path: str) -> bool:
    """Check a target path split on both "/" and "\\", case-insensitively."""
    lower_case_path = path.lower()

    return (
        is_valid_path_segments(lower_case_path.split("/"))
        and is_valid_path_segments(lower_case_path.split("\\"))
    )


def validate_exports_object(package_url: str, exports: Dict[str, Any]) -> None:
    """Validate the keys of an exports (or condition) object.

    Raises:
        InvalidPackageConfigurationError: If the object mixes keys starting
            with "." and keys that do not, or has array index keys.
    """
    starts_with_dot = False
    starts_without_dot = False

    for key in exports:
        if key.startswith("."):
            starts_with_dot = True
        else:
            starts_without_dot = True

        if starts_with_dot and starts_without_dot:
            raise InvalidPackageConfigurationError(package_url)

        # Index keys are checked here rather than in a second pass over
        # the keys.
        if _INDEX_KEY_PATTERN.match(key):
            raise InvalidPackageConfigurationError(package_url)


def validate_pattern_key(key: str) -> None:
    """Assert that a pattern key ends with "/" or contains exactly one "*"."""
    assert key.endswith("/") or get_character_count(key, "*") == 1, (
        f"Invalid pattern key: {key}"
    )
