"""Shared fixtures for esmresolve tests."""

import json

import pytest

from esmresolve.constants import Constants
from esmresolve.file_system import MemoryFileSystem
from esmresolve.resolver import DEFAULT_CACHE


@pytest.fixture(autouse=True)
def _isolate_environment(monkeypatch):
    """Keep tests independent of the caller's environment and of each other."""
    for name in (
        Constants.ENV_NODE_OPTIONS,
        Constants.ENV_CONFIG,
        Constants.ENV_CONDITIONS,
        Constants.ENV_EXPERIMENTAL_FLAGS,
        Constants.ENV_DISABLE_CACHE,
        Constants.ENV_LOG_LEVEL,
    ):
        monkeypatch.delenv(name, raising=False)
    DEFAULT_CACHE.clear()
    yield
    DEFAULT_CACHE.clear()


def make_file_system(entries=None):
    """Build a MemoryFileSystem, serializing dict and None values as JSON files."""
    prepared = {}
    for path, value in (entries or {}).items():
        if isinstance(value, (dict, list)) or value is None:
            value = json.dumps(value)
        prepared[path] = value
    return MemoryFileSystem(prepared)


@pytest.fixture
def make_fs():
    return make_file_system
