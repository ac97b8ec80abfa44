"""File system abstraction used by the resolver for all disk access.

The resolver only ever asks four questions of the file system, so callers
can plug in anything that answers them: the real disk, a compiler host, or
the in-memory implementation used in tests.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Dict, Mapping, Protocol, Set, Union


class FileSystemInterface(Protocol):
    """Protocol for the file system operations the resolver needs."""

    def is_file(self, path: str) -> bool:
        """Return True if ``path`` is an existing regular file."""
        ...

    def is_directory(self, path: str) -> bool:
        """Return True if ``path`` is an existing directory."""
        ...

    def read_file(self, path: str) -> str:
        """Read a file as UTF-8 text.

        Raises:
            OSError: If the file cannot be read.
        """
        ...

    def read_bytes(self, path: str, length: int) -> bytes:
        """Read up to ``length`` bytes from the start of a file.

        Raises:
            OSError: If the file cannot be read.
        """
        ...


class DefaultFileSystem:
    """File system backed by the real disk."""

    def is_file(self, path: str) -> bool:
        return os.path.isfile(path)

    def is_directory(self, path: str) -> bool:
        return os.path.isdir(path)

    def read_file(self, path: str) -> str:
        with open(path, "r", encoding="utf-8") as f:
            return f.read()

    def read_bytes(self, path: str, length: int) -> bytes:
        with open(path, "rb") as f:
            return f.read(length)


DEFAULT_FILE_SYSTEM = DefaultFileSystem()


@dataclass(frozen=True)
class Directory:
    """Marker for an explicit (possibly empty) directory in a MemoryFileSystem."""


DIRECTORY = Directory()

MemoryEntry = Union[str, bytes, Directory]


class MemoryFileSystem:
    """Read-only in-memory file system.

    Keys are absolute paths. String values are UTF-8 text files, bytes values
    are binary files, and ``DIRECTORY`` marks an explicit directory. Every
    ancestor of a declared entry is an implicit directory.
    """

    def __init__(self, entries: Mapping[str, MemoryEntry] | None = None):
        self._files: Dict[str, bytes] = {}
        self._directories: Set[str] = set()

        for path, value in (entries or {}).items():
            normalized = os.path.normpath(path)
            if isinstance(value, Directory):
                self._add_directory(normalized)
                continue
            if isinstance(value, str):
                value = value.encode("utf-8")
            self._files[normalized] = bytes(value)
            self._add_directory(os.path.dirname(normalized))

    def _add_directory(self, path: str) -> None:
        while path and path not in self._directories:
            self._directories.add(path)
            parent = os.path.dirname(path)
            if parent == path:
                break
            path = parent

    def _read(self, path: str) -> bytes:
        normalized = os.path.normpath(path)
        if normalized in self._files:
            return self._files[normalized]
        if normalized in self._directories:
            raise IsADirectoryError(f"Cannot read directory: {path}")
        raise FileNotFoundError(f"File not found: {path}")

    def is_file(self, path: str) -> bool:
        return os.path.normpath(path) in self._files

    def is_directory(self, path: str) -> bool:
        normalized = os.path.normpath(path)
        return normalized in self._directories and normalized not in self._files

    def read_file(self, path: str) -> str:
        return self._read(path).decode("utf-8")

    def read_bytes(self, path: str, length: int) -> bytes:
        return self._read(path)[:length]
