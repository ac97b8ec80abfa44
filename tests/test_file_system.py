"""Tests for the file system implementations."""

import pytest

from esmresolve import DIRECTORY, DefaultFileSystem, MemoryFileSystem


class TestDefaultFileSystem:
    """Tests for DefaultFileSystem against a temporary directory."""

    def setup_method(self):
        """Set up the file system under test."""
        self.fs = DefaultFileSystem()

    def test_is_file(self, tmp_path):
        """Test file detection."""
        path = tmp_path / "file.js"
        path.write_text("x", encoding="utf-8")
        assert self.fs.is_file(str(path)) is True
        assert self.fs.is_file(str(tmp_path)) is False
        assert self.fs.is_file(str(tmp_path / "missing.js")) is False

    def test_is_directory(self, tmp_path):
        """Test directory detection."""
        (tmp_path / "file.js").write_text("x", encoding="utf-8")
        assert self.fs.is_directory(str(tmp_path)) is True
        assert self.fs.is_directory(str(tmp_path / "file.js")) is False
        assert self.fs.is_directory(str(tmp_path / "missing")) is False

    def test_read_file(self, tmp_path):
        """Test reading text."""
        path = tmp_path / "package.json"
        path.write_text('{"name": "foo"}', encoding="utf-8")
        assert self.fs.read_file(str(path)) == '{"name": "foo"}'

    def test_read_bytes(self, tmp_path):
        """Test reading a prefix of a binary file."""
        path = tmp_path / "module"
        path.write_bytes(b"\x00asm\x01\x00\x00\x00")
        assert self.fs.read_bytes(str(path), 4) == b"\x00asm"

    def test_read_missing_file(self, tmp_path):
        """Test that reading a missing file raises."""
        with pytest.raises(FileNotFoundError):
            self.fs.read_file(str(tmp_path / "missing.js"))


class TestMemoryFileSystem:
    """Tests for MemoryFileSystem."""

    def setup_method(self):
        """Set up an in-memory tree."""
        self.fs = MemoryFileSystem({
            "/foo/bar.js": "console.log('hello!');",
            "/foo/module": b"\x00asm\x01",
            "/empty": DIRECTORY,
        })

    def test_files(self):
        """Test declared files."""
        assert self.fs.is_file("/foo/bar.js") is True
        assert self.fs.is_file("/foo/./bar.js") is True
        assert self.fs.is_file("/foo") is False

    def test_directories(self):
        """Test explicit and implicit directories."""
        assert self.fs.is_directory("/empty") is True
        assert self.fs.is_directory("/foo") is True
        assert self.fs.is_directory("/") is True
        assert self.fs.is_directory("/foo/bar.js") is False
        assert self.fs.is_directory("/missing") is False

    def test_read_file(self):
        """Test reading text and binary content."""
        assert self.fs.read_file("/foo/bar.js") == "console.log('hello!');"
        assert self.fs.read_bytes("/foo/module", 4) == b"\x00asm"

    def test_read_errors(self):
        """Test reading directories and missing files."""
        with pytest.raises(IsADirectoryError):
            self.fs.read_file("/foo")
        with pytest.raises(FileNotFoundError):
            self.fs.read_file("/foo/missing.js")

    def test_empty(self):
        """Test an empty file system."""
        fs = MemoryFileSystem()
        assert fs.is_file("/foo.js") is False
        assert fs.is_directory("/foo") is False
