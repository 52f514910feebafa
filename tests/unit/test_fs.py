"""Unit tests for the filesystem abstraction."""

import os
import stat
from pathlib import Path

import pytest

from kudiag.utils.fs import MemoryFileSystem, OsFileSystem


class TestOsFileSystem:
    """Test the local disk implementation."""

    def test_mkdir_all_creates_parents_with_mode(self, tmp_path):
        """Every missing directory gets the requested mode."""
        old_umask = os.umask(0o022)
        try:
            fs = OsFileSystem()
            target = tmp_path / "diag" / "kudo" / "pod_web-1"
            fs.mkdir_all(target, 0o700)
        finally:
            os.umask(old_umask)

        assert target.is_dir()
        for directory in (tmp_path / "diag", tmp_path / "diag" / "kudo", target):
            assert stat.S_IMODE(directory.stat().st_mode) == 0o700

    def test_mkdir_all_is_idempotent(self, tmp_path):
        """Already-existing directories are not an error."""
        fs = OsFileSystem()
        fs.mkdir_all(tmp_path / "diag", 0o700)
        fs.mkdir_all(tmp_path / "diag", 0o700)
        assert (tmp_path / "diag").is_dir()

    def test_mkdir_all_over_file_fails(self, tmp_path):
        """A file in the way raises an OSError."""
        (tmp_path / "diag").write_text("not a directory")
        with pytest.raises(OSError):
            OsFileSystem().mkdir_all(tmp_path / "diag" / "sub", 0o700)

    def test_mkdir_all_target_is_file(self, tmp_path):
        """A regular file at the target path is not treated as a directory."""
        (tmp_path / "diag").write_text("not a directory")
        with pytest.raises(NotADirectoryError):
            OsFileSystem().mkdir_all(tmp_path / "diag", 0o700)

    def test_create_writes_bytes(self, tmp_path):
        """Created handles write binary data."""
        with OsFileSystem().create(tmp_path / "out.err") as handle:
            handle.write(b"boom")
        assert (tmp_path / "out.err").read_bytes() == b"boom"


class TestMemoryFileSystem:
    """Test the in-memory implementation."""

    def test_create_requires_parent(self):
        """Creating a file without its directory fails like the local disk."""
        fs = MemoryFileSystem()
        with pytest.raises(FileNotFoundError):
            fs.create("diag/web-1.err")

    def test_write_and_read(self):
        """Content is visible once the handle is closed."""
        fs = MemoryFileSystem()
        fs.mkdir_all("diag", 0o700)
        with fs.create(Path("diag") / "web-1.err") as handle:
            handle.write(b"boom")

        assert fs.read_bytes("diag/web-1.err") == b"boom"
        assert fs.list_files() == ["diag/web-1.err"]

    def test_mkdir_all_records_mode(self):
        """Each created directory remembers its mode."""
        fs = MemoryFileSystem()
        fs.mkdir_all("diag/kudo", 0o700)
        assert fs.is_dir("diag")
        assert fs.dir_mode("diag/kudo") == 0o700

    def test_mkdir_all_over_file_fails(self):
        """A file in the way raises NotADirectoryError."""
        fs = MemoryFileSystem()
        fs.mkdir_all("diag", 0o700)
        fs.create("diag/pod_web-1").close()
        with pytest.raises(NotADirectoryError):
            fs.mkdir_all("diag/pod_web-1", 0o700)

    def test_create_over_directory_fails(self):
        """A directory cannot be opened as a file."""
        fs = MemoryFileSystem()
        fs.mkdir_all("diag/pod_web-1", 0o700)
        with pytest.raises(IsADirectoryError):
            fs.create("diag/pod_web-1")
