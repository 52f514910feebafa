"""Filesystem abstraction used by the bundle writer.

The writer only needs two primitives beyond ordinary write/close on the
returned handle: recursive directory creation and file creation.
"""

import io
import os
from abc import ABC, abstractmethod
from pathlib import Path, PurePosixPath
from typing import BinaryIO, Dict, List, Set


class FileSystem(ABC):
    """Minimal filesystem interface for bundle output."""

    @abstractmethod
    def mkdir_all(self, path: str | Path, mode: int) -> None:
        """Create ``path`` and any missing parents.

        Already-existing directories are not an error.
        """
        pass

    @abstractmethod
    def create(self, path: str | Path) -> BinaryIO:
        """Create (or truncate) ``path`` and return a writable binary handle."""
        pass


class OsFileSystem(FileSystem):
    """FileSystem backed by the local disk."""

    def mkdir_all(self, path: str | Path, mode: int) -> None:
        target = Path(path)
        if target.is_dir():
            return
        if target.exists():
            raise NotADirectoryError(f"not a directory: {target}")

        # os.makedirs applies mode only to the leaf, so walk the missing
        # ancestors explicitly.
        missing = []
        current = target
        while not current.exists():
            missing.append(current)
            if current.parent == current:
                break
            current = current.parent

        for directory in reversed(missing):
            try:
                directory.mkdir(mode=mode)
            except FileExistsError:
                if not directory.is_dir():
                    raise

    def create(self, path: str | Path) -> BinaryIO:
        return open(path, "wb")


class _MemoryFile(io.BytesIO):
    """Write handle that commits its content to a MemoryFileSystem on close."""

    def __init__(self, fs: "MemoryFileSystem", key: str):
        super().__init__()
        self._fs = fs
        self._key = key

    def flush(self) -> None:
        super().flush()
        if not self.closed:
            self._fs._files[self._key] = self.getvalue()

    def close(self) -> None:
        if not self.closed:
            self._fs._files[self._key] = self.getvalue()
        super().close()


class MemoryFileSystem(FileSystem):
    """In-memory FileSystem for tests and dry runs.

    Paths are normalized to POSIX strings. Creating a file requires its parent
    directory to exist, mirroring the local disk.
    """

    def __init__(self):
        self._dirs: Set[str] = {"/", "."}
        self._files: Dict[str, bytes] = {}
        self._modes: Dict[str, int] = {}

    @staticmethod
    def _key(path: str | Path) -> str:
        return str(PurePosixPath(os.fspath(path)))

    def mkdir_all(self, path: str | Path, mode: int) -> None:
        key = self._key(path)
        parts = PurePosixPath(key)
        for directory in reversed([parts, *parts.parents]):
            dir_key = str(directory)
            if dir_key in self._files:
                raise NotADirectoryError(f"not a directory: {dir_key}")
            if dir_key not in self._dirs:
                self._dirs.add(dir_key)
                self._modes[dir_key] = mode

    def create(self, path: str | Path) -> BinaryIO:
        key = self._key(path)
        parent = str(PurePosixPath(key).parent)
        if parent not in self._dirs:
            raise FileNotFoundError(f"no such file or directory: {parent}")
        if key in self._dirs:
            raise IsADirectoryError(f"is a directory: {key}")
        self._files[key] = b""
        return _MemoryFile(self, key)

    def exists(self, path: str | Path) -> bool:
        key = self._key(path)
        return key in self._files or key in self._dirs

    def is_dir(self, path: str | Path) -> bool:
        return self._key(path) in self._dirs

    def read_bytes(self, path: str | Path) -> bytes:
        key = self._key(path)
        if key not in self._files:
            raise FileNotFoundError(f"no such file: {key}")
        return self._files[key]

    def dir_mode(self, path: str | Path) -> int | None:
        return self._modes.get(self._key(path))

    def list_files(self) -> List[str]:
        """Return all file paths, sorted."""
        return sorted(self._files)
