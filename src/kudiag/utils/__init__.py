"""Filesystem helpers for bundle output."""

from .fs import FileSystem, MemoryFileSystem, OsFileSystem

__all__ = [
    "FileSystem",
    "MemoryFileSystem",
    "OsFileSystem",
]
