"""Filesystem capability for merch.

This package provides the storage interface the core consumes:
- base: FileSystem and PathOps protocols, FileSystemError
- local: LocalFileSystem backed by the real disk
- memory: MemoryFileSystem backed by a dict, used for analysis and tests
"""

from merch.fs.base import (
    FileSystem,
    FileSystemError,
    PathOps,
)
from merch.fs.local import (
    LocalFileSystem,
    NativePathOps,
)
from merch.fs.memory import (
    MemoryFileSystem,
    PosixPathOps,
)


__all__ = [
    "FileSystem",
    "FileSystemError",
    "PathOps",
    "LocalFileSystem",
    "NativePathOps",
    "MemoryFileSystem",
    "PosixPathOps",
]
