"""In-memory filesystem.

Contains:
- PosixPathOps: PathOps using POSIX rules regardless of platform
- MemoryFileSystem: FileSystem over a flat dict of path -> content
"""

import posixpath
import re
from typing import Optional

from merch.fs.base import FileSystemError

_DRIVE_RE = re.compile(r"^[a-zA-Z]:")


class PosixPathOps:
    """Path utilities with POSIX semantics."""

    def resolve(self, base: str, path: str) -> str:
        return posixpath.abspath(posixpath.join(base, path))

    def dirname(self, path: str) -> str:
        return posixpath.dirname(path)

    def extname(self, path: str) -> str:
        return posixpath.splitext(path)[1]

    def basename(self, path: str, ext: str = "") -> str:
        name = posixpath.basename(path)
        if ext and name.endswith(ext) and name != ext:
            name = name[: -len(ext)]
        return name

    def join(self, *parts: str) -> str:
        return posixpath.join(*parts)

    def relative(self, start: str, path: str) -> str:
        return posixpath.relpath(path, start)


class MemoryFileSystem:
    """Volatile FileSystem keeping every file in a dict.

    Directories are implicit; mkdir is a no-op.
    """

    def __init__(self, initial_files: Optional[dict[str, str]] = None):
        self.path = PosixPathOps()
        self._files: dict[str, str] = {}
        for file_path, content in (initial_files or {}).items():
            self._files[self._normalize(file_path)] = content

    @staticmethod
    def _normalize(file_path: str) -> str:
        return _DRIVE_RE.sub("", file_path.replace("\\", "/"))

    def read_file(self, file_path: str) -> str:
        content = self._files.get(self._normalize(file_path))
        if content is None:
            raise FileSystemError(f"File not found: {file_path}")
        return content

    def write_file(self, file_path: str, content: str) -> None:
        self._files[self._normalize(file_path)] = content

    def exists(self, file_path: str) -> bool:
        return self._normalize(file_path) in self._files

    def is_file(self, file_path: str) -> bool:
        return self._normalize(file_path) in self._files

    def delete(self, file_path: str) -> None:
        self._files.pop(self._normalize(file_path), None)

    def rename(self, old_path: str, new_path: str) -> None:
        old_key = self._normalize(old_path)
        if old_key not in self._files:
            raise FileSystemError(f"File not found: {old_path}")
        content = self._files.pop(old_key)
        self._files[self._normalize(new_path)] = content

    def mkdir(self, dir_path: str) -> None:
        pass

    def to_dict(self) -> dict[str, str]:
        """Return a snapshot of all files, sorted by path."""
        return {key: self._files[key] for key in sorted(self._files)}
