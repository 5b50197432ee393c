"""Disk-backed filesystem.

Contains:
- NativePathOps: PathOps on top of os.path
- LocalFileSystem: FileSystem on top of pathlib
"""

import os
from pathlib import Path


class NativePathOps:
    """Path utilities using the platform's path rules."""

    def resolve(self, base: str, path: str) -> str:
        return os.path.abspath(os.path.join(base, path))

    def dirname(self, path: str) -> str:
        return os.path.dirname(path)

    def extname(self, path: str) -> str:
        return os.path.splitext(path)[1]

    def basename(self, path: str, ext: str = "") -> str:
        name = os.path.basename(path)
        if ext and name.endswith(ext) and name != ext:
            name = name[: -len(ext)]
        return name

    def join(self, *parts: str) -> str:
        return os.path.join(*parts)

    def relative(self, start: str, path: str) -> str:
        return os.path.relpath(path, start)


class LocalFileSystem:
    """FileSystem implementation for the local disk.

    Text is read and written as UTF-8 with newline translation disabled, so
    "\\r\\n" survives a read/write cycle unchanged and hashes match the bytes
    on disk.
    """

    def __init__(self) -> None:
        self.path = NativePathOps()

    def read_file(self, file_path: str) -> str:
        with open(file_path, "r", encoding="utf-8", newline="") as f:
            return f.read()

    def write_file(self, file_path: str, content: str) -> None:
        Path(file_path).parent.mkdir(parents=True, exist_ok=True)
        with open(file_path, "w", encoding="utf-8", newline="") as f:
            f.write(content)

    def exists(self, file_path: str) -> bool:
        return Path(file_path).exists()

    def is_file(self, file_path: str) -> bool:
        return Path(file_path).is_file()

    def delete(self, file_path: str) -> None:
        path = Path(file_path)
        if path.exists():
            path.unlink()

    def rename(self, old_path: str, new_path: str) -> None:
        Path(new_path).parent.mkdir(parents=True, exist_ok=True)
        os.replace(old_path, new_path)

    def mkdir(self, dir_path: str) -> None:
        Path(dir_path).mkdir(parents=True, exist_ok=True)
