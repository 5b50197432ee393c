"""Filesystem and path-utility interfaces.

The core never touches storage directly; it only calls these methods.
"""

from typing import Protocol, runtime_checkable


class FileSystemError(Exception):
    """Raised by filesystem backends when an operation cannot be performed."""

    pass


@runtime_checkable
class PathOps(Protocol):
    def resolve(self, base: str, path: str) -> str:
        ...

    def dirname(self, path: str) -> str:
        ...

    def extname(self, path: str) -> str:
        ...

    def basename(self, path: str, ext: str = "") -> str:
        ...

    def join(self, *parts: str) -> str:
        ...

    def relative(self, start: str, path: str) -> str:
        ...


@runtime_checkable
class FileSystem(Protocol):
    path: PathOps

    def read_file(self, file_path: str) -> str:
        ...

    def write_file(self, file_path: str, content: str) -> None:
        ...

    def exists(self, file_path: str) -> bool:
        ...

    def is_file(self, file_path: str) -> bool:
        ...

    def delete(self, file_path: str) -> None:
        ...

    def rename(self, old_path: str, new_path: str) -> None:
        ...

    def mkdir(self, dir_path: str) -> None:
        ...
