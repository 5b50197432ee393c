"""Filesystem actions produced by the planner.

Contains:
- WriteAction, RenameAction, DeleteAction: The three action kinds
- describe_action: Human-readable one-line description
- run_action: Apply one action to a filesystem
"""

from dataclasses import dataclass
from typing import ClassVar, Optional, Union

from merch.document.models import OffsetRange
from merch.fs.base import FileSystem


@dataclass
class WriteAction:
    """Write content to a path, creating parent directories."""

    kind: ClassVar[str] = "write"

    path: str
    content: str
    source: Optional[OffsetRange] = None  # Header that caused the action


@dataclass
class RenameAction:
    """Move a file to a new path."""

    kind: ClassVar[str] = "rename"

    old_path: str
    new_path: str
    source: Optional[OffsetRange] = None


@dataclass
class DeleteAction:
    """Delete a file."""

    kind: ClassVar[str] = "delete"

    path: str
    source: Optional[OffsetRange] = None


Action = Union[WriteAction, RenameAction, DeleteAction]


def describe_action(action: Action) -> str:
    """Describe an action for logs and dry runs."""
    if isinstance(action, WriteAction):
        return f'Update "{action.path}"'
    if isinstance(action, RenameAction):
        return f'Rename "{action.old_path}" to "{action.new_path}"'
    return f'Delete "{action.path}"'


def run_action(action: Action, fs: FileSystem) -> None:
    """Apply a single action.

    Errors from the filesystem propagate unchanged.
    """
    if isinstance(action, WriteAction):
        fs.write_file(action.path, action.content)
    elif isinstance(action, RenameAction):
        fs.rename(action.old_path, action.new_path)
    else:
        fs.delete(action.path)
