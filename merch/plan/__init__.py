"""Planning and applying filesystem changes for merch documents.

This package provides:
- actions: WriteAction, RenameAction, DeleteAction, describe_action, run_action
- planner: build_actions, RenameResolver
- splitter: split_content, split_file
"""

from merch.plan.actions import (
    Action,
    DeleteAction,
    RenameAction,
    WriteAction,
    describe_action,
    run_action,
)
from merch.plan.planner import (
    RenameResolver,
    build_actions,
    temp_path_for,
)
from merch.plan.splitter import (
    Logger,
    split_content,
    split_file,
)


__all__ = [
    # Actions
    "Action",
    "WriteAction",
    "RenameAction",
    "DeleteAction",
    "describe_action",
    "run_action",
    # Planner
    "build_actions",
    "RenameResolver",
    "temp_path_for",
    # Splitter
    "Logger",
    "split_content",
    "split_file",
]
