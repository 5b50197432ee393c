"""Split a merch document back into files.

Contains:
- Logger: Type of the caller-supplied message sink
- split_content: Plan and (optionally) apply a document's actions
- split_file: Same, reading the document from the filesystem first
"""

from typing import Callable

from merch.document.parser import parse_merch_doc
from merch.fs.base import FileSystem
from merch.plan.actions import Action, describe_action, run_action
from merch.plan.planner import build_actions

Logger = Callable[[str], None]


def split_content(
    content: str,
    dry_run: bool,
    fs: FileSystem,
    logger: Logger,
    check_hash: bool = True,
) -> list[Action]:
    """Apply the changes described by a merch document.

    Actions run strictly in planner order. The first failure propagates and
    leaves earlier actions applied.

    Args:
        content: The document text.
        dry_run: Only report the actions.
        fs: Filesystem to verify against and modify.
        logger: Receives one description per action.
        check_hash: Refuse to touch files that changed on disk.

    Returns:
        The planned actions.

    Raises:
        MissingBasePathError: If the document has no setup header.
        HashMismatchError: If check_hash is set and a file changed on disk.
    """
    doc = parse_merch_doc(content)
    actions = build_actions(doc, fs, check_hash)

    for action in actions:
        logger(describe_action(action))
        if not dry_run:
            run_action(action, fs)

    return actions


def split_file(
    file_path: str,
    dry_run: bool,
    fs: FileSystem,
    logger: Logger,
    check_hash: bool = True,
) -> list[Action]:
    """Read a merch document through `fs` and split it."""
    content = fs.read_file(file_path)
    return split_content(content, dry_run, fs, logger, check_hash)
