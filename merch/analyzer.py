"""Read-only status annotations for a parsed merch document.

Contains:
- FileStatus: A message anchored to a range of the document
- analyze_merch_doc: Derive statuses from a parsed document
- analyze_merch_text: Parse and analyze, never raising
"""

from collections import defaultdict
from dataclasses import dataclass
from typing import Literal, Optional

from merch.document.models import FileBlock, OffsetRange, ParsedMerchDoc
from merch.document.parser import parse_merch_doc
from merch.exceptions import MerchError
from merch.fs.memory import MemoryFileSystem
from merch.hashing import compute_hash, normalize_line_endings
from merch.plan.actions import Action, DeleteAction, WriteAction
from merch.plan.planner import build_actions

StatusType = Literal["info", "warning", "error", "success"]

NEW_FILE = "New File"
CONTENT_UPDATED = "Content updated"
DELETED = "Deleted"
NO_OP = "No-op: deleted and re-created with identical content"


@dataclass
class FileStatus:
    """A presentation hint for one range of the document."""

    range: OffsetRange
    message: str
    type: StatusType


def _block_hash(block: FileBlock) -> Optional[str]:
    if block.content is None:
        return None
    body = block.content
    if block.eol:
        body = normalize_line_endings(body, block.eol)
    return compute_hash(body)


def _action_statuses(doc: ParsedMerchDoc, actions: list[Action]) -> list[FileStatus]:
    tracked_ranges = set()
    for existing in doc.existing_files:
        updated = doc.updated_files.get(existing.idx)
        if updated is not None:
            tracked_ranges.add(updated.header_range)

    statuses = []
    for action in actions:
        if action.source is None:
            continue
        if isinstance(action, WriteAction):
            message = CONTENT_UPDATED if action.source in tracked_ranges else NEW_FILE
            statuses.append(FileStatus(action.source, message, "success"))
        elif isinstance(action, DeleteAction):
            statuses.append(FileStatus(action.source, DELETED, "warning"))
    return statuses


def _rename_statuses(doc: ParsedMerchDoc, fs: MemoryFileSystem) -> list[FileStatus]:
    statuses = []
    for existing in doc.existing_files:
        updated = doc.updated_files.get(existing.idx)
        if updated is None:
            continue
        old_path = fs.path.resolve(doc.base_path, existing.path)
        new_path = fs.path.resolve(doc.base_path, updated.new_path)
        if old_path != new_path:
            statuses.append(FileStatus(updated.header_range, f"Renamed from {existing.path}", "info"))
            statuses.append(FileStatus(existing.header_range, f"Renamed to {updated.new_path}", "info"))
    return statuses


def _conflict_statuses(doc: ParsedMerchDoc, fs: MemoryFileSystem) -> list[FileStatus]:
    targets: dict[str, list[FileBlock]] = defaultdict(list)
    for block in doc.file_blocks():
        targets[fs.path.resolve(doc.base_path, block.new_path)].append(block)

    statuses = []
    for blocks in targets.values():
        if len(blocks) < 2:
            continue
        message = f"Conflict: {len(blocks)} files target {blocks[0].new_path}"
        for block in blocks:
            statuses.append(FileStatus(block.header_range, message, "error"))
    return statuses


def _no_op_statuses(doc: ParsedMerchDoc, fs: MemoryFileSystem) -> list[FileStatus]:
    """Deleted files that come back as new files with the same content."""
    new_by_path: dict[str, list] = defaultdict(list)
    for new_file in doc.new_files:
        new_by_path[fs.path.resolve(doc.base_path, new_file.new_path)].append(new_file)

    statuses = []
    for existing in doc.existing_files:
        if existing.idx in doc.updated_files:
            continue
        old_path = fs.path.resolve(doc.base_path, existing.path)
        for new_file in new_by_path.get(old_path, []):
            if _block_hash(new_file) == existing.hash:
                statuses.append(FileStatus(existing.header_range, NO_OP, "info"))
                statuses.append(FileStatus(new_file.header_range, NO_OP, "info"))
    return statuses


def analyze_merch_doc(doc: ParsedMerchDoc) -> list[FileStatus]:
    """Describe what splitting the document would do, without touching disk.

    The planner runs against an empty in-memory filesystem with hash checks
    off, so only the document itself drives the result.

    Args:
        doc: The parsed document.

    Returns:
        Statuses for actions, renames, conflicts, no-ops and parse diagnostics.
    """
    fs = MemoryFileSystem()

    statuses: list[FileStatus] = []
    try:
        actions = build_actions(doc, fs, check_hash=False)
    except MerchError as e:
        actions = []
        statuses.append(FileStatus(OffsetRange(0, 0), f"Could not plan actions: {e}", "error"))

    statuses.extend(_action_statuses(doc, actions))
    statuses.extend(_rename_statuses(doc, fs))
    statuses.extend(_conflict_statuses(doc, fs))
    statuses.extend(_no_op_statuses(doc, fs))

    for diagnostic in doc.diagnostics:
        statuses.append(FileStatus(diagnostic.range, diagnostic.message, diagnostic.severity))

    return statuses


def analyze_merch_text(content: str) -> list[FileStatus]:
    """Parse and analyze a document; parse failures become a single status."""
    try:
        doc = parse_merch_doc(content)
    except MerchError as e:
        return [FileStatus(OffsetRange(0, 0), str(e), "error")]
    return analyze_merch_doc(doc)
