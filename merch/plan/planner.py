"""Action planner: diff existing and updated file records.

Contains:
- build_actions: Compute the ordered write/rename/delete actions for a document
- RenameResolver: Orders pending renames, breaking cycles with temp paths
"""

from dataclasses import dataclass
from typing import Optional

from merch.document.models import ExistingFileInfo, OffsetRange, ParsedMerchDoc, UpdatedFileInfo
from merch.exceptions import HashMismatchError, PlanInvariantError
from merch.fs.base import FileSystem, PathOps
from merch.hashing import compute_hash, normalize_line_endings
from merch.plan.actions import Action, DeleteAction, RenameAction, WriteAction


@dataclass
class PendingRename:
    """A rename waiting to be ordered."""

    new_path: str
    source: Optional[OffsetRange] = None


def temp_path_for(path_ops: PathOps, target: str, attempt: int = 0) -> str:
    """Temporary name used to break a rename cycle.

    The first attempt is <dir>/<name>_temp<ext>; later attempts append a
    counter: <name>_temp1<ext>, <name>_temp2<ext>, ...
    """
    ext = path_ops.extname(target)
    name = path_ops.basename(target, ext)
    counter = str(attempt) if attempt else ""
    return path_ops.join(path_ops.dirname(target), f"{name}_temp{counter}{ext}")


class RenameResolver:
    """Emit pending renames so no rename claims a path that is still occupied.

    Renames form a graph old -> new. Each walk starts at the oldest pending
    source and recurses into the target first, so the deepest rename in a
    chain is emitted first. When the walk reaches a path it already visited,
    the current source is moved to a temp path instead, and the temp path is
    re-registered as the source for the original target. A temp path never
    reuses a file on disk, a pending source or target, or an earlier temp.
    """

    def __init__(self, fs: FileSystem):
        self.fs = fs
        self.path_ops = fs.path
        # Insertion-ordered worklist: old path -> pending rename
        self.pending: dict[str, PendingRename] = {}
        self._claimed: set[str] = set()

    def _is_taken(self, path: str) -> bool:
        if path in self._claimed or path in self.pending:
            return True
        if any(rename.new_path == path for rename in self.pending.values()):
            return True
        return self.fs.exists(path)

    def _free_temp_path(self, target: str) -> str:
        attempt = 0
        temp_path = temp_path_for(self.path_ops, target)
        while self._is_taken(temp_path):
            attempt += 1
            temp_path = temp_path_for(self.path_ops, target, attempt)
        self._claimed.add(temp_path)
        return temp_path

    def add(self, old_path: str, new_path: str, source: Optional[OffsetRange] = None) -> None:
        self.pending[old_path] = PendingRename(new_path=new_path, source=source)

    def resolve(self) -> list[RenameAction]:
        actions: list[RenameAction] = []
        while self.pending:
            first = next(iter(self.pending))
            self._walk(first, set(), actions)
        return actions

    def _walk(self, old_path: str, visited: set[str], actions: list[RenameAction]) -> None:
        rename = self.pending.get(old_path)
        if rename is None:
            return

        if old_path in visited:
            raise PlanInvariantError(f"Rename source visited twice in one walk: {old_path}")
        visited.add(old_path)

        target = rename.new_path
        if target in visited:
            # Cycle: park this file, finish the rest of the cycle, then move it in
            temp_path = self._free_temp_path(target)
            self.pending[temp_path] = PendingRename(new_path=target, source=rename.source)
            actions.append(RenameAction(old_path=old_path, new_path=temp_path, source=rename.source))
        else:
            self._walk(target, visited, actions)
            actions.append(RenameAction(old_path=old_path, new_path=target, source=rename.source))

        del self.pending[old_path]


def _is_folded_rename(updated: Optional[UpdatedFileInfo], old_path: str, new_path: Optional[str]) -> bool:
    return updated is not None and updated.content is None and new_path != old_path


def _verify_hash(existing: ExistingFileInfo, old_path: str, fs: FileSystem) -> None:
    """Raise HashMismatchError if the file on disk is not what the document saw."""
    if not (fs.exists(old_path) and fs.is_file(old_path)):
        raise HashMismatchError(existing.path)
    if compute_hash(fs.read_file(old_path)) != existing.hash:
        raise HashMismatchError(existing.path)


def _body(content: str, eol: Optional[str]) -> str:
    return normalize_line_endings(content, eol) if eol else content


def build_actions(doc: ParsedMerchDoc, fs: FileSystem, check_hash: bool) -> list[Action]:
    """Compute the actions that bring the filesystem in line with the document.

    Order: writes and deletes for existing files (in document order), then
    renames in dependency order, then writes for files that did not exist
    when the document was built. Content writes target the old path so they
    compose with the rename that follows.

    Args:
        doc: The parsed document.
        fs: Filesystem used for path resolution and hash verification.
        check_hash: Verify that tracked files still match their stored hash.

    Returns:
        Ordered list of actions.

    Raises:
        HashMismatchError: If check_hash is set and a tracked file changed
            on disk or disappeared.
        PlanInvariantError: If the rename walk revisits a path.
    """
    actions: list[Action] = []
    renames = RenameResolver(fs)
    base_path = doc.base_path

    for existing in doc.existing_files:
        old_path = fs.path.resolve(base_path, existing.path)
        updated = doc.updated_files.get(existing.idx)
        new_path = fs.path.resolve(base_path, updated.new_path) if updated else None

        # Folded renames are trusted: their content was never shown for editing
        if check_hash and not _is_folded_rename(updated, old_path, new_path):
            _verify_hash(existing, old_path, fs)

        if updated is None:
            actions.append(DeleteAction(path=old_path, source=existing.header_range))
            continue

        if new_path != old_path:
            renames.add(old_path, new_path, updated.header_range)

        if updated.content is not None:
            body = _body(updated.content, updated.eol)
            if compute_hash(body) != existing.hash:
                actions.append(WriteAction(path=old_path, content=body, source=updated.header_range))

    actions.extend(renames.resolve())

    existing_idx = {existing.idx for existing in doc.existing_files}
    for idx, updated in doc.updated_files.items():
        if idx in existing_idx or updated.content is None:
            continue
        actions.append(
            WriteAction(
                path=fs.path.resolve(base_path, updated.new_path),
                content=_body(updated.content, updated.eol),
                source=updated.header_range,
            )
        )

    for new_file in doc.new_files:
        if new_file.content is None:
            continue
        actions.append(
            WriteAction(
                path=fs.path.resolve(base_path, new_file.new_path),
                content=_body(new_file.content, new_file.eol),
                source=new_file.header_range,
            )
        )

    return actions
