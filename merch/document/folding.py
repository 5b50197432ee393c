"""Fold and unfold file blocks in a merch document.

A folded block keeps its header but carries no body; its content is then
treated as unchanged from disk. Folding only rewrites the block's own text,
so every other block keeps its meaning.

Contains:
- FoldResult, UnfoldResult, FileAtOffset: Result types
- get_file_at_offset: Find the file block whose header contains an offset
- is_folded: Whether a block has no body
- fold_file: Remove the body of an existing file's block
- unfold_file: Restore the body of a folded block from disk
- fold_new_file: Remove a new file's block entirely
"""

from dataclasses import dataclass
from typing import Literal, Optional

from merch.document.models import FileBlock, NewFileInfo, ParsedMerchDoc, UpdatedFileInfo
from merch.document.parser import parse_merch_doc, trim_line_break
from merch.exceptions import UnfoldError
from merch.fs.base import FileSystem
from merch.hashing import LF, compute_hash, detect_line_ending, normalize_line_endings


@dataclass
class FoldResult:
    """Outcome of folding a block."""

    new_content: str
    had_modified_content: bool  # The discarded body differed from the stored hash


@dataclass
class UnfoldResult:
    """Outcome of unfolding a block."""

    new_content: str


@dataclass
class FileAtOffset:
    """A file block located by offset."""

    kind: Literal["updated", "new"]
    file: FileBlock


def get_file_at_offset(content: str, offset: int) -> Optional[FileAtOffset]:
    """Identify the file block whose header contains the offset.

    Args:
        content: The document text.
        offset: Character offset, e.g. the editor cursor.

    Returns:
        FileAtOffset, or None if the offset is not on a file header.
    """
    doc = parse_merch_doc(content)

    for updated in doc.updated_files.values():
        if updated.header_range.contains(offset):
            return FileAtOffset(kind="updated", file=updated)

    for new_file in doc.new_files:
        if new_file.header_range.contains(offset):
            return FileAtOffset(kind="new", file=new_file)

    return None


def is_folded(file: FileBlock) -> bool:
    """Check whether a file block carries no body."""
    return file.content is None


def _find_content_end(content: str, file: FileBlock, doc: ParsedMerchDoc) -> int:
    """End offset of a block's body: before the next header's line break."""
    later_headers = [
        block.header_range.start
        for block in doc.file_blocks()
        if block.header_range.start > file.header_range.start
    ]
    end = min(later_headers) if later_headers else len(content)
    return max(trim_line_break(content, end), file.header_range.end_exclusive)


def _has_modified_content(file: UpdatedFileInfo, doc: ParsedMerchDoc) -> bool:
    existing = doc.find_existing(file.idx)
    if existing is None or file.content is None:
        return False
    body = file.content
    if file.eol:
        body = normalize_line_endings(body, file.eol)
    return compute_hash(body) != existing.hash


def fold_file(
    content: str,
    file: UpdatedFileInfo,
    fs: FileSystem,
    base_path: str,
) -> FoldResult:
    """Fold a file block by removing its body.

    The header's trailing colon and the body are removed; a comment suffix
    after the colon is kept.

    Args:
        content: The document text.
        file: The block to fold, as parsed from `content`.
        fs: Filesystem (unused for folding, kept for symmetry with unfold).
        base_path: The document's base path.

    Returns:
        FoldResult with the new document text and whether the discarded
        body differed from the file's stored hash.
    """
    if is_folded(file):
        return FoldResult(new_content=content, had_modified_content=False)

    doc = parse_merch_doc(content)
    had_modified_content = _has_modified_content(file, doc)

    header = file.header_range
    colon = content.rfind(":", header.start, file.marker_offset)
    if colon == -1:
        return FoldResult(new_content=content, had_modified_content=False)

    content_end = _find_content_end(content, file, doc)
    new_content = (
        content[:colon]
        + content[file.marker_offset:header.end_exclusive]
        + content[content_end:]
    )
    return FoldResult(new_content=new_content, had_modified_content=had_modified_content)


def unfold_file(
    content: str,
    file: UpdatedFileInfo,
    fs: FileSystem,
    base_path: str,
) -> UnfoldResult:
    """Unfold a file block by reading its content from disk.

    Args:
        content: The document text.
        file: The folded block, as parsed from `content`.
        fs: Filesystem to read the file from.
        base_path: The document's base path.

    Returns:
        UnfoldResult with the new document text.

    Raises:
        UnfoldError: If the block has no matching existing-file record.
    """
    if not is_folded(file):
        return UnfoldResult(new_content=content)

    doc = parse_merch_doc(content)
    existing = doc.find_existing(file.idx)
    if existing is None:
        raise UnfoldError(f"Cannot unfold: no existing-file found for idx {file.idx}")

    file_content = fs.read_file(fs.path.resolve(base_path, existing.path))
    le = detect_line_ending(content) or LF
    body = normalize_line_endings(file_content, le)

    header_end = file.header_range.end_exclusive
    remaining = content[header_end:]
    needs_trailing_newline = not remaining.startswith(("\n", "\r\n"))

    new_content = (
        content[:file.marker_offset]
        + ":"
        + content[file.marker_offset:header_end]
        + le
        + body
        + (le if needs_trailing_newline else "")
        + remaining
    )
    return UnfoldResult(new_content=new_content)


def fold_new_file(content: str, file: NewFileInfo) -> FoldResult:
    """Remove a new file's block, header included.

    New files have nothing on disk to fold back to, so the block goes away.

    Returns:
        FoldResult; had_modified_content is True whenever a body was dropped.
    """
    if is_folded(file):
        return FoldResult(new_content=content, had_modified_content=False)

    doc = parse_merch_doc(content)
    content_end = _find_content_end(content, file, doc)
    start = trim_line_break(content, file.header_range.start)

    return FoldResult(
        new_content=content[:start] + content[content_end:],
        had_modified_content=True,
    )
