"""Merch document builder.

Contains:
- Writer: Protocol for the output sink
- merge_files: Serialize a list of files into a merch document
- merge_to_string: Same, returning the document text
"""

import io
from typing import Optional, Protocol, Sequence

from merch.document.models import (
    COMMAND_EXISTING_FILE,
    COMMAND_FILE,
    COMMAND_SETUP,
    SEPARATOR,
    ExistingFileHeader,
    FileHeader,
    LineFormatter,
    SetupHeader,
)
from merch.fs.base import FileSystem
from merch.hashing import LF, compute_hash, detect_line_ending, normalize_line_endings


class Writer(Protocol):
    def write(self, chunk: str) -> object:
        ...


def _to_forward_slashes(path: str) -> str:
    return path.replace("\\", "/")


def _display_path(fs: FileSystem, base_dir: str, file_path: str) -> str:
    """Path relative to the base directory, with forward slashes."""
    try:
        display = fs.path.relative(base_dir, file_path)
    except ValueError:
        # Different drives on Windows: keep the path as given
        display = file_path
    return _to_forward_slashes(display)


def _included_files(files: Sequence[str], fs: FileSystem) -> list[tuple[int, str]]:
    """Pair each regular, existing file with its position in the input list."""
    return [
        (idx, file_path)
        for idx, file_path in enumerate(files)
        if fs.exists(file_path) and fs.is_file(file_path)
    ]


def _dominant_line_ending(contents: list[str]) -> str:
    """The ending of the first file that has one, defaulting to LF."""
    for content in contents:
        detected = detect_line_ending(content)
        if detected:
            return detected
    return LF


def merge_files(
    files: Sequence[str],
    writer: Writer,
    formatter: LineFormatter,
    base_dir: str,
    without_content: bool,
    fs: FileSystem,
    line_ending: Optional[str] = None,
) -> None:
    """Write a merch document for the given files.

    Files that do not exist or are not regular files are skipped. Each
    included file keeps its position in `files` as its idx.

    Args:
        files: Paths of the files to merge.
        writer: Output sink with a write(str) method.
        formatter: Wraps every header line (e.g. as a comment).
        base_dir: Directory all paths in the document are relative to.
        without_content: Emit folded file blocks only.
        fs: Filesystem to read from.
        line_ending: Force the document line ending instead of detecting it.
    """
    included = _included_files(files, fs)
    contents = {idx: fs.read_file(file_path) for idx, file_path in included}

    le = line_ending or _dominant_line_ending(list(contents.values()))

    setup = SetupHeader(base_path=_to_forward_slashes(base_dir))
    writer.write(formatter.format(SEPARATOR) + le)
    writer.write(formatter.format(f"merch::{COMMAND_SETUP}: {setup.to_json()}") + le)

    for idx, file_path in included:
        header = ExistingFileHeader(
            path=_display_path(fs, base_dir, file_path),
            idx=idx,
            hash=compute_hash(contents[idx]),
        )
        writer.write(formatter.format(f"merch::{COMMAND_EXISTING_FILE}: {header.to_json()}") + le)

    writer.write(formatter.format(SEPARATOR) + le)
    writer.write(le)

    colon = "" if without_content else ":"
    for idx, file_path in included:
        content = contents[idx]
        file_eol = detect_line_ending(content)
        header = FileHeader(
            path=_display_path(fs, base_dir, file_path),
            idx=idx,
            eol=file_eol if file_eol and file_eol != le else None,
        )
        writer.write(formatter.format(f"merch::{COMMAND_FILE}: {header.to_json()}{colon}") + le)

        if not without_content:
            writer.write(normalize_line_endings(content, le))
            writer.write(le)


def merge_to_string(
    files: Sequence[str],
    formatter: LineFormatter,
    base_dir: str,
    fs: FileSystem,
    without_content: bool = False,
    line_ending: Optional[str] = None,
) -> str:
    """Build a merch document and return it as a string."""
    buffer = io.StringIO(newline="")
    merge_files(files, buffer, formatter, base_dir, without_content, fs, line_ending)
    return buffer.getvalue()
