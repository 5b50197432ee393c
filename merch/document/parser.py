"""Merch document parser.

Contains:
- HeaderLine: A line that looks like a merch header (lenient match)
- HeaderMatch: The strictly parsed parts of a header line
- scan_header_lines: Generator of header-line events over the document
- parse_header_line: Strict parse of one header line
- parse_merch_doc: Parse a whole document into a ParsedMerchDoc
"""

import json
import re
from dataclasses import dataclass
from typing import Iterator, Optional, Union

from pydantic import ValidationError

from merch.document.models import (
    COMMAND_EXISTING_FILE,
    COMMAND_FILE,
    COMMAND_SETUP,
    ExistingFileHeader,
    ExistingFileInfo,
    FileHeader,
    MerchDiagnostic,
    NewFileInfo,
    OffsetRange,
    ParsedMerchDoc,
    SetupHeader,
    UpdatedFileInfo,
)
from merch.exceptions import HeaderSyntaxError, MissingBasePathError

# Loose enough to catch broken headers so they can be reported
_LOOSE_HEADER_RE = re.compile(r"^.+?merch::")

# Comment closers such as " -->" or " */" carry no word characters
_STRAY_SUFFIX_RE = re.compile(r"\w")

_HEADER_RE = re.compile(
    r"^.+?merch::(?P<command>[a-zA-Z0-9-]+):\s*"
    r"(?P<payload>\{.*\})"  # greedy: up to the last closing brace
    r"(?P<colon>\s*:)?"  # content follows
    r"(?P<suffix>.*)$"  # comment suffix, e.g. " -->"
)

_COMMAND_RE = re.compile(r"merch::([a-zA-Z0-9-]+):")


@dataclass(frozen=True)
class HeaderLine:
    """A line containing the merch marker. The range excludes the line break."""

    range: OffsetRange
    text: str


@dataclass(frozen=True)
class HeaderMatch:
    """A strictly parsed header line."""

    command: str
    payload: dict
    has_colon: bool
    marker_end: int  # Offset in the line where the comment suffix starts
    suffix: str = ""


def scan_header_lines(text: str) -> Iterator[HeaderLine]:
    """Yield every line of the document that contains the merch marker.

    Args:
        text: The document text.

    Yields:
        HeaderLine events in document order.
    """
    pos = 0
    length = len(text)
    while pos < length:
        newline = text.find("\n", pos)
        if newline == -1:
            line_end = next_pos = length
        else:
            line_end = newline
            next_pos = newline + 1
            if line_end > pos and text[line_end - 1] == "\r":
                line_end -= 1

        line = text[pos:line_end]
        if _LOOSE_HEADER_RE.match(line):
            yield HeaderLine(range=OffsetRange(pos, line_end), text=line)
        pos = next_pos


def parse_header_line(line: str) -> HeaderMatch:
    """Strictly parse a header line.

    Args:
        line: The header line without its line break.

    Returns:
        HeaderMatch with the command, decoded JSON payload and colon flag.

    Raises:
        HeaderSyntaxError: If the JSON payload is invalid or the line does
            not have the header shape at all.
    """
    match = _HEADER_RE.match(line)
    command_match = _COMMAND_RE.search(line)
    command = command_match.group(1) if command_match else None

    if not match:
        if command:
            raise HeaderSyntaxError(HeaderSyntaxError.INVALID_JSON, command)
        raise HeaderSyntaxError(HeaderSyntaxError.UNPARSABLE)

    try:
        payload = json.loads(match.group("payload"))
    except json.JSONDecodeError:
        raise HeaderSyntaxError(HeaderSyntaxError.INVALID_JSON, match.group("command"))

    if not isinstance(payload, dict):
        raise HeaderSyntaxError(HeaderSyntaxError.INVALID_JSON, match.group("command"))

    return HeaderMatch(
        command=match.group("command"),
        payload=payload,
        has_colon=match.group("colon") is not None,
        marker_end=match.start("suffix"),
        suffix=match.group("suffix"),
    )


def _describe_validation_error(exc: ValidationError) -> str:
    """Summarize pydantic errors as "missing path, invalid idx"."""
    parts = []
    for error in exc.errors():
        field_name = ".".join(str(part) for part in error["loc"])
        if error["type"] in ("missing", "string_too_short"):
            parts.append(f"missing {field_name}")
        else:
            parts.append(f"invalid {field_name}")
    return ", ".join(parts)


def _content_start(text: str, header_end: int) -> int:
    """Offset just past the header's line break."""
    start = header_end
    if start < len(text) and text[start] == "\r":
        start += 1
    if start < len(text) and text[start] == "\n":
        start += 1
    return start


def trim_line_break(text: str, end: int) -> int:
    """Move `end` back over exactly one line break ending there."""
    if end > 0 and text[end - 1] == "\n":
        end -= 1
    if end > 0 and text[end - 1] == "\r":
        end -= 1
    return end


@dataclass
class _PendingContent:
    """A file block whose body starts at `start` and is not yet closed."""

    start: int
    target: Union[UpdatedFileInfo, NewFileInfo]


class _DocParser:
    """Single pass over the header events of one document."""

    def __init__(self, text: str):
        self.text = text
        self.doc = ParsedMerchDoc()
        self.base_path: Optional[str] = None
        self.pending: Optional[_PendingContent] = None

    def error(self, range_: OffsetRange, message: str) -> None:
        self.doc.diagnostics.append(MerchDiagnostic(range_, message, "error"))

    def warning(self, range_: OffsetRange, message: str) -> None:
        self.doc.diagnostics.append(MerchDiagnostic(range_, message, "warning"))

    def close_pending(self, end: int) -> None:
        if self.pending is None:
            return
        end = max(trim_line_break(self.text, end), self.pending.start)
        self.pending.target.content = self.text[self.pending.start:end]
        self.pending = None

    def run(self) -> ParsedMerchDoc:
        for header in scan_header_lines(self.text):
            self.close_pending(header.range.start)

            try:
                match = parse_header_line(header.text)
            except HeaderSyntaxError as e:
                self.error(header.range, str(e))
                continue

            if _STRAY_SUFFIX_RE.search(match.suffix):
                self.warning(header.range, f"Unexpected text after header: {match.suffix.strip()}")

            if match.command == COMMAND_SETUP:
                self.handle_setup(header, match)
            elif match.command == COMMAND_EXISTING_FILE:
                self.handle_existing_file(header, match)
            elif match.command == COMMAND_FILE:
                self.handle_file(header, match)
            else:
                self.error(header.range, f"Unknown command: {match.command}")

        self.close_pending(len(self.text))
        self.warn_orphans()
        return self.finish()

    def handle_setup(self, header: HeaderLine, match: HeaderMatch) -> None:
        # Recorded even when invalid, so tooling can still decorate the line
        self.doc.setup_header_range = header.range
        try:
            setup = SetupHeader.model_validate(match.payload)
        except ValidationError:
            self.error(header.range, "Missing basePath in setup")
            return
        self.base_path = setup.base_path

    def handle_existing_file(self, header: HeaderLine, match: HeaderMatch) -> None:
        try:
            data = ExistingFileHeader.model_validate(match.payload)
        except ValidationError as e:
            self.error(header.range, f"Invalid existing-file data: {_describe_validation_error(e)}")
            return

        if self.doc.find_existing(data.idx) is not None:
            self.error(header.range, f"Duplicate existing-file idx {data.idx}")
            return

        self.doc.existing_files.append(
            ExistingFileInfo(
                idx=data.idx,
                path=data.path,
                hash=data.hash,
                header_range=header.range,
            )
        )

    def handle_file(self, header: HeaderLine, match: HeaderMatch) -> None:
        try:
            data = FileHeader.model_validate(match.payload)
        except ValidationError as e:
            self.error(header.range, f"Invalid file data: {_describe_validation_error(e)}")
            return

        marker_offset = header.range.start + match.marker_end
        target: Union[UpdatedFileInfo, NewFileInfo]
        if data.idx is not None:
            target = UpdatedFileInfo(
                idx=data.idx,
                new_path=data.path,
                content=None,
                header_range=header.range,
                eol=data.eol,
                marker_offset=marker_offset,
            )
            # A later block with the same idx wins
            self.doc.updated_files[data.idx] = target
        else:
            target = NewFileInfo(
                new_path=data.path,
                content=None,
                header_range=header.range,
                eol=data.eol,
                marker_offset=marker_offset,
            )
            self.doc.new_files.append(target)

        if match.has_colon:
            self.pending = _PendingContent(
                start=_content_start(self.text, header.range.end_exclusive),
                target=target,
            )

    def warn_orphans(self) -> None:
        existing_idx = {existing.idx for existing in self.doc.existing_files}
        for idx, updated in self.doc.updated_files.items():
            if idx not in existing_idx:
                self.doc.diagnostics.append(
                    MerchDiagnostic(
                        updated.header_range,
                        f"No existing-file found with idx {idx}",
                        "warning",
                    )
                )

    def finish(self) -> ParsedMerchDoc:
        if self.base_path is None:
            if not self.doc.diagnostics:
                raise MissingBasePathError()
            # Keep broken documents usable for editor tooling
            self.base_path = "."
        self.doc.base_path = self.base_path
        return self.doc


def parse_merch_doc(text: str) -> ParsedMerchDoc:
    """Parse a merch document.

    Malformed headers become diagnostics instead of errors.

    Args:
        text: The document text.

    Returns:
        ParsedMerchDoc with existing, updated and new file records.

    Raises:
        MissingBasePathError: If there is no setup header and nothing else
            explains why.
    """
    return _DocParser(text).run()
