"""Data models for the merch document.

Contains:
- OffsetRange: Half-open character range in the document text
- ExistingFileInfo: A file as it existed when the document was built
- UpdatedFileInfo: The target state for an existing file, keyed by idx
- NewFileInfo: A file block without idx, to be created
- MerchDiagnostic: A non-fatal parse anomaly anchored to a range
- ParsedMerchDoc: The whole parsed document
- LineFormatter: Prefix/suffix wrapping for header lines
- SetupHeader, ExistingFileHeader, FileHeader: Validated header payloads
"""

from dataclasses import dataclass, field
from typing import Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, StrictInt


Severity = Literal["error", "warning"]

SEPARATOR = "=" * 20
COMMAND_SETUP = "setup"
COMMAND_EXISTING_FILE = "existing-file"
COMMAND_FILE = "file"


@dataclass(frozen=True)
class OffsetRange:
    """Character range [start, end_exclusive) in a document."""

    start: int
    end_exclusive: int

    def contains(self, offset: int) -> bool:
        """Whether the offset touches the range (both ends inclusive)."""
        return self.start <= offset <= self.end_exclusive


@dataclass
class ExistingFileInfo:
    """A file as it existed when the document was built."""

    idx: int
    path: str  # Relative to the document's base path
    hash: str  # SHA256 of the content at build time
    header_range: OffsetRange


@dataclass
class UpdatedFileInfo:
    """Target state for an existing file."""

    idx: int
    new_path: str
    content: Optional[str]  # None when folded
    header_range: OffsetRange
    eol: Optional[str] = None  # Overrides the document line ending for this body
    marker_offset: Optional[int] = None  # Where the header's comment suffix starts

    def __post_init__(self):
        if self.marker_offset is None:
            self.marker_offset = self.header_range.end_exclusive


@dataclass
class NewFileInfo:
    """A file block without idx: a file that did not exist at build time."""

    new_path: str
    content: Optional[str]
    header_range: OffsetRange
    eol: Optional[str] = None
    marker_offset: Optional[int] = None

    def __post_init__(self):
        if self.marker_offset is None:
            self.marker_offset = self.header_range.end_exclusive


FileBlock = Union[UpdatedFileInfo, NewFileInfo]


@dataclass
class MerchDiagnostic:
    """A parse anomaly. Collected, never raised."""

    range: OffsetRange
    message: str
    severity: Severity


@dataclass
class ParsedMerchDoc:
    """The structured form of a merch document."""

    existing_files: list[ExistingFileInfo] = field(default_factory=list)
    updated_files: dict[int, UpdatedFileInfo] = field(default_factory=dict)
    new_files: list[NewFileInfo] = field(default_factory=list)
    base_path: str = "."
    setup_header_range: Optional[OffsetRange] = None
    diagnostics: list[MerchDiagnostic] = field(default_factory=list)

    def find_existing(self, idx: int) -> Optional[ExistingFileInfo]:
        """Return the existing-file record with the given idx, if any."""
        for existing in self.existing_files:
            if existing.idx == idx:
                return existing
        return None

    def file_blocks(self) -> list[FileBlock]:
        """All updated and new file blocks in document order."""
        blocks: list[FileBlock] = [*self.updated_files.values(), *self.new_files]
        return sorted(blocks, key=lambda block: block.header_range.start)


class LineFormatter:
    """Wraps header lines so they read as comments in the target language."""

    def __init__(self, prefix: str, suffix: str = ""):
        self.prefix = prefix
        self.suffix = suffix

    @classmethod
    def from_comment_style(cls, style: str) -> "LineFormatter":
        """Build a formatter from a template such as "// {}" or "<!-- {} -->".

        Raises:
            ValueError: If the template does not contain exactly one "{}".
        """
        parts = style.split("{}")
        if len(parts) != 2:
            raise ValueError(f'Invalid comment style "{style}". Must contain "{{}}" exactly once')
        return cls(parts[0], parts[1])

    def format(self, content: str) -> str:
        return f"{self.prefix}{content}{self.suffix}"


class _HeaderModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    def to_json(self) -> str:
        """Compact JSON with None fields dropped."""
        return self.model_dump_json(by_alias=True, exclude_none=True)


class SetupHeader(_HeaderModel):
    """Payload of merch::setup."""

    base_path: str = Field(alias="basePath", min_length=1)


class ExistingFileHeader(_HeaderModel):
    """Payload of merch::existing-file."""

    path: str = Field(min_length=1)
    idx: StrictInt
    hash: str = Field(min_length=1)


class FileHeader(_HeaderModel):
    """Payload of merch::file. No idx means a new file."""

    path: str = Field(min_length=1)
    idx: Optional[StrictInt] = None
    eol: Optional[Literal["\n", "\r\n"]] = None
