"""The merch document: model, builder, parser and folding.

This package provides:
- models: ExistingFileInfo, UpdatedFileInfo, NewFileInfo, MerchDiagnostic,
          ParsedMerchDoc, LineFormatter and the header payload models
- builder: merge_files, merge_to_string
- parser: parse_merch_doc, scan_header_lines, parse_header_line
- folding: fold_file, unfold_file, fold_new_file, get_file_at_offset, is_folded
"""

# Models
from merch.document.models import (
    ExistingFileHeader,
    ExistingFileInfo,
    FileHeader,
    LineFormatter,
    MerchDiagnostic,
    NewFileInfo,
    OffsetRange,
    ParsedMerchDoc,
    SetupHeader,
    UpdatedFileInfo,
)

# Builder
from merch.document.builder import (
    merge_files,
    merge_to_string,
)

# Parser
from merch.document.parser import (
    HeaderLine,
    HeaderMatch,
    parse_header_line,
    parse_merch_doc,
    scan_header_lines,
)

# Folding
from merch.document.folding import (
    FileAtOffset,
    FoldResult,
    UnfoldResult,
    fold_file,
    fold_new_file,
    get_file_at_offset,
    is_folded,
    unfold_file,
)


__all__ = [
    # Models
    "OffsetRange",
    "ExistingFileInfo",
    "UpdatedFileInfo",
    "NewFileInfo",
    "MerchDiagnostic",
    "ParsedMerchDoc",
    "LineFormatter",
    "SetupHeader",
    "ExistingFileHeader",
    "FileHeader",
    # Builder
    "merge_files",
    "merge_to_string",
    # Parser
    "HeaderLine",
    "HeaderMatch",
    "scan_header_lines",
    "parse_header_line",
    "parse_merch_doc",
    # Folding
    "FileAtOffset",
    "FoldResult",
    "UnfoldResult",
    "get_file_at_offset",
    "is_folded",
    "fold_file",
    "unfold_file",
    "fold_new_file",
]
