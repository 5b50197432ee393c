"""Exception classes for merch.

Contains:
- MerchError: Base exception for all merch errors
- DocumentError: Problems with the merch document text itself
- MissingBasePathError: A well-formed document without a setup header
- HeaderSyntaxError: A header line that could not be parsed strictly
- PlanError: Base exception for action planning failures
- HashMismatchError: A tracked file changed on disk since the document was built
- PlanInvariantError: Internal consistency violation in the rename walk
- UnfoldError: A folded block that cannot be restored from disk
"""

from typing import Optional


class MerchError(Exception):
    """Base exception for merch errors."""

    pass


class DocumentError(MerchError):
    """Raised when a merch document cannot be interpreted."""

    pass


class MissingBasePathError(DocumentError):
    """Raised when a document without diagnostics has no setup header."""

    def __init__(self, message: str = "No base path found in merch document"):
        super().__init__(message)


class HeaderSyntaxError(DocumentError):
    """Raised by the strict header parser.

    Attributes:
        command: The command name, when it could be recognised.
    """

    INVALID_JSON = "Invalid JSON in header"
    UNPARSABLE = "Could not parse header"

    def __init__(self, message: str, command: Optional[str] = None):
        super().__init__(message)
        self.command = command


class PlanError(MerchError):
    """Base exception for errors raised while planning actions."""

    pass


class HashMismatchError(PlanError):
    """Raised when a file's on-disk content no longer matches its stored hash.

    Attributes:
        file_path: The path of the file as written in the document.
    """

    def __init__(self, file_path: str):
        super().__init__(f"File changed on disk: {file_path}")
        self.file_path = file_path


class PlanInvariantError(PlanError):
    """Raised when the rename walk visits the same path twice."""

    pass


class UnfoldError(MerchError):
    """Raised when a folded file block cannot be unfolded."""

    pass
