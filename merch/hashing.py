"""Content fingerprinting and line-ending utilities.

Contains:
- compute_hash: SHA-256 hex digest of file content
- detect_line_ending: Detect the line ending used by a text
- normalize_line_endings: Rewrite all line endings to a single style
"""

import hashlib
import re
from typing import Optional, Union

LF = "\n"
CRLF = "\r\n"
LINE_ENDINGS = (LF, CRLF)

_LINE_BREAK_RE = re.compile(r"\r?\n")


def compute_hash(content: Union[str, bytes]) -> str:
    """Compute the SHA256 hash of file content.

    Args:
        content: File content. Text is encoded as UTF-8 first.

    Returns:
        SHA256 hex digest of the content.
    """
    if isinstance(content, str):
        content = content.encode("utf-8")
    return hashlib.sha256(content).hexdigest()


def detect_line_ending(text: str) -> Optional[str]:
    """Detect the line ending of the first line break in the text.

    Args:
        text: The text to inspect.

    Returns:
        "\\r\\n" or "\\n", or None if the text has no line break.
    """
    index = text.find("\n")
    if index == -1:
        return None
    if index > 0 and text[index - 1] == "\r":
        return CRLF
    return LF


def normalize_line_endings(text: str, eol: str) -> str:
    """Rewrite every line break in the text to the given line ending.

    Args:
        text: The text to normalize.
        eol: Target line ending, "\\n" or "\\r\\n".

    Returns:
        The normalized text.
    """
    return _LINE_BREAK_RE.sub(eol, text)
