"""merch: edit many files as one document, then split the edits back."""

from importlib.metadata import version, PackageNotFoundError

try:
    __version__ = version("merch")
except PackageNotFoundError:
    # Fallback for development mode
    __version__ = "0.0.0-dev"
