"""Shared test fixtures and configuration."""

import tempfile
from pathlib import Path

import pytest

from merch.document.models import LineFormatter
from merch.fs import MemoryFileSystem


class StringWriter:
    """Collects everything written to it."""

    def __init__(self):
        self.content = ""

    def write(self, chunk: str) -> None:
        self.content += chunk


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def formatter():
    """Header formatter using // comments."""
    return LineFormatter("// ", "")


@pytest.fixture
def writer():
    """An in-memory output sink."""
    return StringWriter()


@pytest.fixture
def memory_fs():
    """Two small files under /src."""
    return MemoryFileSystem({
        "/src/file1.txt": "content1",
        "/src/file2.txt": "content2",
    })


@pytest.fixture
def isolated_config(temp_dir, mocker):
    """Point the config module at an empty temp directory."""
    config_dir = temp_dir / ".merch"
    mocker.patch("merch.config._CONFIG_DIR", config_dir)
    return config_dir
