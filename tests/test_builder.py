"""Tests for merch.document.builder module."""

from merch.document.builder import merge_files, merge_to_string
from merch.document.models import LineFormatter
from merch.document.parser import parse_merch_doc
from merch.fs import MemoryFileSystem
from merch.hashing import compute_hash


HASH_CONTENT1 = "d0b425e00e15a0d36b9b361f02bab63563aed6cb4665083905386c55d5b679fa"
HASH_CONTENT2 = "dab741b6289e7dccc1ed42330cae1accc2b755ce8079c2cd5d4b5366c9f769a6"


class TestMergeFiles:
    """Tests for merge_files function."""

    def test_document_layout(self, memory_fs, writer, formatter):
        """Test the exact text of a merged document."""
        merge_files(
            ["/src/file1.txt", "/src/file2.txt"], writer, formatter, "/src", False, memory_fs
        )

        assert writer.content == (
            "// ====================\n"
            '// merch::setup: {"basePath":"/src"}\n'
            '// merch::existing-file: {"path":"file1.txt","idx":0,"hash":"' + HASH_CONTENT1 + '"}\n'
            '// merch::existing-file: {"path":"file2.txt","idx":1,"hash":"' + HASH_CONTENT2 + '"}\n'
            "// ====================\n"
            "\n"
            '// merch::file: {"path":"file1.txt","idx":0}:\n'
            "content1\n"
            '// merch::file: {"path":"file2.txt","idx":1}:\n'
            "content2\n"
        )

    def test_without_content(self, memory_fs, writer, formatter):
        """Test that blocks are folded when content is omitted."""
        merge_files(["/src/file1.txt"], writer, formatter, "/src", True, memory_fs)

        assert '// merch::file: {"path":"file1.txt","idx":0}\n' in writer.content
        assert "content1" not in writer.content

    def test_skips_missing_files_but_keeps_positions(self, memory_fs, writer, formatter):
        """Test that missing inputs are skipped and idx is the list position."""
        merge_files(
            ["/src/missing.txt", "/src/file2.txt"], writer, formatter, "/src", False, memory_fs
        )

        assert "missing.txt" not in writer.content
        assert '{"path":"file2.txt","idx":1,' in writer.content

    def test_suffix_formatter(self, memory_fs, writer):
        """Test that the suffix wraps every header line."""
        merge_files(
            ["/src/file1.txt"], writer, LineFormatter("<!-- ", " -->"), "/src", False, memory_fs
        )

        assert '<!-- merch::file: {"path":"file1.txt","idx":0}: -->\ncontent1\n' in writer.content
        assert writer.content.startswith("<!-- ==================== -->\n")

    def test_nested_paths_use_forward_slashes(self, formatter):
        """Test that relative paths keep their directories."""
        fs = MemoryFileSystem({"/src/pkg/mod.py": "x = 1\n"})

        text = merge_to_string(["/src/pkg/mod.py"], formatter, "/src", fs)

        assert '"path":"pkg/mod.py"' in text


class TestLineEndings:
    """Tests for dominant line ending handling."""

    def test_first_file_with_ending_wins(self, formatter):
        """Test that the first detectable ending becomes the document's."""
        fs = MemoryFileSystem({
            "/src/one.txt": "no newline",
            "/src/crlf.txt": "a\r\nb\r\n",
            "/src/lf.txt": "c\nd\n",
        })

        text = merge_to_string(["/src/one.txt", "/src/crlf.txt", "/src/lf.txt"], formatter, "/src", fs)

        assert text.startswith("// ====================\r\n")
        assert '{"path":"lf.txt","idx":2,"eol":"\\n"}:\r\nc\r\nd\r\n' in text
        assert '"path":"crlf.txt","idx":1}:' in text

    def test_default_is_lf(self, formatter):
        """Test the LF default when no file has a line break."""
        fs = MemoryFileSystem({"/src/one.txt": "x"})

        text = merge_to_string(["/src/one.txt"], formatter, "/src", fs)

        assert "\r" not in text

    def test_forced_line_ending(self, formatter):
        """Test that an explicit line ending overrides detection."""
        fs = MemoryFileSystem({"/src/lf.txt": "a\nb\n"})

        text = merge_to_string(["/src/lf.txt"], formatter, "/src", fs, line_ending="\r\n")

        assert '{"path":"lf.txt","idx":0,"eol":"\\n"}:\r\na\r\nb\r\n\r\n' in text


class TestRoundTrip:
    """Tests that parsing a built document restores its records."""

    def test_hashes_and_idx(self, formatter):
        """Test that parse(build(F)) restores hashes and positions."""
        files = {
            "/src/a.txt": "alpha\n",
            "/src/b.txt": "beta\r\nline\r\n",
            "/src/c.txt": "",
        }
        fs = MemoryFileSystem(files)

        doc = parse_merch_doc(merge_to_string(list(files), formatter, "/src", fs))

        assert [e.idx for e in doc.existing_files] == [0, 1, 2]
        for existing, content in zip(doc.existing_files, files.values()):
            assert existing.hash == compute_hash(content)
        assert sorted(doc.updated_files) == [0, 1, 2]
        assert doc.updated_files[0].content == "alpha\n"
        assert doc.updated_files[1].content == "beta\nline\n"
        assert doc.updated_files[1].eol == "\r\n"
        assert doc.updated_files[2].content == ""
        assert doc.base_path == "/src"
        assert doc.diagnostics == []
