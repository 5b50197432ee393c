"""Tests for merch.document.folding module."""

import pytest

from merch.document.builder import merge_to_string
from merch.document.folding import (
    fold_file,
    fold_new_file,
    get_file_at_offset,
    is_folded,
    unfold_file,
)
from merch.document.models import LineFormatter
from merch.document.parser import parse_merch_doc
from merch.exceptions import UnfoldError
from merch.fs import MemoryFileSystem


@pytest.fixture
def document(memory_fs, formatter):
    return merge_to_string(["/src/file1.txt", "/src/file2.txt"], formatter, "/src", memory_fs)


def _updated(content, idx):
    return parse_merch_doc(content).updated_files[idx]


class TestGetFileAtOffset:
    """Tests for get_file_at_offset function."""

    def test_on_updated_header(self, document):
        offset = document.index('merch::file: {"path":"file2.txt"')

        found = get_file_at_offset(document, offset)

        assert found.kind == "updated"
        assert found.file.new_path == "file2.txt"

    def test_header_end_is_inclusive(self, document):
        header = _updated(document, 0).header_range

        found = get_file_at_offset(document, header.end_exclusive)

        assert found is not None
        assert found.file.idx == 0

    def test_on_body(self, document):
        assert get_file_at_offset(document, document.index("content1")) is None

    def test_on_new_file(self, document):
        content = document + '// merch::file: {"path":"extra.txt"}:\nx\n'

        found = get_file_at_offset(content, content.index("extra.txt"))

        assert found.kind == "new"
        assert found.file.new_path == "extra.txt"


class TestFoldUnfold:
    """Tests for fold_file and unfold_file."""

    def test_fold_removes_body_and_colon(self, document, memory_fs):
        result = fold_file(document, _updated(document, 0), memory_fs, "/src")

        assert "content1" not in result.new_content
        assert '// merch::file: {"path":"file1.txt","idx":0}\n// merch::file:' in result.new_content
        assert result.had_modified_content is False
        assert is_folded(_updated(result.new_content, 0))
        assert _updated(result.new_content, 1).content == "content2"

    def test_fold_then_unfold_restores_document(self, document, memory_fs):
        for idx in (0, 1):
            folded = fold_file(document, _updated(document, idx), memory_fs, "/src").new_content

            restored = unfold_file(folded, _updated(folded, idx), memory_fs, "/src").new_content

            assert restored == document

    def test_fold_reports_modified_content(self, document, memory_fs):
        edited = document.replace("content1", "edited")

        result = fold_file(edited, _updated(edited, 0), memory_fs, "/src")

        assert result.had_modified_content is True
        assert "edited" not in result.new_content

    def test_fold_already_folded_is_unchanged(self, document, memory_fs):
        folded = fold_file(document, _updated(document, 0), memory_fs, "/src").new_content

        result = fold_file(folded, _updated(folded, 0), memory_fs, "/src")

        assert result.new_content == folded

    def test_unfold_reads_current_disk_content(self, document, memory_fs):
        folded = fold_file(document, _updated(document, 0), memory_fs, "/src").new_content
        memory_fs.write_file("/src/file1.txt", "fresh\nlines")

        restored = unfold_file(folded, _updated(folded, 0), memory_fs, "/src").new_content

        assert _updated(restored, 0).content == "fresh\nlines"

    def test_unfold_uses_document_line_ending(self, formatter):
        fs = MemoryFileSystem({"/src/a.txt": "one\r\ntwo\r\n", "/src/b.txt": "x\ny\n"})
        document = merge_to_string(["/src/a.txt", "/src/b.txt"], formatter, "/src", fs)
        folded = fold_file(document, _updated(document, 1), fs, "/src").new_content

        restored = unfold_file(folded, _updated(folded, 1), fs, "/src").new_content

        assert _updated(restored, 1).content == "x\r\ny\r\n"

    def test_unfold_last_block_without_trailing_newline(self, memory_fs, formatter):
        content = merge_to_string(["/src/file1.txt"], formatter, "/src", memory_fs, without_content=True)
        content = content.rstrip("\n")

        restored = unfold_file(content, _updated(content, 0), memory_fs, "/src").new_content

        assert restored.endswith('"idx":0}:\ncontent1\n')

    def test_unfold_without_existing_record(self, memory_fs):
        content = '// merch::setup: {"basePath":"/src"}\n// merch::file: {"path":"x.txt","idx":3}\n'

        with pytest.raises(UnfoldError):
            unfold_file(content, _updated(content, 3), memory_fs, "/src")

    def test_comment_suffix_survives(self, memory_fs):
        html = LineFormatter.from_comment_style("<!-- {} -->")
        document = merge_to_string(["/src/file1.txt"], html, "/src", memory_fs)

        folded = fold_file(document, _updated(document, 0), memory_fs, "/src").new_content

        assert '<!-- merch::file: {"path":"file1.txt","idx":0} -->\n' in folded
        assert "content1" not in folded
        assert unfold_file(folded, _updated(folded, 0), memory_fs, "/src").new_content == document


class TestFoldNewFile:
    """Tests for fold_new_file function."""

    def test_removes_block(self, document):
        content = document + '// merch::file: {"path":"extra.txt"}:\nextra body\n'
        new_file = parse_merch_doc(content).new_files[0]

        result = fold_new_file(content, new_file)

        assert result.had_modified_content is True
        assert result.new_content == document

    def test_new_file_between_blocks(self, document):
        marker = '// merch::file: {"path":"file2.txt"'
        insert = '// merch::file: {"path":"mid.txt"}:\nmid\n'
        content = document.replace(marker, insert + marker)
        new_file = parse_merch_doc(content).new_files[0]

        result = fold_new_file(content, new_file)

        assert result.new_content == document

    def test_folded_new_file_is_unchanged(self, document):
        content = document + '// merch::file: {"path":"extra.txt"}\n'
        new_file = parse_merch_doc(content).new_files[0]

        result = fold_new_file(content, new_file)

        assert result.new_content == content
        assert result.had_modified_content is False
