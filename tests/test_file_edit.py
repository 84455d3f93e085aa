"""Tests for the file_edit tool and its splice helpers."""

import json
import os
import stat
from pathlib import Path

import pytest

from scribe.tools.base import (
    FileAccessError,
    InvalidPayloadError,
    LineRangeError,
    MissingFieldError,
    UnsupportedOperationError,
)
from scribe.tools.file_edit import (
    FileEditRequest,
    FileEditTool,
    append_content,
    replace_lines,
)


def _payload(**fields) -> str:
    return json.dumps(fields)


@pytest.fixture
def tool() -> FileEditTool:
    return FileEditTool()


@pytest.fixture
def abc_file(tmp_path: Path) -> Path:
    path = tmp_path / "abc.txt"
    path.write_text("A\nB\nC")
    return path


class TestReplaceLines:
    """Tests for the pure line splice."""

    def test_single_line_with_multiline_content(self):
        """Replacing line 2 with two lines inserts both."""
        assert replace_lines("A\nB\nC", "X\nY", 2, 2) == "A\nX\nY\nC"

    def test_range_inclusive(self):
        """Both bounds of the range are replaced."""
        assert replace_lines("A\nB\nC\nD", "X", 2, 3) == "A\nX\nD"

    def test_first_line(self):
        assert replace_lines("A\nB\nC", "X", 1, 1) == "X\nB\nC"

    def test_start_line_past_end(self):
        """start_line beyond the file names the valid range."""
        with pytest.raises(LineRangeError, match="valid range is 1-3") as exc_info:
            replace_lines("A\nB\nC", "X", 5, 5)
        assert exc_info.value.valid_range == (1, 3)
        assert exc_info.value.field == "start_line"

    def test_start_line_zero(self):
        with pytest.raises(LineRangeError):
            replace_lines("A\nB\nC", "X", 0, 2)

    def test_end_line_past_end_is_clamped(self):
        """An end_line past the last line replaces through the end."""
        assert replace_lines("A\nB\nC", "X", 2, 10) == "A\nX"

    def test_end_line_before_start_is_clamped(self):
        """An end_line before start_line also replaces through the end."""
        assert replace_lines("A\nB\nC", "X", 2, 1) == "A\nX"

    def test_strict_end_line(self):
        """Strict mode rejects an out-of-range end_line."""
        with pytest.raises(LineRangeError, match="end_line out of range: valid range is 2-3"):
            replace_lines("A\nB\nC", "X", 2, 10, strict=True)

    def test_trailing_newline_counts_as_line(self):
        """A trailing newline leaves an empty last line."""
        assert replace_lines("A\nB\n", "X", 3, 3) == "A\nB\nX"


class TestAppendContent:
    """Tests for append semantics."""

    def test_without_trailing_newline(self):
        assert append_content("A", "B") == "A\nB"

    def test_with_trailing_newline(self):
        assert append_content("A\n", "B") == "A\nB"

    def test_empty_file(self):
        """An empty file has no trailing newline, so one is inserted."""
        assert append_content("", "B") == "\nB"


class TestFileEditRequest:
    """Tests for payload parsing."""

    def test_parse_full_payload(self):
        request = FileEditRequest.parse(
            _payload(file_path="a.txt", operation="replace", content="x", start_line=2, end_line=3)
        )
        assert request.file_path == "a.txt"
        assert request.start_line == 2
        assert request.end_line == 3
        assert request.has_range is True

    def test_range_optional(self):
        request = FileEditRequest.parse(_payload(file_path="a.txt", operation="append", content="x"))
        assert request.start_line is None
        assert request.has_range is False

    def test_zero_range_is_unset(self):
        request = FileEditRequest.parse(
            _payload(file_path="a.txt", operation="replace", content="x", start_line=0, end_line=0)
        )
        assert request.has_range is False

    def test_invalid_json(self):
        with pytest.raises(InvalidPayloadError, match="invalid JSON input") as exc_info:
            FileEditRequest.parse("{not json")
        assert exc_info.value.payload == "{not json"

    def test_wrong_field_type(self):
        """Type errors name the offending field."""
        with pytest.raises(InvalidPayloadError, match="start_line"):
            FileEditRequest.parse(
                _payload(file_path="a.txt", operation="replace", content="x", start_line="two")
            )

    def test_missing_file_path(self):
        with pytest.raises(MissingFieldError, match="file_path is required") as exc_info:
            FileEditRequest.parse(_payload(operation="replace", content="x"))
        assert exc_info.value.field == "file_path"

    def test_missing_operation(self):
        with pytest.raises(MissingFieldError, match="operation is required"):
            FileEditRequest.parse(_payload(file_path="a.txt", content="x"))

    def test_extraction_failure_payload(self):
        """A payload holding only an error message fails on file_path."""
        with pytest.raises(MissingFieldError):
            FileEditRequest.parse('{"error": "Could not extract valid JSON from input."}')


class TestFileEditTool:
    """Tests for FileEditTool against real files."""

    def test_replace_whole_file(self, tool, abc_file):
        result = tool.execute(_payload(file_path=str(abc_file), operation="replace", content="X"))

        assert abc_file.read_text() == "X"
        assert "Successfully edited" in result
        assert "(1 bytes written)" in result

    def test_replace_line_range(self, tool, abc_file):
        tool.execute(
            _payload(
                file_path=str(abc_file),
                operation="replace",
                content="X\nY",
                start_line=2,
                end_line=2,
            )
        )
        assert abc_file.read_text() == "A\nX\nY\nC"

    def test_replace_out_of_range_leaves_file(self, tool, abc_file):
        with pytest.raises(LineRangeError, match="1-3"):
            tool.execute(
                _payload(file_path=str(abc_file), operation="replace", content="X", start_line=5)
            )
        assert abc_file.read_text() == "A\nB\nC"

    def test_replace_is_idempotent(self, tool, abc_file):
        payload = _payload(file_path=str(abc_file), operation="replace", content="same")

        tool.execute(payload)
        first = abc_file.read_text()
        tool.execute(payload)

        assert abc_file.read_text() == first == "same"

    def test_append(self, tool, tmp_path):
        path = tmp_path / "a.txt"
        path.write_text("A")

        tool.execute(_payload(file_path=str(path), operation="append", content="B"))

        assert path.read_text() == "A\nB"

    def test_append_after_newline(self, tool, tmp_path):
        path = tmp_path / "a.txt"
        path.write_text("A\n")

        tool.execute(_payload(file_path=str(path), operation="append", content="B"))

        assert path.read_text() == "A\nB"

    def test_unsupported_operation(self, tool, abc_file):
        with pytest.raises(UnsupportedOperationError, match="unsupported operation: delete") as exc_info:
            tool.execute(_payload(file_path=str(abc_file), operation="delete", content="X"))
        assert exc_info.value.operation == "delete"

    def test_creates_missing_file(self, tool, tmp_path):
        """A missing file is created with exactly the content given."""
        path = tmp_path / "new.txt"

        result = tool.execute(_payload(file_path=str(path), operation="append", content="hello"))

        assert path.read_text() == "hello"
        assert result == f"Created new file {path} with 5 bytes"

    def test_create_ignores_operation(self, tool, tmp_path):
        path = tmp_path / "new.txt"
        tool.execute(_payload(file_path=str(path), operation="bogus", content="hello"))
        assert path.read_text() == "hello"

    def test_create_makes_parent_dirs(self, tool, tmp_path):
        path = tmp_path / "nested" / "dir" / "new.txt"
        tool.execute(_payload(file_path=str(path), operation="replace", content="x"))
        assert path.read_text() == "x"

    @pytest.mark.skipif(os.name == "nt", reason="POSIX permissions")
    def test_created_file_mode(self, tool, tmp_path):
        path = tmp_path / "new.txt"
        tool.execute(_payload(file_path=str(path), operation="replace", content="x"))
        assert stat.S_IMODE(path.stat().st_mode) == 0o644

    def test_missing_file_without_content(self, tool, tmp_path):
        path = tmp_path / "missing.txt"
        with pytest.raises(FileAccessError, match="file not found") as exc_info:
            tool.execute(_payload(file_path=str(path), operation="append", content=""))
        assert exc_info.value.path == str(path)
        assert not path.exists()

    def test_directory_rejected(self, tool, tmp_path):
        with pytest.raises(FileAccessError, match="is a directory"):
            tool.execute(_payload(file_path=str(tmp_path), operation="append", content="x"))

    @pytest.mark.skipif(os.name == "nt", reason="POSIX permissions")
    def test_preserves_mode(self, tool, abc_file):
        abc_file.chmod(0o600)
        tool.execute(_payload(file_path=str(abc_file), operation="append", content="D"))
        assert stat.S_IMODE(abc_file.stat().st_mode) == 0o600

    def test_preserves_crlf(self, tool, tmp_path):
        """Line endings are not translated on read or write."""
        path = tmp_path / "crlf.txt"
        path.write_bytes(b"A\r\nB\r\n")

        tool.execute(_payload(file_path=str(path), operation="append", content="C"))

        assert path.read_bytes() == b"A\r\nB\r\nC"

    def test_reports_encoded_byte_count(self, tool, tmp_path):
        path = tmp_path / "utf8.txt"
        path.write_text("x")
        result = tool.execute(_payload(file_path=str(path), operation="replace", content="é"))
        assert "(2 bytes written)" in result

    def test_strict_line_range(self, abc_file):
        tool = FileEditTool(strict_line_range=True)
        with pytest.raises(LineRangeError):
            tool.execute(
                _payload(
                    file_path=str(abc_file),
                    operation="replace",
                    content="X",
                    start_line=2,
                    end_line=9,
                )
            )

    def test_arguments_become_json_input(self, tool):
        arguments = {"file_path": "a.txt", "operation": "append", "content": "x"}
        assert json.loads(tool.input_from_arguments(arguments)) == arguments
