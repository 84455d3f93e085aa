"""Line-addressed file editing tool.

The model supplies a JSON object naming a file, an operation and the new
content. ``replace`` swaps the whole file, or an inclusive 1-based range of
whole lines; ``append`` adds content on its own line at the end of the file.
Missing files are created when content is given, whatever the operation.
"""

import json
import logging
import stat
from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from scribe.tools.base import (
    FileAccessError,
    InvalidPayloadError,
    LineRangeError,
    MissingFieldError,
    Tool,
    UnsupportedOperationError,
)

logger = logging.getLogger(__name__)

# Permission bits for files created by an edit
NEW_FILE_MODE = 0o644


class EditOperation(str, Enum):
    """Supported edit operations."""

    REPLACE = "replace"
    APPEND = "append"


class FileEditRequest(BaseModel):
    """A single edit parsed from the model's JSON payload.

    Attributes:
        file_path: File to edit or create.
        operation: "replace" or "append".
        content: Text to write.
        start_line: First line to replace (1-based, replace only).
        end_line: Last line to replace, inclusive (replace only).
    """

    model_config = ConfigDict(extra="ignore")

    file_path: str = ""
    operation: str = ""
    content: str = ""
    start_line: int | None = None
    end_line: int | None = None

    @field_validator("file_path", "operation", "content", mode="before")
    @classmethod
    def _null_as_empty(cls, value: Any) -> Any:
        return "" if value is None else value

    @property
    def has_range(self) -> bool:
        """Whether either line bound was given as a non-zero value."""
        return bool(self.start_line) or bool(self.end_line)

    @classmethod
    def parse(cls, payload: str) -> "FileEditRequest":
        """Parse and validate a JSON payload.

        Args:
            payload: JSON object text.

        Returns:
            The validated request.

        Raises:
            InvalidPayloadError: If the payload is not a matching JSON object.
            MissingFieldError: If file_path or operation is empty.
        """
        try:
            request = cls.model_validate_json(payload)
        except ValidationError as e:
            raise InvalidPayloadError(_describe_validation_error(e), payload) from e

        if not request.file_path:
            raise MissingFieldError("file_path")
        if not request.operation:
            raise MissingFieldError("operation")
        return request


def _describe_validation_error(error: ValidationError) -> str:
    parts = []
    for detail in error.errors():
        location = ".".join(str(part) for part in detail.get("loc", ()))
        parts.append(f"{location}: {detail['msg']}" if location else detail["msg"])
    return "; ".join(parts)


def replace_lines(
    current: str,
    content: str,
    start_line: int,
    end_line: int,
    strict: bool = False,
) -> str:
    """Replace an inclusive, 1-based range of whole lines.

    Args:
        current: Current file content.
        content: Replacement text, split on newlines.
        start_line: First line to replace.
        end_line: Last line to replace. Values before start_line or past the
            last line are clamped to the last line unless ``strict``.
        strict: Raise instead of clamping end_line.

    Returns:
        The new file content.

    Raises:
        LineRangeError: If start_line (or end_line, when strict) is out of range.
    """
    lines = current.split("\n")
    line_count = len(lines)

    if start_line < 1 or start_line > line_count:
        raise LineRangeError("start_line", line_count)
    if end_line < start_line or end_line > line_count:
        if strict:
            raise LineRangeError("end_line", line_count, first=start_line)
        end_line = line_count

    new_lines = lines[: start_line - 1] + content.split("\n") + lines[end_line:]
    return "\n".join(new_lines)


def append_content(current: str, content: str) -> str:
    """Append content so that it always starts on its own line."""
    if current.endswith("\n"):
        return current + content
    return current + "\n" + content


def apply_edit(request: FileEditRequest, current: str, strict: bool = False) -> str:
    """Compute the new content of a file for an edit request.

    Raises:
        LineRangeError: For an invalid replace range.
        UnsupportedOperationError: For an unknown operation.
    """
    if request.operation == EditOperation.REPLACE.value:
        if not request.has_range:
            return request.content
        return replace_lines(
            current,
            request.content,
            request.start_line or 0,
            request.end_line or 0,
            strict=strict,
        )
    if request.operation == EditOperation.APPEND.value:
        return append_content(current, request.content)
    raise UnsupportedOperationError(request.operation)


class FileEditTool(Tool):
    """Edit a file by whole-file replace, line-range replace or append."""

    name = "file_edit"
    description = (
        "Edit a file - can replace entire file, replace specific lines, "
        "or append content (input is JSON)"
    )
    input_schema = {
        **FileEditRequest.model_json_schema(),
        "required": ["file_path", "operation", "content"],
    }

    def __init__(self, strict_line_range: bool = False) -> None:
        """Initialize the edit tool.

        Args:
            strict_line_range: Reject an out-of-range end_line instead of clamping it.
        """
        self.strict_line_range = strict_line_range

    def input_from_arguments(self, arguments: dict[str, Any]) -> str:
        return json.dumps(arguments)

    def execute(self, tool_input: str) -> str:
        logger.debug("file_edit received input: %s", tool_input)
        request = FileEditRequest.parse(tool_input)
        path = Path(request.file_path)

        if not path.exists():
            if request.content:
                return self._create(request.file_path, request.content)
            raise FileAccessError(f"file not found: {request.file_path}", request.file_path)

        if path.is_dir():
            raise FileAccessError(
                f"{request.file_path} is a directory, not a file", request.file_path
            )

        try:
            mode = stat.S_IMODE(path.stat().st_mode)
            raw = path.read_bytes()
        except OSError as e:
            raise FileAccessError(f"failed to read file: {e}", request.file_path) from e

        try:
            current = raw.decode("utf-8")
        except UnicodeDecodeError as e:
            raise FileAccessError(
                f"unable to read file as text: {request.file_path}", request.file_path
            ) from e

        new_content = apply_edit(request, current, strict=self.strict_line_range)
        data = new_content.encode("utf-8")

        try:
            path.write_bytes(data)
            path.chmod(mode)
        except OSError as e:
            raise FileAccessError(f"failed to write to file: {e}", request.file_path) from e

        logger.info("Edited %s (%s, %d bytes)", request.file_path, request.operation, len(data))
        return f"Successfully edited {request.file_path} ({len(data)} bytes written)"

    def _create(self, file_path: str, content: str) -> str:
        path = Path(file_path)
        data = content.encode("utf-8")
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(data)
            path.chmod(NEW_FILE_MODE)
        except OSError as e:
            raise FileAccessError(f"failed to create file: {e}", file_path) from e

        logger.info("Created %s (%d bytes)", file_path, len(data))
        return f"Created new file {file_path} with {len(data)} bytes"
