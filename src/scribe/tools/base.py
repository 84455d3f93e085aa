"""Base tool interface and tool error types."""

from abc import ABC, abstractmethod
from typing import Any


class ToolError(Exception):
    """Raised when a tool cannot complete its work."""

    pass


class ToolInputError(ToolError):
    """Raised when a tool receives input it cannot act on."""

    pass


class InvalidPayloadError(ToolInputError):
    """Raised when a structured payload is not a valid JSON object."""

    def __init__(self, reason: str, payload: str) -> None:
        self.payload = payload
        super().__init__(f"invalid JSON input: {reason}, input was: {payload}")


class MissingFieldError(ToolInputError):
    """Raised when a required payload field is absent or empty."""

    def __init__(self, field: str) -> None:
        self.field = field
        super().__init__(f"{field} is required")


class LineRangeError(ToolInputError):
    """Raised when a line number falls outside the file."""

    def __init__(self, field: str, line_count: int, first: int = 1) -> None:
        self.field = field
        self.valid_range = (first, line_count)
        super().__init__(f"{field} out of range: valid range is {first}-{line_count}")


class UnsupportedOperationError(ToolInputError):
    """Raised for an edit operation other than replace or append."""

    def __init__(self, operation: str) -> None:
        self.operation = operation
        super().__init__(f"unsupported operation: {operation}. Use 'replace' or 'append'")


class FileAccessError(ToolError):
    """Raised when a path cannot be read, written or walked."""

    def __init__(self, message: str, path: str) -> None:
        self.path = path
        super().__init__(message)


# Schema used by tools that take a single free-text argument
TEXT_INPUT_SCHEMA: dict[str, Any] = {
    "type": "object",
    "properties": {
        "input": {"type": "string", "description": "Text input for the tool"},
    },
    "required": ["input"],
}


class Tool(ABC):
    """A named capability taking text input and returning text output.

    Subclasses set ``name`` and ``description`` and implement ``execute``.
    Failures are raised as ``ToolError`` subclasses.
    """

    name: str = ""
    description: str = ""
    input_schema: dict[str, Any] = TEXT_INPUT_SCHEMA

    @abstractmethod
    def execute(self, tool_input: str) -> str:
        """Run the tool.

        Args:
            tool_input: Text extracted from the model reply.

        Returns:
            Tool output as text.
        """

    def input_from_arguments(self, arguments: dict[str, Any]) -> str:
        """Convert structured call arguments into the tool's text input."""
        return str(arguments.get("input", ""))

    def to_spec(self) -> dict[str, Any]:
        """Describe the tool in the Messages API ``tools`` format."""
        return {
            "name": self.name,
            "description": self.description,
            "input_schema": self.input_schema,
        }

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r})"
