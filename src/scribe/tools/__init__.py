"""Tools for Scribe agents."""

from scribe.tools.base import (
    FileAccessError,
    InvalidPayloadError,
    LineRangeError,
    MissingFieldError,
    Tool,
    ToolError,
    ToolInputError,
    UnsupportedOperationError,
)
from scribe.tools.file_edit import FileEditRequest, FileEditTool, apply_edit
from scribe.tools.filesystem import FileReadTool, FileSearchTool
from scribe.tools.registry import ToolNotFoundError, ToolRegistry, build_default_registry
from scribe.tools.web_search import WebSearchTool

__all__ = [
    # Registry
    "ToolRegistry",
    "ToolNotFoundError",
    "build_default_registry",
    # Tools
    "Tool",
    "WebSearchTool",
    "FileSearchTool",
    "FileReadTool",
    "FileEditTool",
    "FileEditRequest",
    "apply_edit",
    # Errors
    "ToolError",
    "ToolInputError",
    "InvalidPayloadError",
    "MissingFieldError",
    "LineRangeError",
    "UnsupportedOperationError",
    "FileAccessError",
]
