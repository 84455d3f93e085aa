"""Tool registry for Scribe agents."""

import logging
from collections.abc import Iterable, Iterator
from pathlib import Path

from scribe.tools.base import Tool
from scribe.tools.file_edit import FileEditTool
from scribe.tools.filesystem import FileReadTool, FileSearchTool
from scribe.tools.web_search import WebSearchTool

logger = logging.getLogger(__name__)


class ToolNotFoundError(Exception):
    """Raised when a tool name is not registered."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"tool {name} not found")


class ToolRegistry:
    """Insertion-ordered mapping from tool name to tool.

    Registering a name twice replaces the earlier tool but keeps its
    position, so rendering and detection order stay stable.
    """

    def __init__(self, tools: Iterable[Tool] = ()) -> None:
        self._tools: dict[str, Tool] = {}
        for tool in tools:
            self.register(tool)

    def register(self, tool: Tool) -> None:
        """Register a tool under its name, replacing any previous one."""
        if tool.name in self._tools:
            logger.debug("Replacing registered tool %s", tool.name)
        self._tools[tool.name] = tool

    def lookup(self, name: str) -> Tool:
        """Get a tool by name.

        Raises:
            ToolNotFoundError: If no tool has that name.
        """
        try:
            return self._tools[name]
        except KeyError:
            raise ToolNotFoundError(name) from None

    def names(self) -> list[str]:
        """Registered tool names in registration order."""
        return list(self._tools)

    def describe(self) -> str:
        """Render one ``- name: description`` line per tool."""
        return "".join(f"- {tool.name}: {tool.description}\n" for tool in self)

    def specs(self) -> list[dict]:
        """Tool definitions for a structured tool-calling request."""
        return [tool.to_spec() for tool in self]

    def __contains__(self, name: object) -> bool:
        return name in self._tools

    def __iter__(self) -> Iterator[Tool]:
        return iter(self._tools.values())

    def __len__(self) -> int:
        return len(self._tools)


def build_default_registry(
    search_root: str | Path = ".",
    strict_line_range: bool = False,
) -> ToolRegistry:
    """Build the registry of built-in tools.

    Args:
        search_root: Root directory for file_search.
        strict_line_range: Passed to the file_edit tool.

    Returns:
        Registry holding web_search, file_search, file_read and file_edit.
    """
    return ToolRegistry(
        [
            WebSearchTool(),
            FileSearchTool(root_dir=search_root),
            FileReadTool(),
            FileEditTool(strict_line_range=strict_line_range),
        ]
    )
