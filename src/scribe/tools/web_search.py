"""Web search tool for Scribe agents."""

import logging

from scribe.tools.base import Tool

logger = logging.getLogger(__name__)


class WebSearchTool(Tool):
    """Mock tool simulating a web search."""

    name = "web_search"
    description = "Search the web for information"

    def execute(self, tool_input: str) -> str:
        query = tool_input.strip()
        logger.debug("Mock web search for %r", query)
        return f"Mock search results for '{query}': [Result 1, Result 2, Result 3]"
