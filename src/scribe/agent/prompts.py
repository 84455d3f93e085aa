"""System message rendering."""

from scribe.tools.registry import ToolRegistry

SYSTEM_INTRO = "You are a helpful AI assistant powered by Claude. You have access to these tools:\n\n"

TOOL_USAGE_HINT = (
    "\nTo use a tool, simply mention its name and what you want to do with it. "
    "For example: 'I need to use the web_search tool to find information about...' "
    "or 'I'll use file_search to look for...'."
)

FILE_EDIT_USAGE = """

To use the file_edit tool, include a JSON object with the following structure:
```json
{
  "file_path": "path/to/file.txt", // Required: Path to the file to edit
  "operation": "replace", // Required: Either 'replace' or 'append'
  "content": "new content", // Required: The content to write
  "start_line": 1, // Optional: Line number to start replacing (only for replace)
  "end_line": 5 // Optional: Line number to end replacing (only for replace)
}
```
For example: 'I'll use the file_edit tool to update the README.md file: {"file_path": "README.md", "operation": "replace", "content": "# Updated README"}'."""


def build_system_prompt(registry: ToolRegistry) -> str:
    """Render the system message listing the registered tools."""
    prompt = SYSTEM_INTRO + registry.describe() + TOOL_USAGE_HINT
    if "file_edit" in registry:
        prompt += FILE_EDIT_USAGE
    return prompt
