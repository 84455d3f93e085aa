"""Filesystem tools for Scribe agents."""

import logging
from collections.abc import Iterator
from pathlib import Path

from scribe.tools.base import FileAccessError, Tool

logger = logging.getLogger(__name__)

# Maximum search results to prevent huge tool messages
MAX_SEARCH_RESULTS = 1000

# Maximum file size to read (10MB)
MAX_FILE_SIZE = 10 * 1024 * 1024


def _walk(path: Path) -> Iterator[Path]:
    """Yield ``path`` and everything below it in lexical, depth-first order.

    Symlinked directories are reported but not descended into.
    """
    yield path
    if path.is_dir() and not path.is_symlink():
        for child in sorted(path.iterdir(), key=lambda p: p.name):
            yield from _walk(child)


class FileSearchTool(Tool):
    """Find files whose name contains a search term."""

    name = "file_search"
    description = "Search for files by name in the filesystem"

    def __init__(self, root_dir: str | Path = ".") -> None:
        """Initialize the search tool.

        Args:
            root_dir: Directory the search walks from.
        """
        self.root_dir = Path(root_dir)

    def execute(self, tool_input: str) -> str:
        search_term = tool_input.strip()
        needle = search_term.lower()

        if not self.root_dir.exists():
            raise FileAccessError(f"search root not found: {self.root_dir}", str(self.root_dir))

        matched: list[str] = []
        truncated = False
        try:
            for path in _walk(self.root_dir):
                # The root itself is matched by the name it was given
                name = path.name or str(path)
                if needle in name.lower():
                    if len(matched) >= MAX_SEARCH_RESULTS:
                        truncated = True
                        break
                    matched.append(str(path))
        except OSError as e:
            raise FileAccessError(f"error walking {self.root_dir}: {e}", str(self.root_dir)) from e

        logger.debug("file_search %r matched %d paths", search_term, len(matched))

        if not matched:
            return f"No files matching '{search_term}' found"

        lines = [f"Files matching '{search_term}':"]
        lines.extend(f"- {path}" for path in matched)
        if truncated:
            lines.append(f"... (truncated, {MAX_SEARCH_RESULTS}+ matches)")
        return "\n".join(lines) + "\n"


class FileReadTool(Tool):
    """Read the whole content of a file."""

    name = "file_read"
    description = "Read the contents of a file at the specified path"

    def execute(self, tool_input: str) -> str:
        file_path = tool_input.strip()
        path = Path(file_path)

        if not path.exists():
            raise FileAccessError(f"file not found: {file_path}", file_path)
        if not path.is_file():
            raise FileAccessError(f"path is not a file: {file_path}", file_path)

        # Check file size to prevent memory issues
        try:
            file_size = path.stat().st_size
        except OSError as e:
            raise FileAccessError(f"error checking file size: {e}", file_path) from e
        if file_size > MAX_FILE_SIZE:
            raise FileAccessError(
                f"file too large ({file_size} bytes). Maximum allowed: {MAX_FILE_SIZE} bytes",
                file_path,
            )

        try:
            return path.read_bytes().decode("utf-8")
        except UnicodeDecodeError as e:
            raise FileAccessError(f"unable to read file as text: {file_path}", file_path) from e
        except PermissionError as e:
            raise FileAccessError(f"permission denied reading file: {file_path}", file_path) from e
        except OSError as e:
            raise FileAccessError(f"error reading file: {e}", file_path) from e
