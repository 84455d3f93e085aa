"""Conversation transcript and its on-disk storage."""

import json
import logging
from collections.abc import Iterable, Iterator
from pathlib import Path

from pydantic import TypeAdapter, ValidationError

from scribe.llm.models import Message, Role

logger = logging.getLogger(__name__)

_TRANSCRIPT = TypeAdapter(list[Message])


class ConversationError(Exception):
    """Raised when a saved transcript cannot be loaded."""

    pass


class Conversation:
    """Append-only, ordered transcript owned by a single agent."""

    def __init__(self, messages: Iterable[Message] = ()) -> None:
        self._messages: list[Message] = list(messages)

    def append(self, role: Role | str, content: str) -> Message:
        """Append a message and return it."""
        message = Message(role=Role(role), content=content)
        self._messages.append(message)
        return message

    def snapshot(self) -> tuple[Message, ...]:
        """Return the transcript as it stands."""
        return tuple(self._messages)

    def replace_all(self, messages: Iterable[Message]) -> None:
        """Swap the whole transcript, used when restoring a saved one."""
        self._messages = list(messages)

    @property
    def last(self) -> Message | None:
        return self._messages[-1] if self._messages else None

    def __len__(self) -> int:
        return len(self._messages)

    def __iter__(self) -> Iterator[Message]:
        return iter(self.snapshot())


class ConversationStore:
    """Persist a transcript as a pretty-printed JSON array."""

    def __init__(self, path: str | Path = "conversation.json") -> None:
        """Initialize the store.

        Args:
            path: JSON file holding the transcript.
        """
        self.path = Path(path)

    def exists(self) -> bool:
        return self.path.is_file()

    def load(self) -> list[Message] | None:
        """Load the saved transcript.

        Returns:
            The saved messages, or None if nothing has been saved yet.

        Raises:
            ConversationError: If the file is not a valid transcript.
        """
        if not self.path.exists():
            return None
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
            messages = _TRANSCRIPT.validate_python(data)
        except (OSError, ValueError, ValidationError) as e:
            raise ConversationError(f"could not load conversation from {self.path}: {e}") from e

        logger.info("Loaded %d messages from %s", len(messages), self.path)
        return messages

    def save(self, messages: Iterable[Message]) -> None:
        """Overwrite the file with the full transcript."""
        data = [message.to_dict() for message in messages]
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, ensure_ascii=False)
            f.write("\n")
        logger.info("Saved %d messages to %s", len(data), self.path)

    def clear(self) -> bool:
        """Delete the saved transcript.

        Returns:
            True if a file was deleted.
        """
        if self.path.exists():
            self.path.unlink()
            return True
        return False
