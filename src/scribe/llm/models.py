"""Message and completion models shared by the agent and the LLM client."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict


class Role(str, Enum):
    """Roles a transcript message can carry."""

    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"
    TOOL = "tool"


class Message(BaseModel):
    """A single role-tagged transcript entry. Immutable once created."""

    model_config = ConfigDict(frozen=True)

    role: Role
    content: str

    def to_dict(self) -> dict[str, str]:
        """Convert to dictionary for JSON serialization."""
        return {"role": self.role.value, "content": self.content}


@dataclass(frozen=True)
class ToolCall:
    """A structured tool invocation returned by the model.

    Attributes:
        name: Tool name.
        arguments: Tool arguments as decoded JSON.
        id: Provider-assigned call identifier, if any.
    """

    name: str
    arguments: dict[str, Any] = field(default_factory=dict)
    id: str | None = None


@dataclass(frozen=True)
class Completion:
    """One model reply: its text and, optionally, a structured tool call."""

    text: str
    tool_call: ToolCall | None = None
