"""Language-model gateway for Scribe."""

from scribe.llm.client import APIError, ClaudeClient, GatewayError
from scribe.llm.models import Completion, Message, Role, ToolCall

__all__ = [
    "ClaudeClient",
    "GatewayError",
    "APIError",
    "Completion",
    "Message",
    "Role",
    "ToolCall",
]
