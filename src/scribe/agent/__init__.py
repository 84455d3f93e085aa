"""Conversation state and orchestration for Scribe."""

from scribe.agent.conversation import Conversation, ConversationError, ConversationStore
from scribe.agent.core import Agent, ToolExecutionError
from scribe.agent.prompts import build_system_prompt

__all__ = [
    "Agent",
    "ToolExecutionError",
    "Conversation",
    "ConversationError",
    "ConversationStore",
    "build_system_prompt",
]
