"""Agent orchestration: one conversation turn at a time.

A turn appends the user's input, asks the model for a reply and, when the
reply asks for a tool, runs it and asks the model again with the tool's
output folded into the transcript.

Tool requests are found either as structured tool calls (when the model
was offered tool definitions) or, failing that, by matching tool names in
the reply text.
"""

import json
import logging
from collections.abc import Sequence
from typing import Any, Protocol

from scribe.agent.conversation import Conversation, ConversationStore
from scribe.agent.prompts import build_system_prompt
from scribe.config import ScribeSettings, get_settings
from scribe.llm.client import ClaudeClient
from scribe.llm.models import Completion, Message, Role, ToolCall
from scribe.tools.base import Tool, ToolError
from scribe.tools.file_edit import FileEditTool
from scribe.tools.registry import ToolRegistry, build_default_registry
from scribe.tools.web_search import WebSearchTool

logger = logging.getLogger(__name__)

# Words stripped from free-text tool input, in this order
FILLER_PHRASES = ("tool", "to", "with", "for", "using", "use", "the", ":")

# Tool used when a reply asks for "the ... tool" without naming one
FALLBACK_TOOL = WebSearchTool.name

EXTRACTION_FAILED_PAYLOAD = (
    '{"error": "Could not extract valid JSON from input. Please provide a valid '
    'JSON object with file_path, operation, and content fields."}'
)


class Gateway(Protocol):
    """Anything that can turn a transcript into a completion."""

    def complete(
        self,
        messages: Sequence[Message],
        tools: list[dict[str, Any]] | None = None,
    ) -> Completion: ...


class ToolExecutionError(Exception):
    """Raised when a tool fails during a turn."""

    def __init__(self, tool_name: str, error: Exception) -> None:
        self.tool_name = tool_name
        super().__init__(f"tool execution error: {error}")


class Agent:
    """Drives conversation turns between the user, the model and the tools."""

    def __init__(
        self,
        settings: ScribeSettings | None = None,
        gateway: Gateway | None = None,
        registry: ToolRegistry | None = None,
        store: ConversationStore | None = None,
    ) -> None:
        """Initialize the agent and restore any saved conversation.

        Args:
            settings: Settings; read from the environment when omitted.
            gateway: Model gateway. Defaults to a ClaudeClient.
            registry: Tools available to the model. Defaults to the built-ins.
            store: Transcript storage. Defaults to the configured context file.

        Raises:
            ConversationError: If a saved transcript exists but is unreadable.
        """
        self.settings = settings or get_settings()
        self.registry = registry or build_default_registry(
            search_root=self.settings.search_root,
            strict_line_range=self.settings.strict_line_range,
        )
        self.gateway = gateway or ClaudeClient(self.settings)
        self.store = store or ConversationStore(self.settings.context_file)

        self.system_prompt = build_system_prompt(self.registry)
        self.conversation = Conversation([Message(role=Role.SYSTEM, content=self.system_prompt)])

        saved = self.store.load()
        if saved is not None:
            self.conversation.replace_all(saved)

    @property
    def messages(self) -> tuple[Message, ...]:
        """The transcript as it currently stands."""
        return self.conversation.snapshot()

    def save(self) -> None:
        """Write the full transcript to the store."""
        self.store.save(self.conversation.snapshot())

    def process(self, user_input: str) -> str:
        """Run one conversation turn.

        Messages appended before a failure stay in the transcript.

        Args:
            user_input: The operator's message.

        Returns:
            The model's final reply for this turn.

        Raises:
            GatewayError: If the model cannot be queried.
            ToolNotFoundError: If the requested tool is not registered.
            ToolExecutionError: If the tool fails.
        """
        self.conversation.append(Role.USER, user_input)
        completion = self._complete(offer_tools=True)
        reply = completion.text

        if completion.tool_call is not None:
            output, tool_name = self._run_tool_call(completion)
        elif self.should_use_tool(reply) and (tool_name := self.detect_tool_name(reply)):
            logger.info("Reply requests tool %s", tool_name)
            self.conversation.append(Role.ASSISTANT, reply)
            output = self.execute_tool(tool_name, reply)
        else:
            self.conversation.append(Role.ASSISTANT, reply)
            return reply

        self.conversation.append(Role.TOOL, f"Tool '{tool_name}' returned: {output}")

        final_reply = self._complete(offer_tools=False).text
        self.conversation.append(Role.ASSISTANT, final_reply)
        return final_reply

    def should_use_tool(self, reply: str) -> bool:
        """Check whether a reply appears to ask for a tool."""
        lowered = reply.lower()
        if any(name.lower() in lowered for name in self.registry.names()):
            return True
        return "use the" in lowered and "tool" in lowered

    def detect_tool_name(self, reply: str) -> str | None:
        """Pick the first registered tool named in a reply.

        Returns:
            The tool name, the web_search fallback when none is named, or
            None in strict detection mode.
        """
        lowered = reply.lower()
        for name in self.registry.names():
            if name.lower() in lowered:
                return name
        if self.settings.strict_tool_detection:
            logger.info("No tool named in reply, strict detection skips the fallback")
            return None
        return FALLBACK_TOOL

    def extract_tool_input(self, tool_name: str, reply: str) -> str:
        """Pull a tool's input out of the reply text.

        file_edit takes the span from the first "{" to the last "}". Other
        tools take whatever follows the tool name, minus filler words.
        """
        if tool_name == FileEditTool.name:
            start = reply.find("{")
            end = reply.rfind("}")
            if start != -1 and end > start:
                return reply[start : end + 1]
            return EXTRACTION_FAILED_PAYLOAD

        index = reply.lower().find(tool_name.lower())
        if index == -1:
            return reply

        remainder = reply[index + len(tool_name) :]
        for phrase in FILLER_PHRASES:
            remainder = remainder.replace(phrase, "")
        return remainder.strip()

    def execute_tool(self, tool_name: str, reply: str) -> str:
        """Look up a tool, extract its input from the reply and run it.

        Raises:
            ToolNotFoundError: If the tool is not registered.
            ToolExecutionError: If the tool fails.
        """
        tool = self.registry.lookup(tool_name)
        tool_input = self.extract_tool_input(tool_name, reply)
        return self._run(tool, tool_input)

    def _run_tool_call(self, completion: Completion) -> tuple[str, str]:
        call: ToolCall = completion.tool_call
        logger.info("Model called tool %s", call.name)

        text = completion.text or (
            f"Calling tool '{call.name}' with {json.dumps(call.arguments, sort_keys=True)}"
        )
        self.conversation.append(Role.ASSISTANT, text)

        tool = self.registry.lookup(call.name)
        return self._run(tool, tool.input_from_arguments(call.arguments)), call.name

    def _run(self, tool: Tool, tool_input: str) -> str:
        logger.debug("Running %s with input %r", tool.name, tool_input)
        try:
            return tool.execute(tool_input)
        except ToolError as e:
            logger.warning("Tool %s failed: %s", tool.name, e)
            raise ToolExecutionError(tool.name, e) from e

    def _complete(self, offer_tools: bool) -> Completion:
        tools = None
        if offer_tools and self.settings.native_tools:
            tools = self.registry.specs()
        return self.gateway.complete(self.conversation.snapshot(), tools=tools)
