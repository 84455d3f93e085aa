"""Anthropic Messages API client used as the agent's language-model gateway."""

import logging
from collections.abc import Sequence
from typing import Any

import httpx

from scribe.config import ScribeSettings, get_settings
from scribe.llm.models import Completion, Message, Role, ToolCall

logger = logging.getLogger(__name__)

ANTHROPIC_VERSION = "2023-06-01"

# Marker prefixed to tool results, which travel as user messages
TOOL_OUTPUT_MARKER = "[Tool Output]"


class GatewayError(Exception):
    """Raised when the model cannot be queried or its reply is unusable."""

    pass


class APIError(GatewayError):
    """Raised for a non-2xx response from the API."""

    def __init__(self, status_code: int, body: Any = None) -> None:
        self.status_code = status_code
        self.body = body
        if body is None:
            message = f"API error: status {status_code}"
        else:
            message = f"API error: status {status_code}, message: {body}"
        super().__init__(message)


def build_payload(
    messages: Sequence[Message],
    model: str,
    max_tokens: int,
    tools: list[dict[str, Any]] | None = None,
) -> dict[str, Any]:
    """Translate a transcript into a Messages API request body.

    The system message is lifted into the ``system`` field and tool results
    are re-roled as user messages prefixed with ``[Tool Output]``.

    Args:
        messages: Transcript in order.
        model: Model identifier.
        max_tokens: Completion token limit.
        tools: Optional tool definitions to advertise.

    Returns:
        JSON-serializable request body.
    """
    system_prompt = ""
    api_messages: list[dict[str, str]] = []

    for msg in messages:
        if msg.role == Role.SYSTEM:
            system_prompt = msg.content
        elif msg.role in (Role.USER, Role.ASSISTANT):
            api_messages.append({"role": msg.role.value, "content": msg.content})
        elif msg.role == Role.TOOL:
            api_messages.append(
                {"role": Role.USER.value, "content": f"{TOOL_OUTPUT_MARKER} {msg.content}"}
            )

    payload: dict[str, Any] = {
        "model": model,
        "max_tokens": max_tokens,
        "messages": api_messages,
    }
    if system_prompt:
        payload["system"] = system_prompt
    if tools:
        payload["tools"] = tools
    return payload


def parse_completion(data: Any) -> Completion:
    """Extract the reply text and first tool call from a response body.

    Raises:
        GatewayError: If the body has no content, or neither text nor a tool call.
    """
    if not isinstance(data, dict):
        raise GatewayError("failed to decode response: expected a JSON object")

    blocks = data.get("content") or []
    if not blocks:
        raise GatewayError("no response from Claude")

    text_parts: list[str] = []
    tool_call = None
    for block in blocks:
        if not isinstance(block, dict):
            continue
        block_type = block.get("type")
        if block_type == "text":
            text_parts.append(block.get("text") or "")
        elif block_type == "tool_use" and tool_call is None:
            tool_call = ToolCall(
                name=block.get("name", ""),
                arguments=block.get("input") or {},
                id=block.get("id"),
            )

    text = "".join(text_parts)
    if not text and tool_call is None:
        raise GatewayError("no text content in response")
    return Completion(text=text, tool_call=tool_call)


class ClaudeClient:
    """Query Claude with a transcript and return its reply.

    Without an API key the client answers every query with a deterministic
    placeholder so the agent can run offline.
    """

    def __init__(
        self,
        settings: ScribeSettings | None = None,
        http_client: httpx.Client | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            settings: Settings to read the key, endpoint and model from.
            http_client: HTTP client to send requests with. Created on demand.
        """
        settings = settings or get_settings()
        self.api_key = settings.api_key
        self.endpoint = settings.endpoint
        self.model = settings.model
        self.max_tokens = settings.max_tokens
        self.timeout = settings.request_timeout
        self._http_client = http_client

        if self.placeholder_mode:
            logger.warning("ANTHROPIC_API_KEY not set, using placeholder replies")

    @property
    def placeholder_mode(self) -> bool:
        """Whether replies are placeholders because no key is configured."""
        return not self.api_key

    @property
    def http_client(self) -> httpx.Client:
        if self._http_client is None:
            self._http_client = httpx.Client(timeout=self.timeout)
        return self._http_client

    def close(self) -> None:
        """Close the underlying HTTP client."""
        if self._http_client is not None:
            self._http_client.close()
            self._http_client = None

    def __enter__(self) -> "ClaudeClient":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def _headers(self) -> dict[str, str]:
        return {
            "Content-Type": "application/json",
            "X-API-Key": self.api_key or "",
            "anthropic-version": ANTHROPIC_VERSION,
            "Authorization": f"Bearer {self.api_key}",
        }

    def query(self, messages: Sequence[Message]) -> str:
        """Send a transcript and return the reply text.

        Raises:
            GatewayError: On transport failure or an unusable response.
        """
        return self.complete(messages).text

    def complete(
        self,
        messages: Sequence[Message],
        tools: list[dict[str, Any]] | None = None,
    ) -> Completion:
        """Send a transcript and return the full completion.

        Args:
            messages: Transcript in order.
            tools: Tool definitions to advertise for structured calls.

        Returns:
            The completion text and any tool call.

        Raises:
            APIError: On a non-2xx response.
            GatewayError: On transport failure or an unusable response.
        """
        if self.placeholder_mode:
            last = messages[-1].content if messages else ""
            return Completion(text=f"Mock Claude response to: {last}")

        payload = build_payload(messages, self.model, self.max_tokens, tools=tools)
        logger.debug("Querying %s with %d messages", self.model, len(payload["messages"]))

        try:
            response = self.http_client.post(self.endpoint, headers=self._headers(), json=payload)
        except httpx.HTTPError as e:
            raise GatewayError(f"failed to send request: {e}") from e

        logger.debug("Response status %d", response.status_code)

        if not response.is_success:
            try:
                body = response.json()
            except ValueError:
                body = None
            raise APIError(response.status_code, body)

        try:
            data = response.json()
        except ValueError as e:
            raise GatewayError(f"failed to decode response: {e}") from e

        return parse_completion(data)
