"""Configuration management for Scribe."""

import logging
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Configure logger
logger = logging.getLogger(__name__)

# Suppress httpx/httpcore noise
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("httpcore").setLevel(logging.WARNING)

# Anthropic Messages API defaults
DEFAULT_ENDPOINT = "https://api.anthropic.com/v1/messages"
DEFAULT_MODEL = "claude-3-5-sonnet-20241022"
DEFAULT_MAX_TOKENS = 1024
DEFAULT_CONTEXT_FILE = Path("conversation.json")


class ScribeSettings(BaseSettings):
    """Scribe configuration settings."""

    model_config = SettingsConfigDict(
        env_prefix="SCRIBE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    # LLM Configuration (missing key switches the client to placeholder replies)
    api_key: str | None = Field(default=None, alias="ANTHROPIC_API_KEY")
    endpoint: str = Field(default=DEFAULT_ENDPOINT, alias="ANTHROPIC_ENDPOINT")
    model: str = Field(default=DEFAULT_MODEL)
    max_tokens: int = Field(default=DEFAULT_MAX_TOKENS, gt=0)
    request_timeout: float = Field(default=60.0, gt=0)

    # Paths
    context_file: Path = Field(default=DEFAULT_CONTEXT_FILE)
    search_root: Path = Field(default=Path("."))

    # Behavior switches
    strict_tool_detection: bool = Field(default=False)
    strict_line_range: bool = Field(default=False)
    native_tools: bool = Field(default=False)

    @field_validator("endpoint", mode="before")
    @classmethod
    def _default_blank_endpoint(cls, value: str | None) -> str:
        if not value:
            return DEFAULT_ENDPOINT
        return value

    @field_validator("api_key", mode="before")
    @classmethod
    def _blank_key_is_missing(cls, value: str | None) -> str | None:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @property
    def has_api_key(self) -> bool:
        """Whether a real API key is configured."""
        return self.api_key is not None


def get_settings(**overrides) -> ScribeSettings:
    """Get Scribe settings instance.

    Args:
        **overrides: Field values taking priority over the environment.

    Returns:
        Settings read from the environment and .env file.
    """
    return ScribeSettings(**overrides)
