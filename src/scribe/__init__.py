"""Scribe - conversational agent with file editing tools."""

__version__ = "0.1.0"
