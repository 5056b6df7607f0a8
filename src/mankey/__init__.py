"""MCP server and CLI for Anki via AnkiConnect."""

__version__ = "1.1.0"
