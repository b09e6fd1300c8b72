"""Expose macOS shortcuts as MCP tools over STDIO."""

__version__ = "0.1.0"
