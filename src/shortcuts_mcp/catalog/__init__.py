"""Shortcut catalog identity and token assignment."""

from .models import CatalogEntry, ShortcutName, parse_shortcut_name
from .naming import (
    MAX_SANITIZED_LENGTH,
    MAX_TOOL_NAME_LENGTH,
    TOOL_NAME_PREFIX,
    generate_unique_sanitized_name,
    sanitize_shortcut_name,
    token_budget,
    token_from_tool_name,
    tool_name_for,
)
from .registry import CatalogLookupError, CatalogSnapshot, ShortcutRegistry, build_snapshot

__all__ = [
    "CatalogEntry",
    "CatalogLookupError",
    "CatalogSnapshot",
    "MAX_SANITIZED_LENGTH",
    "MAX_TOOL_NAME_LENGTH",
    "ShortcutName",
    "ShortcutRegistry",
    "TOOL_NAME_PREFIX",
    "build_snapshot",
    "generate_unique_sanitized_name",
    "parse_shortcut_name",
    "sanitize_shortcut_name",
    "token_budget",
    "token_from_tool_name",
    "tool_name_for",
]
