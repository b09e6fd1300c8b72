"""MCP tool interfaces and registrations."""

from .dispatcher import ShortcutDispatcher, dynamic_tool_spec
from .registry import ToolDispatchError, ToolHandler, ToolRegistry, ToolSpec

__all__ = [
    "ShortcutDispatcher",
    "ToolDispatchError",
    "ToolHandler",
    "ToolRegistry",
    "ToolSpec",
    "dynamic_tool_spec",
]
