"""Routing between fixed tools and per-shortcut dynamic tools."""

from __future__ import annotations

from shortcuts_mcp.catalog import (
    TOOL_NAME_PREFIX,
    CatalogEntry,
    CatalogLookupError,
    ShortcutRegistry,
    token_from_tool_name,
    tool_name_for,
)
from shortcuts_mcp.shortcuts import ShortcutsCli
from shortcuts_mcp.tools.builtin import INPUT_DESCRIPTION, call_bridge
from shortcuts_mcp.tools.registry import ToolDispatchError, ToolRegistry

DYNAMIC_TOOL_SCHEMA: dict[str, object] = {
    "type": "object",
    "properties": {
        "input": {"type": "string", "description": INPUT_DESCRIPTION},
    },
}


def dynamic_tool_spec(entry: CatalogEntry, prefix: str = TOOL_NAME_PREFIX) -> dict[str, object]:
    """Project one catalog entry onto its published tool description."""
    return {
        "name": tool_name_for(entry.token, prefix=prefix),
        "description": f'Run the "{entry.name}" shortcut',
        "inputSchema": DYNAMIC_TOOL_SCHEMA,
    }


class ShortcutDispatcher:
    """Publishes the current tool list and routes calls by tool name."""

    def __init__(
        self,
        fixed_tools: ToolRegistry,
        catalog: ShortcutRegistry,
        cli: ShortcutsCli,
        generate_shortcut_tools: bool = True,
        prefix: str = TOOL_NAME_PREFIX,
    ) -> None:
        self._fixed_tools = fixed_tools
        self._catalog = catalog
        self._cli = cli
        self._generate_shortcut_tools = generate_shortcut_tools
        self._prefix = prefix

    @property
    def generate_shortcut_tools(self) -> bool:
        return self._generate_shortcut_tools

    def list_operations(self) -> list[dict[str, object]]:
        """Return fixed tools followed by one tool per catalog entry."""
        operations = self._fixed_tools.specs()
        if self._generate_shortcut_tools:
            operations.extend(
                dynamic_tool_spec(entry, prefix=self._prefix)
                for entry in self._catalog.all_entries()
            )
        return operations

    def dispatch(self, name: str, arguments: dict[str, object]) -> dict[str, object]:
        """Route a call to a fixed tool or to the shortcut owning the token."""
        if name in self._fixed_tools:
            return self._fixed_tools.dispatch(name, arguments)
        token = token_from_tool_name(name, prefix=self._prefix)
        if not self._generate_shortcut_tools or token is None:
            raise ToolDispatchError(code="METHOD_NOT_FOUND", message=f"Unknown tool: {name}")
        try:
            entry = self._catalog.lookup_by_token(token)
        except CatalogLookupError as error:
            raise ToolDispatchError(code="INVALID_PARAMS", message=str(error)) from error
        input_value = arguments.get("input")
        return call_bridge(
            self._cli.run,
            entry.run_target,
            str(input_value) if input_value is not None else None,
        )
