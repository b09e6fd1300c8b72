"""Always-present shortcut tools."""

from __future__ import annotations

from collections.abc import Callable

from shortcuts_mcp.catalog import CatalogSnapshot, ShortcutRegistry
from shortcuts_mcp.shortcuts import InputPathNotFoundError, ShortcutsCli, ShortcutsCommandError
from shortcuts_mcp.tools.registry import ToolDispatchError, ToolHandler, ToolRegistry

LIST_SHORTCUTS = "list_shortcuts"
OPEN_SHORTCUT = "open_shortcut"
RUN_SHORTCUT = "run_shortcut"

INPUT_DESCRIPTION = "The input to pass to the shortcut. Can be text, or a filepath"
RUN_SHORTCUT_DESCRIPTION = "Run a shortcut with optional input and output parameters"

LIST_SHORTCUTS_SCHEMA: dict[str, object] = {
    "type": "object",
    "properties": {},
    "additionalProperties": False,
}
OPEN_SHORTCUT_SCHEMA: dict[str, object] = {
    "type": "object",
    "properties": {
        "name": {"type": "string", "description": "The name of the shortcut to open"},
    },
    "required": ["name"],
    "additionalProperties": False,
}
RUN_SHORTCUT_SCHEMA: dict[str, object] = {
    "type": "object",
    "properties": {
        "name": {
            "type": "string",
            "description": "The name or identifier of the shortcut to run",
        },
        "input": {"type": "string", "description": INPUT_DESCRIPTION},
    },
    "required": ["name"],
    "additionalProperties": False,
}


def call_bridge(
    action: Callable[..., dict[str, object]], *args: object
) -> dict[str, object]:
    """Invoke the shortcuts bridge and map its failures to dispatch errors."""
    try:
        return action(*args)
    except InputPathNotFoundError as error:
        raise ToolDispatchError(code="INVALID_PARAMS", message=str(error)) from error
    except ShortcutsCommandError as error:
        raise ToolDispatchError(code="INTERNAL_ERROR", message=error.message) from error


def register_builtin_tools(
    registry: ToolRegistry,
    catalog: ShortcutRegistry,
    cli: ShortcutsCli,
    refresh_catalog: Callable[[str], CatalogSnapshot],
    inject_shortcut_list: bool,
) -> None:
    """Register the fixed tool set in deterministic order."""
    registry.register(
        LIST_SHORTCUTS,
        _list_shortcuts_handler(refresh_catalog),
        description="List all available Siri shortcuts",
        input_schema=LIST_SHORTCUTS_SCHEMA,
    )
    registry.register(
        OPEN_SHORTCUT,
        _open_shortcut_handler(cli),
        description="Open a shortcut in the Shortcuts app",
        input_schema=OPEN_SHORTCUT_SCHEMA,
    )
    registry.register(
        RUN_SHORTCUT,
        _run_shortcut_handler(catalog, cli),
        description=_run_shortcut_description(catalog, inject_shortcut_list),
        input_schema=RUN_SHORTCUT_SCHEMA,
    )


def _run_shortcut_description(
    catalog: ShortcutRegistry, inject_shortcut_list: bool
) -> Callable[[], str]:
    def describe() -> str:
        entries = catalog.all_entries()
        if not inject_shortcut_list or not entries:
            return RUN_SHORTCUT_DESCRIPTION
        listing = "\n".join(f'- "{entry.name}"' for entry in entries)
        return f"{RUN_SHORTCUT_DESCRIPTION}\n\nAvailable shortcuts:\n{listing}"

    return describe


def _reject_unknown_arguments(
    tool: str, arguments: dict[str, object], allowed: frozenset[str]
) -> None:
    unexpected = sorted(key for key in arguments if key not in allowed)
    if unexpected:
        raise ToolDispatchError(
            code="INVALID_PARAMS",
            message=f"{tool} does not accept arguments: {', '.join(unexpected)}",
        )


def _require_name(tool: str, arguments: dict[str, object]) -> str:
    name_value = arguments.get("name")
    if not isinstance(name_value, str) or not name_value:
        raise ToolDispatchError(
            code="INVALID_PARAMS",
            message=f"{tool} name must be a non-empty string.",
        )
    return name_value


def _list_shortcuts_handler(refresh_catalog: Callable[[str], CatalogSnapshot]) -> ToolHandler:
    def handler(arguments: dict[str, object]) -> dict[str, object]:
        _reject_unknown_arguments(LIST_SHORTCUTS, arguments, frozenset())
        try:
            snapshot = refresh_catalog(LIST_SHORTCUTS)
        except ShortcutsCommandError as error:
            raise ToolDispatchError(code="INTERNAL_ERROR", message=error.message) from error
        return {"shortcuts": [{"name": entry.name} for entry in snapshot.entries]}

    return handler


def _open_shortcut_handler(cli: ShortcutsCli) -> ToolHandler:
    def handler(arguments: dict[str, object]) -> dict[str, object]:
        _reject_unknown_arguments(OPEN_SHORTCUT, arguments, frozenset({"name"}))
        name = _require_name(OPEN_SHORTCUT, arguments)
        return call_bridge(cli.view, name)

    return handler


def _run_shortcut_handler(catalog: ShortcutRegistry, cli: ShortcutsCli) -> ToolHandler:
    def handler(arguments: dict[str, object]) -> dict[str, object]:
        _reject_unknown_arguments(RUN_SHORTCUT, arguments, frozenset({"name", "input"}))
        name = _require_name(RUN_SHORTCUT, arguments)
        input_value = arguments.get("input")
        if input_value is not None and not isinstance(input_value, str):
            raise ToolDispatchError(
                code="INVALID_PARAMS",
                message=f"{RUN_SHORTCUT} input must be a string.",
            )
        entry = catalog.lookup_by_name(name)
        target = entry.run_target if entry is not None else name
        return call_bridge(cli.run, target, input_value)

    return handler
