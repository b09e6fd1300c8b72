"""Configuration loading and deterministic merge order."""

from __future__ import annotations

import os
import tomllib
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

CONFIG_FILE_NAME = "shortcuts_mcp.toml"
DEFAULT_SHORTCUTS_COMMAND = "shortcuts"
MAX_COMMAND_TIMEOUT_SECONDS = 3600

ENV_GENERATE_SHORTCUT_TOOLS = "GENERATE_SHORTCUT_TOOLS"
ENV_INJECT_SHORTCUT_LIST = "INJECT_SHORTCUT_LIST"
ENV_SHOW_IDENTIFIERS = "SHORTCUTS_MCP_SHOW_IDENTIFIERS"
ENV_REFRESH_ON_LIST = "SHORTCUTS_MCP_REFRESH_ON_LIST"
ENV_DATA_DIR = "SHORTCUTS_MCP_DATA_DIR"

_TRUTHY = {"1", "true", "yes"}


@dataclass(slots=True, frozen=True)
class ToolsConfig:
    """Tool publication toggles."""

    generate_shortcut_tools: bool = True
    inject_shortcut_list: bool = False
    refresh_on_list: bool = False


@dataclass(slots=True, frozen=True)
class ShortcutsConfig:
    """Settings for the shortcuts command bridge."""

    command: str = DEFAULT_SHORTCUTS_COMMAND
    show_identifiers: bool = False
    timeout_seconds: int | None = None


@dataclass(slots=True, frozen=True)
class ServerConfig:
    """Fully merged server configuration."""

    data_dir: Path
    tools: ToolsConfig
    shortcuts: ShortcutsConfig

    def to_public_dict(self) -> dict[str, object]:
        """Return serializable config snapshot."""
        return {
            "data_dir": str(self.data_dir),
            "tools": {
                "generate_shortcut_tools": self.tools.generate_shortcut_tools,
                "inject_shortcut_list": self.tools.inject_shortcut_list,
                "refresh_on_list": self.tools.refresh_on_list,
            },
            "shortcuts": {
                "command": self.shortcuts.command,
                "show_identifiers": self.shortcuts.show_identifiers,
                "timeout_seconds": self.shortcuts.timeout_seconds,
            },
        }


@dataclass(slots=True, frozen=True)
class CliOverrides:
    """Optional startup overrides applied at highest precedence."""

    data_dir: Path | None = None
    generate_shortcut_tools: bool | None = None
    inject_shortcut_list: bool | None = None
    refresh_on_list: bool | None = None
    shortcuts_command: str | None = None
    show_identifiers: bool | None = None
    timeout_seconds: int | None = None


def default_data_dir() -> Path:
    """Return the default directory for the audit log."""
    return Path.home() / ".shortcuts_mcp"


def default_config() -> ServerConfig:
    """Build the default config."""
    return ServerConfig(
        data_dir=default_data_dir(),
        tools=ToolsConfig(),
        shortcuts=ShortcutsConfig(),
    )


def load_config_file(path: Path) -> dict[str, object]:
    """Load an optional TOML config file."""
    if not path.exists():
        return {}
    with path.open("rb") as handle:
        payload = tomllib.load(handle)
    if not isinstance(payload, dict):
        raise ValueError(f"{path.name} must contain a top-level table.")
    return payload


def _get_table(payload: dict[str, object], key: str) -> dict[str, object]:
    value = payload.get(key, {})
    if not isinstance(value, dict):
        raise ValueError(f"Config section '{key}' must be a table.")
    return value


def _optional_bool(payload: dict[str, object], section: str, key: str, default: bool) -> bool:
    if key not in payload:
        return default
    value = payload[key]
    if not isinstance(value, bool):
        raise ValueError(f"Config field '{section}.{key}' must be a boolean.")
    return value


def _optional_non_empty_string(
    payload: dict[str, object], section: str, key: str, default: str
) -> str:
    if key not in payload:
        return default
    value = payload[key]
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"Config field '{section}.{key}' must be a non-empty string.")
    return value


def _optional_timeout(value: object, name: str, default: int | None) -> int | None:
    if value is None:
        return default
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise ValueError(f"Config field '{name}' must be a positive integer.")
    if value > MAX_COMMAND_TIMEOUT_SECONDS:
        raise ValueError(f"Config field '{name}' must be <= {MAX_COMMAND_TIMEOUT_SECONDS}.")
    return value


def merge_file_config(base: ServerConfig, payload: dict[str, object]) -> ServerConfig:
    """Merge a parsed TOML payload over ``base``."""
    tools_payload = _get_table(payload, "tools")
    shortcuts_payload = _get_table(payload, "shortcuts")
    server_payload = _get_table(payload, "server")

    data_dir = base.data_dir
    if "data_dir" in server_payload:
        data_dir = Path(
            _optional_non_empty_string(server_payload, "server", "data_dir", str(base.data_dir))
        ).expanduser()

    return ServerConfig(
        data_dir=data_dir,
        tools=ToolsConfig(
            generate_shortcut_tools=_optional_bool(
                tools_payload,
                "tools",
                "generate_shortcut_tools",
                base.tools.generate_shortcut_tools,
            ),
            inject_shortcut_list=_optional_bool(
                tools_payload, "tools", "inject_shortcut_list", base.tools.inject_shortcut_list
            ),
            refresh_on_list=_optional_bool(
                tools_payload, "tools", "refresh_on_list", base.tools.refresh_on_list
            ),
        ),
        shortcuts=ShortcutsConfig(
            command=_optional_non_empty_string(
                shortcuts_payload, "shortcuts", "command", base.shortcuts.command
            ),
            show_identifiers=_optional_bool(
                shortcuts_payload, "shortcuts", "show_identifiers", base.shortcuts.show_identifiers
            ),
            timeout_seconds=_optional_timeout(
                shortcuts_payload.get("timeout_seconds"),
                "shortcuts.timeout_seconds",
                base.shortcuts.timeout_seconds,
            ),
        ),
    )


def apply_environment(config: ServerConfig, environ: Mapping[str, str]) -> ServerConfig:
    """Apply environment flags over file config."""
    generate_shortcut_tools = config.tools.generate_shortcut_tools
    if ENV_GENERATE_SHORTCUT_TOOLS in environ:
        # only an explicit "false" disables dynamic tools
        generate_shortcut_tools = environ[ENV_GENERATE_SHORTCUT_TOOLS] != "false"
    inject_shortcut_list = config.tools.inject_shortcut_list
    if ENV_INJECT_SHORTCUT_LIST in environ:
        inject_shortcut_list = environ[ENV_INJECT_SHORTCUT_LIST] == "true"
    refresh_on_list = config.tools.refresh_on_list
    if ENV_REFRESH_ON_LIST in environ:
        refresh_on_list = environ[ENV_REFRESH_ON_LIST].strip().lower() in _TRUTHY
    show_identifiers = config.shortcuts.show_identifiers
    if ENV_SHOW_IDENTIFIERS in environ:
        show_identifiers = environ[ENV_SHOW_IDENTIFIERS].strip().lower() in _TRUTHY
    data_dir = config.data_dir
    raw_data_dir = environ.get(ENV_DATA_DIR, "").strip()
    if raw_data_dir:
        data_dir = Path(raw_data_dir).expanduser()

    return ServerConfig(
        data_dir=data_dir,
        tools=ToolsConfig(
            generate_shortcut_tools=generate_shortcut_tools,
            inject_shortcut_list=inject_shortcut_list,
            refresh_on_list=refresh_on_list,
        ),
        shortcuts=ShortcutsConfig(
            command=config.shortcuts.command,
            show_identifiers=show_identifiers,
            timeout_seconds=config.shortcuts.timeout_seconds,
        ),
    )


def apply_cli_overrides(config: ServerConfig, overrides: CliOverrides) -> ServerConfig:
    """Apply startup overrides at highest precedence."""
    command = config.shortcuts.command
    if overrides.shortcuts_command is not None:
        if not overrides.shortcuts_command.strip():
            raise ValueError("Config field 'overrides.shortcuts_command' must be a non-empty string.")
        command = overrides.shortcuts_command
    timeout_seconds = _optional_timeout(
        overrides.timeout_seconds,
        "overrides.timeout_seconds",
        config.shortcuts.timeout_seconds,
    )
    data_dir = overrides.data_dir or config.data_dir
    return ServerConfig(
        data_dir=data_dir.resolve(),
        tools=ToolsConfig(
            generate_shortcut_tools=_pick(
                overrides.generate_shortcut_tools, config.tools.generate_shortcut_tools
            ),
            inject_shortcut_list=_pick(
                overrides.inject_shortcut_list, config.tools.inject_shortcut_list
            ),
            refresh_on_list=_pick(overrides.refresh_on_list, config.tools.refresh_on_list),
        ),
        shortcuts=ShortcutsConfig(
            command=command,
            show_identifiers=_pick(overrides.show_identifiers, config.shortcuts.show_identifiers),
            timeout_seconds=timeout_seconds,
        ),
    )


def load_effective_config(
    config_path: Path | None = None,
    overrides: CliOverrides | None = None,
    environ: Mapping[str, str] | None = None,
) -> ServerConfig:
    """Load effective config using merge order defaults -> file -> environment -> overrides."""
    base = default_config()
    if config_path is not None and not config_path.exists():
        raise ValueError(f"Config file does not exist: {config_path}")
    path = config_path if config_path is not None else Path.cwd() / CONFIG_FILE_NAME
    payload = load_config_file(path)
    merged = merge_file_config(base, payload)
    merged = apply_environment(merged, os.environ if environ is None else environ)
    return apply_cli_overrides(merged, overrides or CliOverrides())


def _pick(override: bool | None, current: bool) -> bool:
    return override if override is not None else current
