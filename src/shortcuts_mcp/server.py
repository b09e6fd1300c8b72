"""STDIO MCP server entrypoint."""

from __future__ import annotations

import argparse
import json
import subprocess
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import TextIO

from shortcuts_mcp.catalog import CatalogSnapshot, ShortcutRegistry
from shortcuts_mcp.config import CliOverrides, ServerConfig, load_effective_config
from shortcuts_mcp.logging import (
    REFRESH_EVENT_TOOL,
    AuditEvent,
    JsonlAuditLogger,
    sanitize_arguments,
    utc_timestamp,
)
from shortcuts_mcp.shortcuts import CommandRunner, ShortcutsCli, ShortcutsCommandError
from shortcuts_mcp.tools import ShortcutDispatcher, ToolDispatchError, ToolRegistry
from shortcuts_mcp.tools.builtin import register_builtin_tools

EMPTY_LISTINGS = {
    "resources/list": "resources",
    "prompts/list": "prompts",
}


@dataclass(slots=True, frozen=True)
class Request:
    """Normalized incoming request."""

    request_id: str
    method: str
    params: dict[str, object]


def build_arg_parser() -> argparse.ArgumentParser:
    """Build argument parser for server startup configuration."""
    parser = argparse.ArgumentParser(prog="shortcuts-mcp")
    parser.add_argument("--config", required=False, default=None)
    parser.add_argument("--data-dir", required=False, default=None)
    parser.add_argument("--shortcuts-command", required=False, default=None)
    parser.add_argument("--timeout-seconds", type=int, required=False, default=None)
    for flag in (
        "--generate-shortcut-tools",
        "--inject-shortcut-list",
        "--show-identifiers",
        "--refresh-on-list",
    ):
        parser.add_argument(flag, choices=("true", "false"), required=False, default=None)
    return parser


class StdioServer:
    """Minimal deterministic STDIO server exposing shortcuts as tools."""

    def __init__(self, config: ServerConfig, runner: CommandRunner | None = None) -> None:
        self._config = config
        self._audit_logger = JsonlAuditLogger(path=config.data_dir / "audit.jsonl")
        self._catalog = ShortcutRegistry(parse_identifiers=config.shortcuts.show_identifiers)
        self._cli = ShortcutsCli(
            command=config.shortcuts.command,
            show_identifiers=config.shortcuts.show_identifiers,
            timeout_seconds=config.shortcuts.timeout_seconds,
            runner=runner or subprocess.run,
        )
        self._tools = ToolRegistry()
        register_builtin_tools(
            self._tools,
            catalog=self._catalog,
            cli=self._cli,
            refresh_catalog=self.refresh_catalog,
            inject_shortcut_list=config.tools.inject_shortcut_list,
        )
        self._dispatcher = ShortcutDispatcher(
            fixed_tools=self._tools,
            catalog=self._catalog,
            cli=self._cli,
            generate_shortcut_tools=config.tools.generate_shortcut_tools,
        )
        self._fallback_request_counter = 0
        self._refresh_counter = 0
        self._last_refresh_error: str | None = None

    @property
    def config(self) -> ServerConfig:
        return self._config

    @property
    def catalog(self) -> ShortcutRegistry:
        return self._catalog

    @property
    def dispatcher(self) -> ShortcutDispatcher:
        return self._dispatcher

    @property
    def audit_log_path(self) -> Path:
        return self._audit_logger.path

    @property
    def last_refresh_error(self) -> str | None:
        """Message from the most recent failed enumeration, cleared on success."""
        return self._last_refresh_error

    def initialize(self) -> int:
        """Populate the catalog at startup; failures leave it as it was."""
        self.try_refresh_catalog(trigger="startup")
        return len(self._catalog)

    def refresh_catalog(self, trigger: str) -> CatalogSnapshot:
        """Enumerate shortcuts and swap in a freshly assigned catalog."""
        request_id = self.next_refresh_id()
        try:
            names = self._cli.list_names()
        except ShortcutsCommandError as error:
            self._last_refresh_error = error.message
            self._audit_logger.append(
                AuditEvent(
                    timestamp=utc_timestamp(),
                    request_id=request_id,
                    tool=REFRESH_EVENT_TOOL,
                    ok=False,
                    blocked=False,
                    error_code="INTERNAL_ERROR",
                    metadata={
                        "trigger": trigger,
                        "entry_count": len(self._catalog),
                        "error_message_length": len(error.message),
                    },
                )
            )
            raise
        snapshot = self._catalog.refresh(names)
        self._last_refresh_error = None
        self._audit_logger.append(
            AuditEvent(
                timestamp=utc_timestamp(),
                request_id=request_id,
                tool=REFRESH_EVENT_TOOL,
                ok=True,
                blocked=False,
                error_code=None,
                metadata={"trigger": trigger, "entry_count": len(snapshot)},
            )
        )
        return snapshot

    def try_refresh_catalog(self, trigger: str) -> bool:
        """Refresh the catalog, reporting enumeration failure instead of raising."""
        try:
            self.refresh_catalog(trigger)
        except ShortcutsCommandError:
            return False
        return True

    def serve(self, in_stream: TextIO, out_stream: TextIO) -> None:
        """Process JSON-line requests from stdin and write JSON-line responses."""
        for raw_line in in_stream:
            line = raw_line.strip()
            if not line:
                continue
            response = self.handle_json_line(line)
            out_stream.write(f"{json.dumps(response, sort_keys=True)}\n")
            out_stream.flush()

    def handle_json_line(self, raw_line: str) -> dict[str, object]:
        """Handle a single JSON-line request."""
        try:
            payload = json.loads(raw_line)
        except json.JSONDecodeError:
            request_id = self.next_request_id()
            response = self.error_response(
                request_id=request_id,
                code="INVALID_JSON",
                message="Request must be valid JSON.",
            )
            self.log_request(
                request_id=request_id,
                tool_name="invalid_json",
                arguments={"raw_line_length": len(raw_line)},
                response=response,
            )
            return response
        return self.handle_payload(payload)

    def handle_payload(self, payload: object) -> dict[str, object]:
        """Validate and dispatch a parsed payload."""
        parsed = self.parse_request(payload)
        if isinstance(parsed, dict):
            request_id_value = parsed.get("request_id")
            request_id = (
                request_id_value if isinstance(request_id_value, str) else self.next_request_id()
            )
            self.log_request(
                request_id=request_id,
                tool_name="invalid_request",
                arguments={},
                response=parsed,
            )
            return parsed

        request = parsed
        if request.method in EMPTY_LISTINGS:
            response = self.success_response(
                request_id=request.request_id,
                result={EMPTY_LISTINGS[request.method]: []},
            )
            self.log_request(
                request_id=request.request_id,
                tool_name=request.method,
                arguments=request.params,
                response=response,
            )
            return response
        if request.method == "tools/list":
            return self.list_tools(request)

        tool_name: str
        arguments: dict[str, object]
        if request.method == "tools/call":
            tool_name_value = request.params.get("name")
            arguments_value = request.params.get("arguments", {})
            if arguments_value is None:
                arguments_value = {}
            if not isinstance(tool_name_value, str) or not tool_name_value:
                return self.error_response(
                    request_id=request.request_id,
                    code="INVALID_PARAMS",
                    message="tools/call params.name must be a non-empty string.",
                )
            if not isinstance(arguments_value, dict):
                return self.error_response(
                    request_id=request.request_id,
                    code="INVALID_PARAMS",
                    message="tools/call params.arguments must be an object.",
                )
            tool_name = tool_name_value
            arguments = arguments_value
        else:
            tool_name = request.method
            arguments = request.params

        try:
            result = self._dispatcher.dispatch(tool_name, arguments)
        except ToolDispatchError as error:
            response = self.error_response(
                request_id=request.request_id,
                code=error.code,
                message=error.message,
            )
            self.log_request(
                request_id=request.request_id,
                tool_name=tool_name,
                arguments=arguments,
                response=response,
            )
            return response
        except Exception:
            response = self.error_response(
                request_id=request.request_id,
                code="INTERNAL_ERROR",
                message="Unhandled server error while executing tool.",
            )
            self.log_request(
                request_id=request.request_id,
                tool_name=tool_name,
                arguments=arguments,
                response=response,
            )
            return response

        response = self.success_response(request_id=request.request_id, result=result)
        self.log_request(
            request_id=request.request_id,
            tool_name=tool_name,
            arguments=arguments,
            response=response,
        )
        return response

    def list_tools(self, request: Request) -> dict[str, object]:
        """Publish fixed tools plus one tool per known shortcut."""
        if self._config.tools.refresh_on_list:
            self.try_refresh_catalog(trigger="tools/list")
        response = self.success_response(
            request_id=request.request_id,
            result={"tools": self._dispatcher.list_operations()},
        )
        self.log_request(
            request_id=request.request_id,
            tool_name=request.method,
            arguments=request.params,
            response=response,
        )
        return response

    def parse_request(self, payload: object) -> Request | dict[str, object]:
        """Validate request payload and return normalized Request."""
        if not isinstance(payload, dict):
            return self.error_response(
                request_id=self.next_request_id(),
                code="INVALID_REQUEST",
                message="Request must be an object.",
            )

        request_id = self.extract_request_id(payload.get("id"))
        method = payload.get("method")
        params = payload.get("params", {})

        if not isinstance(method, str) or not method:
            return self.error_response(
                request_id=request_id,
                code="INVALID_REQUEST",
                message="Request method must be a non-empty string.",
            )
        if params is None:
            params = {}
        if not isinstance(params, dict):
            return self.error_response(
                request_id=request_id,
                code="INVALID_PARAMS",
                message="Request params must be an object.",
            )

        return Request(request_id=request_id, method=method, params=params)

    def extract_request_id(self, request_id: object) -> str:
        """Extract request ID from payload or synthesize deterministic fallback."""
        if isinstance(request_id, str) and request_id:
            return request_id
        if isinstance(request_id, int) and not isinstance(request_id, bool):
            return str(request_id)
        return self.next_request_id()

    def next_request_id(self) -> str:
        """Generate deterministic fallback request IDs for invalid/missing IDs."""
        self._fallback_request_counter += 1
        return f"req-{self._fallback_request_counter:06d}"

    def next_refresh_id(self) -> str:
        """Generate sequential IDs for catalog refresh audit events."""
        self._refresh_counter += 1
        return f"refresh-{self._refresh_counter:06d}"

    @staticmethod
    def success_response(request_id: str, result: dict[str, object]) -> dict[str, object]:
        """Build success envelope."""
        return {
            "request_id": request_id,
            "ok": True,
            "result": result,
            "warnings": [],
            "blocked": False,
        }

    @staticmethod
    def error_response(request_id: str, code: str, message: str) -> dict[str, object]:
        """Build explicit error envelope."""
        return {
            "request_id": request_id,
            "ok": False,
            "result": {},
            "warnings": [],
            "blocked": False,
            "error": {"code": code, "message": message},
        }

    def log_request(
        self,
        request_id: str,
        tool_name: str,
        arguments: dict[str, object],
        response: dict[str, object],
    ) -> None:
        """Log one sanitized request event."""
        error_payload = response.get("error")
        error_code: str | None = None
        if isinstance(error_payload, dict):
            code_value = error_payload.get("code")
            if isinstance(code_value, str):
                error_code = code_value
        event = AuditEvent(
            timestamp=utc_timestamp(),
            request_id=request_id,
            tool=tool_name,
            ok=bool(response.get("ok", False)),
            blocked=bool(response.get("blocked", False)),
            error_code=error_code,
            metadata=sanitize_arguments(arguments),
        )
        self._audit_logger.append(event)


def create_server(
    config_path: str | None = None,
    data_dir: str | None = None,
    cli_overrides: CliOverrides | None = None,
    environ: dict[str, str] | None = None,
    runner: CommandRunner | None = None,
) -> StdioServer:
    """Create a configured STDIO server instance."""
    overrides = cli_overrides or CliOverrides()
    if data_dir is not None and overrides.data_dir is None:
        overrides = CliOverrides(
            data_dir=Path(data_dir),
            generate_shortcut_tools=overrides.generate_shortcut_tools,
            inject_shortcut_list=overrides.inject_shortcut_list,
            refresh_on_list=overrides.refresh_on_list,
            shortcuts_command=overrides.shortcuts_command,
            show_identifiers=overrides.show_identifiers,
            timeout_seconds=overrides.timeout_seconds,
        )
    config = load_effective_config(
        config_path=Path(config_path) if config_path is not None else None,
        overrides=overrides,
        environ=environ,
    )
    return StdioServer(config=config, runner=runner)


def main(argv: list[str] | None = None) -> int:
    """Entrypoint for the shortcuts server process."""
    parser = build_arg_parser()
    args = parser.parse_args(argv)
    overrides = CliOverrides(
        data_dir=Path(args.data_dir).expanduser() if args.data_dir is not None else None,
        generate_shortcut_tools=_flag(args.generate_shortcut_tools),
        inject_shortcut_list=_flag(args.inject_shortcut_list),
        refresh_on_list=_flag(args.refresh_on_list),
        shortcuts_command=args.shortcuts_command,
        show_identifiers=_flag(args.show_identifiers),
        timeout_seconds=args.timeout_seconds,
    )
    try:
        server = create_server(config_path=args.config, cli_overrides=overrides)
    except ValueError as error:
        print(f"Invalid configuration: {error}", file=sys.stderr)
        return 2
    print("Initializing shortcuts...", file=sys.stderr)
    count = server.initialize()
    if server.last_refresh_error is not None:
        print(f"Error initializing shortcuts: {server.last_refresh_error}", file=sys.stderr)
    else:
        print(f"Initialized {count} shortcuts", file=sys.stderr)
    server.serve(in_stream=sys.stdin, out_stream=sys.stdout)
    return 0


def _flag(value: str | None) -> bool | None:
    if value is None:
        return None
    return value == "true"


if __name__ == "__main__":
    raise SystemExit(main())
