"""Bridge to the macOS ``shortcuts`` command-line tool."""

from __future__ import annotations

import subprocess
from collections.abc import Callable, Sequence
from pathlib import Path

from shortcuts_mcp.shortcuts.inputs import staged_input

CommandRunner = Callable[..., "subprocess.CompletedProcess[str]"]


class ShortcutsCommandError(Exception):
    """Raised when the shortcuts command fails or reports an error."""

    def __init__(self, message: str, stderr: str = "") -> None:
        super().__init__(message)
        self.message = message
        self.stderr = stderr


class ShortcutsCli:
    """Runs ``shortcuts list|view|run`` as opaque subprocesses."""

    def __init__(
        self,
        command: str = "shortcuts",
        show_identifiers: bool = False,
        timeout_seconds: float | None = None,
        temp_dir: Path | None = None,
        runner: CommandRunner = subprocess.run,
    ) -> None:
        self._command = command
        self._show_identifiers = show_identifiers
        self._timeout_seconds = timeout_seconds
        self._temp_dir = temp_dir
        self._runner = runner

    @property
    def command(self) -> str:
        return self._command

    def list_names(self) -> list[str]:
        """Return shortcut names in the order the command lists them."""
        args = ["list"]
        if self._show_identifiers:
            args.append("--show-identifiers")
        completed = self._invoke(args, action="list shortcuts")
        if completed.returncode != 0:
            raise ShortcutsCommandError(
                f"Failed to list shortcuts: {_describe_failure(completed)}",
                stderr=completed.stderr or "",
            )
        if completed.stderr and completed.stderr.strip():
            raise ShortcutsCommandError(
                f"Error listing shortcuts: {completed.stderr.strip()}",
                stderr=completed.stderr,
            )
        return [line.strip() for line in (completed.stdout or "").splitlines() if line.strip()]

    def view(self, name: str) -> dict[str, object]:
        """Open a shortcut in the Shortcuts app."""
        completed = self._invoke(["view", name], action="open shortcut")
        if completed.returncode != 0:
            raise ShortcutsCommandError(
                f"Failed to open shortcut: {_describe_failure(completed)}",
                stderr=completed.stderr or "",
            )
        if completed.stderr and completed.stderr.strip():
            raise ShortcutsCommandError(
                f"Error opening shortcut: {completed.stderr.strip()}",
                stderr=completed.stderr,
            )
        return {"success": True, "message": f"Opened shortcut: {name}"}

    def run(self, name: str, input_value: str | None = None) -> dict[str, object]:
        """Run a shortcut by name or identifier, feeding input through a file."""
        with staged_input(input_value, temp_dir=self._temp_dir) as input_path:
            completed = self._invoke(
                ["run", name, "--input-path", str(input_path)],
                action="run shortcut",
            )
        if completed.returncode != 0:
            raise ShortcutsCommandError(
                f"Failed to run shortcut: {_describe_failure(completed)}",
                stderr=completed.stderr or "",
            )
        output = (completed.stdout or "").strip()
        if output:
            return {"success": True, "output": output}
        return {"success": True, "message": f"Ran shortcut: {name}"}

    def _invoke(self, args: Sequence[str], action: str) -> subprocess.CompletedProcess[str]:
        try:
            return self._runner(
                [self._command, *args],
                capture_output=True,
                text=True,
                check=False,
                timeout=self._timeout_seconds,
            )
        except FileNotFoundError as error:
            raise ShortcutsCommandError(
                f"Failed to {action}: command not found: {self._command}"
            ) from error
        except subprocess.TimeoutExpired as error:
            raise ShortcutsCommandError(
                f"Failed to {action}: timed out after {error.timeout} seconds"
            ) from error
        except OSError as error:
            raise ShortcutsCommandError(f"Failed to {action}: {error}") from error


def _describe_failure(completed: subprocess.CompletedProcess[str]) -> str:
    detail = (completed.stderr or "").strip()
    if detail:
        return detail
    return f"exit status {completed.returncode}"
