from __future__ import annotations

import subprocess
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from pathlib import Path

import pytest

from shortcuts_mcp.config import CliOverrides
from shortcuts_mcp.server import StdioServer, create_server


@dataclass
class FakeShortcutsRunner:
    """Stands in for subprocess.run against the shortcuts command."""

    names: list[str] = field(default_factory=list)
    list_returncode: int = 0
    list_stderr: str = ""
    view_returncode: int = 0
    view_stderr: str = ""
    run_returncode: int = 0
    run_stdout: str = ""
    run_stderr: str = ""
    error: BaseException | None = None
    calls: list[list[str]] = field(default_factory=list)
    call_options: list[dict[str, object]] = field(default_factory=list)
    input_paths: list[Path] = field(default_factory=list)
    input_payloads: list[str] = field(default_factory=list)

    def __call__(
        self, args: Sequence[str], **options: object
    ) -> subprocess.CompletedProcess[str]:
        command = list(args)
        self.calls.append(command)
        self.call_options.append(options)
        if self.error is not None:
            raise self.error
        action = command[1]
        if action == "list":
            stdout = "".join(f"{name}\n" for name in self.names)
            return subprocess.CompletedProcess(
                command, self.list_returncode, stdout, self.list_stderr
            )
        if action == "view":
            return subprocess.CompletedProcess(command, self.view_returncode, "", self.view_stderr)
        if action == "run":
            input_path = Path(command[command.index("--input-path") + 1])
            self.input_paths.append(input_path)
            self.input_payloads.append(input_path.read_text(encoding="utf-8"))
            return subprocess.CompletedProcess(
                command, self.run_returncode, self.run_stdout, self.run_stderr
            )
        raise AssertionError(f"unexpected shortcuts action: {action}")

    def actions(self) -> list[str]:
        return [call[1] for call in self.calls]

    def run_targets(self) -> list[str]:
        return [call[2] for call in self.calls if call[1] == "run"]


@pytest.fixture
def fake_runner() -> FakeShortcutsRunner:
    return FakeShortcutsRunner()


@pytest.fixture
def make_server(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
    fake_runner: FakeShortcutsRunner,
) -> Callable[..., StdioServer]:
    monkeypatch.chdir(tmp_path)

    def factory(**overrides: object) -> StdioServer:
        return create_server(
            data_dir=str(tmp_path / "data"),
            cli_overrides=CliOverrides(**overrides),  # type: ignore[arg-type]
            environ={},
            runner=fake_runner,
        )

    return factory
