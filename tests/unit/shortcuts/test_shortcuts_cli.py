from __future__ import annotations

import subprocess
from pathlib import Path

import pytest

from shortcuts_mcp.shortcuts import InputPathNotFoundError, ShortcutsCli, ShortcutsCommandError


def test_list_names_strips_lines_and_skips_blanks(fake_runner) -> None:
    fake_runner.names = ["  Alpha  ", "", "Beta"]
    cli = ShortcutsCli(runner=fake_runner)

    assert cli.list_names() == ["Alpha", "Beta"]
    assert fake_runner.calls == [["shortcuts", "list"]]


def test_list_names_can_request_identifiers(fake_runner) -> None:
    cli = ShortcutsCli(command="/usr/bin/shortcuts", show_identifiers=True, runner=fake_runner)

    cli.list_names()

    assert fake_runner.calls == [["/usr/bin/shortcuts", "list", "--show-identifiers"]]


def test_list_names_treats_stderr_as_failure(fake_runner) -> None:
    fake_runner.names = ["Alpha"]
    fake_runner.list_stderr = "database locked\n"
    cli = ShortcutsCli(runner=fake_runner)

    with pytest.raises(ShortcutsCommandError) as caught:
        cli.list_names()

    assert caught.value.message == "Error listing shortcuts: database locked"


def test_list_names_reports_non_zero_exit(fake_runner) -> None:
    fake_runner.list_returncode = 3
    cli = ShortcutsCli(runner=fake_runner)

    with pytest.raises(ShortcutsCommandError) as caught:
        cli.list_names()

    assert caught.value.message == "Failed to list shortcuts: exit status 3"


def test_missing_executable_is_a_command_error(fake_runner) -> None:
    fake_runner.error = FileNotFoundError("shortcuts")
    cli = ShortcutsCli(runner=fake_runner)

    with pytest.raises(ShortcutsCommandError) as caught:
        cli.list_names()

    assert caught.value.message == "Failed to list shortcuts: command not found: shortcuts"


def test_timeout_is_passed_through_and_reported(fake_runner) -> None:
    fake_runner.error = subprocess.TimeoutExpired(cmd="shortcuts", timeout=5)
    cli = ShortcutsCli(timeout_seconds=5, runner=fake_runner)

    with pytest.raises(ShortcutsCommandError) as caught:
        cli.view("Alpha")

    assert fake_runner.call_options[0]["timeout"] == 5
    assert caught.value.message == "Failed to open shortcut: timed out after 5 seconds"


def test_view_returns_confirmation(fake_runner) -> None:
    cli = ShortcutsCli(runner=fake_runner)

    result = cli.view("Alpha")

    assert result == {"success": True, "message": "Opened shortcut: Alpha"}
    assert fake_runner.calls == [["shortcuts", "view", "Alpha"]]


def test_view_treats_stderr_as_failure(fake_runner) -> None:
    fake_runner.view_stderr = "not found"
    cli = ShortcutsCli(runner=fake_runner)

    with pytest.raises(ShortcutsCommandError) as caught:
        cli.view("Missing")

    assert caught.value.message == "Error opening shortcut: not found"


def test_run_returns_trimmed_output(fake_runner) -> None:
    fake_runner.run_stdout = "  42 degrees\n"
    cli = ShortcutsCli(runner=fake_runner)

    assert cli.run("Weather", "Paris") == {"success": True, "output": "42 degrees"}
    assert fake_runner.input_payloads == ["Paris"]


def test_run_without_output_returns_message(fake_runner) -> None:
    cli = ShortcutsCli(runner=fake_runner)

    assert cli.run("Lights Off") == {"success": True, "message": "Ran shortcut: Lights Off"}
    assert fake_runner.input_payloads == [" "]


def test_run_removes_temporary_input_after_completion(fake_runner) -> None:
    cli = ShortcutsCli(runner=fake_runner)

    cli.run("Echo", "hello")

    assert fake_runner.input_paths[0].name.startswith("shortcut-input-")
    assert not fake_runner.input_paths[0].exists()


def test_run_passes_existing_file_path_unchanged(fake_runner, tmp_path: Path) -> None:
    document = tmp_path / "note.txt"
    document.write_text("file body", encoding="utf-8")
    cli = ShortcutsCli(runner=fake_runner)

    cli.run("Summarize", str(document))

    assert fake_runner.calls == [
        ["shortcuts", "run", "Summarize", "--input-path", str(document)],
    ]
    assert document.exists()


def test_run_rejects_missing_input_path_before_running(fake_runner) -> None:
    cli = ShortcutsCli(runner=fake_runner)

    with pytest.raises(InputPathNotFoundError):
        cli.run("Summarize", "/definitely/not/here.txt")

    assert fake_runner.calls == []


def test_run_failure_carries_stderr(fake_runner) -> None:
    fake_runner.run_returncode = 1
    fake_runner.run_stderr = "Shortcut not found\n"
    cli = ShortcutsCli(runner=fake_runner)

    with pytest.raises(ShortcutsCommandError) as caught:
        cli.run("Missing")

    assert caught.value.message == "Failed to run shortcut: Shortcut not found"
    assert caught.value.stderr == "Shortcut not found\n"


def test_run_ignores_stderr_when_exit_status_is_zero(fake_runner) -> None:
    fake_runner.run_stdout = "done"
    fake_runner.run_stderr = "warning: slow"
    cli = ShortcutsCli(runner=fake_runner)

    assert cli.run("Slow") == {"success": True, "output": "done"}
