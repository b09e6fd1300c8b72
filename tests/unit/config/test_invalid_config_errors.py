from __future__ import annotations

from pathlib import Path

import pytest

from shortcuts_mcp.config import CliOverrides, load_effective_config


def _load(tmp_path: Path, body: str):
    config_path = tmp_path / "shortcuts_mcp.toml"
    config_path.write_text(body, encoding="utf-8")
    return load_effective_config(
        config_path=config_path,
        overrides=CliOverrides(data_dir=tmp_path),
        environ={},
    )


def test_non_boolean_toggle_is_rejected(tmp_path: Path) -> None:
    with pytest.raises(ValueError, match="tools.inject_shortcut_list' must be a boolean"):
        _load(tmp_path, '[tools]\ninject_shortcut_list = "yes"\n')


def test_section_must_be_a_table(tmp_path: Path) -> None:
    with pytest.raises(ValueError, match="Config section 'tools' must be a table"):
        _load(tmp_path, 'tools = "all"\n')


def test_empty_command_is_rejected(tmp_path: Path) -> None:
    with pytest.raises(ValueError, match="shortcuts.command' must be a non-empty string"):
        _load(tmp_path, '[shortcuts]\ncommand = " "\n')


@pytest.mark.parametrize("value", ["0", "-5", "true", "99999"])
def test_invalid_timeout_is_rejected(tmp_path: Path, value: str) -> None:
    with pytest.raises(ValueError, match="shortcuts.timeout_seconds"):
        _load(tmp_path, f"[shortcuts]\ntimeout_seconds = {value}\n")


def test_invalid_timeout_override_is_rejected(tmp_path: Path) -> None:
    with pytest.raises(ValueError, match="overrides.timeout_seconds"):
        load_effective_config(
            overrides=CliOverrides(data_dir=tmp_path, timeout_seconds=0),
            environ={},
        )


def test_explicit_missing_config_file_is_rejected(tmp_path: Path) -> None:
    with pytest.raises(ValueError, match="Config file does not exist"):
        load_effective_config(config_path=tmp_path / "absent.toml", environ={})
