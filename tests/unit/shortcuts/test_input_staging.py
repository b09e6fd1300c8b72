from __future__ import annotations

from pathlib import Path

import pytest

from shortcuts_mcp.shortcuts import InputPathNotFoundError, looks_like_path, staged_input


def test_missing_input_uses_placeholder(tmp_path: Path) -> None:
    with staged_input(None, temp_dir=tmp_path) as path:
        assert path.read_text(encoding="utf-8") == " "


def test_empty_input_uses_placeholder(tmp_path: Path) -> None:
    with staged_input("", temp_dir=tmp_path) as path:
        assert path.read_text(encoding="utf-8") == " "


def test_inline_text_is_written_to_scoped_temp_file(tmp_path: Path) -> None:
    with staged_input("buy milk", temp_dir=tmp_path) as path:
        assert path.parent == tmp_path
        assert path.name.startswith("shortcut-input-")
        assert path.read_text(encoding="utf-8") == "buy milk"

    assert not path.exists()


def test_temp_files_are_unique_per_call(tmp_path: Path) -> None:
    with staged_input("one", temp_dir=tmp_path) as first:
        with staged_input("two", temp_dir=tmp_path) as second:
            assert first != second


def test_temp_file_is_removed_when_run_fails(tmp_path: Path) -> None:
    captured: list[Path] = []
    with pytest.raises(RuntimeError):
        with staged_input("text", temp_dir=tmp_path) as path:
            captured.append(path)
            raise RuntimeError("boom")

    assert not captured[0].exists()


def test_existing_path_is_used_in_place(tmp_path: Path) -> None:
    document = tmp_path / "input.txt"
    document.write_text("contents", encoding="utf-8")

    with staged_input(str(document)) as path:
        assert path == document

    assert document.exists()


def test_missing_path_raises_before_yielding() -> None:
    with pytest.raises(InputPathNotFoundError) as caught:
        with staged_input("missing/dir/file.txt"):
            raise AssertionError("should not enter")

    assert str(caught.value) == "Input file does not exist: missing/dir/file.txt"


def test_path_detection_uses_separator() -> None:
    assert looks_like_path("/tmp/file")
    assert looks_like_path("relative/file")
    assert not looks_like_path("plain text")
