"""Input staging for shortcut runs."""

from __future__ import annotations

import os
import tempfile
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Final

PLACEHOLDER_INPUT: Final[str] = " "
TEMP_INPUT_PREFIX: Final[str] = "shortcut-input-"


class InputPathNotFoundError(Exception):
    """Raised when a path-like input does not exist."""

    def __init__(self, path: str) -> None:
        super().__init__(f"Input file does not exist: {path}")
        self.path = path


def looks_like_path(value: str) -> bool:
    """Return True when the input contains a path separator."""
    if "/" in value:
        return True
    return os.sep != "/" and os.sep in value


@contextmanager
def staged_input(value: str | None, temp_dir: Path | None = None) -> Iterator[Path]:
    """Yield a file path holding the shortcut input.

    Path-like values must already exist and are used as-is. Anything else,
    including a missing value, is written to a private temporary file that is
    removed when the context exits.
    """
    text = PLACEHOLDER_INPUT if value is None or value == "" else value
    if looks_like_path(text):
        candidate = Path(text).expanduser()
        if not candidate.exists():
            raise InputPathNotFoundError(text)
        yield candidate
        return

    fd, raw_path = tempfile.mkstemp(
        prefix=TEMP_INPUT_PREFIX,
        dir=str(temp_dir) if temp_dir is not None else None,
    )
    temp_path = Path(raw_path)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            handle.write(text)
        yield temp_path
    finally:
        temp_path.unlink(missing_ok=True)
