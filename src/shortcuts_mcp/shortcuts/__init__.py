"""Execution bridge for the macOS shortcuts command."""

from .cli import CommandRunner, ShortcutsCli, ShortcutsCommandError
from .inputs import InputPathNotFoundError, looks_like_path, staged_input

__all__ = [
    "CommandRunner",
    "InputPathNotFoundError",
    "ShortcutsCli",
    "ShortcutsCommandError",
    "looks_like_path",
    "staged_input",
]
