"""Tool name derivation for shortcut display names."""

from __future__ import annotations

import re
from collections.abc import Collection
from typing import Final

TOOL_NAME_PREFIX: Final[str] = "run_shortcut_"
MAX_TOOL_NAME_LENGTH: Final[int] = 64

_DISALLOWED_PATTERN: Final[re.Pattern[str]] = re.compile(r"[^a-z0-9_]")
_UNDERSCORE_RUN_PATTERN: Final[re.Pattern[str]] = re.compile(r"_+")


def token_budget(prefix: str = TOOL_NAME_PREFIX) -> int:
    """Return the characters left for a token once ``prefix`` is applied."""
    return MAX_TOOL_NAME_LENGTH - len(prefix)


MAX_SANITIZED_LENGTH: Final[int] = token_budget()


def sanitize_shortcut_name(name: str, max_length: int = MAX_SANITIZED_LENGTH) -> str:
    """Reduce a display name to a lowercase ``[a-z0-9_]`` token within ``max_length``.

    All-punctuation input yields the empty token; callers decide what that means.
    """
    sanitized = _DISALLOWED_PATTERN.sub("_", name.lower())
    sanitized = _UNDERSCORE_RUN_PATTERN.sub("_", sanitized).strip("_")
    if len(sanitized) > max_length:
        # may leave the token one character under budget
        sanitized = sanitized[:max_length].removesuffix("_")
    return sanitized


def generate_unique_sanitized_name(
    name: str,
    existing: Collection[str],
    max_length: int = MAX_SANITIZED_LENGTH,
) -> str:
    """Return a sanitized token for ``name`` that is not in ``existing``.

    Collisions get a ``_<n>`` suffix counting up from 1. The base is cut back
    per candidate so base plus suffix stays within ``max_length``.
    """
    base = sanitize_shortcut_name(name, max_length=max_length)
    candidate = base
    counter = 1
    while candidate in existing:
        suffix = f"_{counter}"
        if len(base) + len(suffix) > max_length:
            candidate = base[: max(0, max_length - len(suffix))] + suffix
        else:
            candidate = base + suffix
        counter += 1
    return candidate


def tool_name_for(token: str, prefix: str = TOOL_NAME_PREFIX) -> str:
    """Return the dynamic tool name for a token."""
    return f"{prefix}{token}"


def token_from_tool_name(tool_name: str, prefix: str = TOOL_NAME_PREFIX) -> str | None:
    """Strip the dynamic tool prefix, or return None when it is absent."""
    if not tool_name.startswith(prefix):
        return None
    return tool_name[len(prefix) :]
