"""Catalog entry models."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Final

IDENTIFIER_SUFFIX_PATTERN: Final[re.Pattern[str]] = re.compile(
    r"^(?P<label>.*\S)\s+\((?P<identifier>[0-9A-F][0-9A-F-]*)\)$"
)


@dataclass(slots=True, frozen=True)
class ShortcutName:
    """Display label plus optional catalog-assigned identifier."""

    label: str
    identifier: str | None = None


def parse_shortcut_name(raw: str) -> ShortcutName:
    """Split ``"Label (IDENTIFIER)"`` into its parts.

    Names without a trailing uppercase hex/hyphen identifier are returned whole.
    """
    match = IDENTIFIER_SUFFIX_PATTERN.match(raw)
    if match is None:
        return ShortcutName(label=raw)
    return ShortcutName(label=match.group("label"), identifier=match.group("identifier"))


@dataclass(slots=True, frozen=True)
class CatalogEntry:
    """One enumerated shortcut and its assigned tool token."""

    name: str
    token: str
    label: str
    identifier: str | None = None

    @property
    def run_target(self) -> str:
        """Return the argument handed to the shortcuts command."""
        if self.identifier is not None:
            return self.identifier
        return self.name
