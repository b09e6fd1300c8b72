"""Identity registry mapping shortcut names to unique tool tokens."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from shortcuts_mcp.catalog.models import CatalogEntry, ShortcutName, parse_shortcut_name
from shortcuts_mcp.catalog.naming import MAX_SANITIZED_LENGTH, generate_unique_sanitized_name


class CatalogLookupError(LookupError):
    """Raised when no catalog entry owns a token."""

    def __init__(self, token: str) -> None:
        super().__init__(f"No shortcut found for sanitized name: {token}")
        self.token = token


@dataclass(slots=True, frozen=True)
class CatalogSnapshot:
    """Immutable generation of the registry with forward and reverse views."""

    entries: tuple[CatalogEntry, ...] = ()
    by_name: Mapping[str, CatalogEntry] = field(default_factory=lambda: MappingProxyType({}))
    by_token: Mapping[str, CatalogEntry] = field(default_factory=lambda: MappingProxyType({}))

    def __len__(self) -> int:
        return len(self.entries)


def build_snapshot(
    names: Iterable[str],
    max_length: int = MAX_SANITIZED_LENGTH,
    parse_identifiers: bool = False,
) -> CatalogSnapshot:
    """Assign tokens to ``names`` in order and return a new snapshot.

    A repeated name claims its own token like any other name; ``by_name``
    keeps the first entry for that name. Identifier suffixes are only parsed
    when ``parse_identifiers`` is set, since plain names may end in
    parentheses too.
    """
    claimed: set[str] = set()
    entries: list[CatalogEntry] = []
    by_name: dict[str, CatalogEntry] = {}
    by_token: dict[str, CatalogEntry] = {}
    for name in names:
        # tokens come from the full enumerated string, identifier suffix included
        token = generate_unique_sanitized_name(name, claimed, max_length=max_length)
        parsed = parse_shortcut_name(name) if parse_identifiers else ShortcutName(label=name)
        entry = CatalogEntry(
            name=name,
            token=token,
            label=parsed.label,
            identifier=parsed.identifier,
        )
        claimed.add(token)
        entries.append(entry)
        by_name.setdefault(name, entry)
        by_token[token] = entry
    return CatalogSnapshot(
        entries=tuple(entries),
        by_name=MappingProxyType(by_name),
        by_token=MappingProxyType(by_token),
    )


class ShortcutRegistry:
    """Owns the current catalog snapshot; ``refresh`` swaps it wholesale."""

    def __init__(
        self, max_length: int = MAX_SANITIZED_LENGTH, parse_identifiers: bool = False
    ) -> None:
        self._max_length = max_length
        self._parse_identifiers = parse_identifiers
        self._snapshot = CatalogSnapshot()

    def refresh(self, names: Iterable[str]) -> CatalogSnapshot:
        """Rebuild all token assignments from a fresh enumeration."""
        snapshot = build_snapshot(
            names, max_length=self._max_length, parse_identifiers=self._parse_identifiers
        )
        self._snapshot = snapshot
        return snapshot

    def snapshot(self) -> CatalogSnapshot:
        """Return the current generation."""
        return self._snapshot

    def lookup_by_token(self, token: str) -> CatalogEntry:
        """Return the entry owning ``token`` or raise CatalogLookupError."""
        entry = self._snapshot.by_token.get(token)
        if entry is None:
            raise CatalogLookupError(token)
        return entry

    def lookup_by_name(self, name: str) -> CatalogEntry | None:
        """Match a full name first, then a display label, then an identifier."""
        snapshot = self._snapshot
        entry = snapshot.by_name.get(name)
        if entry is not None:
            return entry
        for candidate in snapshot.entries:
            if candidate.label == name:
                return candidate
        for candidate in snapshot.entries:
            if candidate.identifier is not None and candidate.identifier == name:
                return candidate
        return None

    def token_for(self, name: str) -> str | None:
        """Return the token assigned to a full external name."""
        entry = self._snapshot.by_name.get(name)
        return entry.token if entry is not None else None

    def all_entries(self) -> tuple[CatalogEntry, ...]:
        """Return entries in enumeration order."""
        return self._snapshot.entries

    def __len__(self) -> int:
        return len(self._snapshot)
