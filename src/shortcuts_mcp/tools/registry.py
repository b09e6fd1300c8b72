"""Deterministic tool registration primitives."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field

ToolHandler = Callable[[dict[str, object]], dict[str, object]]
DescriptionSource = Callable[[], str]


@dataclass(slots=True, frozen=True)
class ToolDispatchError(Exception):
    """Represents deterministic tool dispatch failures."""

    code: str
    message: str


@dataclass(slots=True, frozen=True)
class ToolSpec:
    """Published description of one tool."""

    name: str
    description: str | DescriptionSource
    input_schema: dict[str, object]

    def to_dict(self) -> dict[str, object]:
        """Return the tools/list representation."""
        description = self.description() if callable(self.description) else self.description
        return {
            "name": self.name,
            "description": description,
            "inputSchema": self.input_schema,
        }


@dataclass(slots=True)
class ToolRegistry:
    """In-memory tool registry preserving deterministic insertion order."""

    _handlers: dict[str, ToolHandler] = field(default_factory=dict)
    _specs: dict[str, ToolSpec] = field(default_factory=dict)

    def register(
        self,
        name: str,
        handler: ToolHandler,
        description: str | DescriptionSource = "",
        input_schema: dict[str, object] | None = None,
    ) -> None:
        """Register a named handler with its published description."""
        self._handlers[name] = handler
        self._specs[name] = ToolSpec(
            name=name,
            description=description,
            input_schema=input_schema or {"type": "object", "properties": {}},
        )

    def get(self, name: str) -> ToolHandler | None:
        """Return a handler by name."""
        return self._handlers.get(name)

    def __contains__(self, name: object) -> bool:
        return name in self._handlers

    def names(self) -> tuple[str, ...]:
        """Return registered tool names in deterministic order."""
        return tuple(self._handlers.keys())

    def specs(self) -> list[dict[str, object]]:
        """Return published tool descriptions in registration order."""
        return [spec.to_dict() for spec in self._specs.values()]

    def dispatch(self, name: str, arguments: dict[str, object]) -> dict[str, object]:
        """Dispatch to a registered tool by name."""
        handler = self.get(name)
        if handler is None:
            raise ToolDispatchError(code="METHOD_NOT_FOUND", message=f"Unknown tool: {name}")
        return handler(arguments)
