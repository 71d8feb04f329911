"""A registry of named component factories."""

from __future__ import annotations

from collections.abc import Callable, Iterator
from dataclasses import dataclass
from typing import Any

_RULE = "=" * 80


class UnknownComponentError(LookupError):
    """No component is registered under the requested name."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Could not instantiate component {name}")
        self.name = name


@dataclass(frozen=True)
class _Entry:
    factory: Callable[..., Any]
    description: str


class ComponentRegistry:
    """Maps component names to factories and descriptions."""

    def __init__(self) -> None:
        self._entries: dict[str, _Entry] = {}

    def register(self, name: str, description: str, factory: Callable[..., Any]) -> None:
        """Register ``factory`` under ``name``, replacing any earlier entry."""
        self._entries[name] = _Entry(factory, description)

    def instantiate(self, name: str, *args: Any, **kwargs: Any) -> Any:
        """Create the component called ``name`` with the given arguments."""
        try:
            entry = self._entries[name]
        except KeyError:
            raise UnknownComponentError(name) from None
        return entry.factory(*args, **kwargs)

    def dump(self) -> str:
        """Describe every registered component, ordered by name."""
        lines = ["Registered Components: ", _RULE]
        lines.extend(
            f"\t{name}\t\t{self._entries[name].description}" for name in self
        )
        lines.append(_RULE)
        return "\n".join(lines) + "\n"

    def __contains__(self, name: object) -> bool:
        return name in self._entries

    def __iter__(self) -> Iterator[str]:
        return iter(sorted(self._entries))

    def __len__(self) -> int:
        return len(self._entries)