"""Instruction templates and the field descriptors they draw values from."""

from __future__ import annotations

import enum
from collections.abc import Iterator
from dataclasses import dataclass, field


@dataclass(eq=False)
class FieldDescriptor:
    """A named field and the list of textual values it can take."""

    name: str
    values: list[str] = field(default_factory=list)

    def add_value(self, value: str) -> None:
        """Append a possible value."""
        self.values.append(value)

    def __len__(self) -> int:
        return len(self.values)

    def __getitem__(self, index: int) -> str:
        return self.values[index]


class FieldDescriptorCollection:
    """Field descriptors by name; indexing creates a descriptor on first use."""

    def __init__(self) -> None:
        self._descriptors: dict[str, FieldDescriptor] = {}

    def __getitem__(self, name: str) -> FieldDescriptor:
        descriptor = self._descriptors.get(name)
        if descriptor is None:
            descriptor = self._descriptors[name] = FieldDescriptor(name)
        return descriptor

    def __contains__(self, name: object) -> bool:
        return name in self._descriptors

    def at(self, name: str) -> FieldDescriptor:
        """Return an existing descriptor, raising KeyError if there is none."""
        return self._descriptors[name]

    def __iter__(self) -> Iterator[str]:
        return iter(sorted(self._descriptors))

    def __len__(self) -> int:
        return len(self._descriptors)


class TemplateChunk:
    """Base of all template chunks; chunks compare and hash by identity."""

    __slots__ = ()


@dataclass(eq=False, frozen=True)
class StringChunk(TemplateChunk):
    """Literal text."""

    data: str


@dataclass(eq=False, frozen=True)
class FieldChunk(TemplateChunk):
    """A reference to a field whose value is chosen when printing."""

    descriptor: FieldDescriptor


@dataclass(eq=False, frozen=True)
class ThisChunk(TemplateChunk):
    """The current location."""


@dataclass(eq=False, frozen=True)
class BackRefChunk(TemplateChunk):
    """Repeats whatever an earlier chunk of the same template produced."""

    ref: TemplateChunk


class ExpressionKind(enum.Enum):
    """Operators of binary template expressions."""

    PLUS = "+"


@dataclass(eq=False, frozen=True)
class BinaryExpressionChunk(TemplateChunk):
    """A binary expression over two chunks."""

    kind: ExpressionKind
    lhs: TemplateChunk
    rhs: TemplateChunk


@dataclass
class Template:
    """An ordered sequence of chunks produced under a named context."""

    chunks: list[TemplateChunk] = field(default_factory=list)
    context: str = ""

    def add_chunk(self, chunk: TemplateChunk) -> None:
        """Append a chunk."""
        self.chunks.append(chunk)

    def chunk_at(self, index: int) -> TemplateChunk:
        """Return the chunk at a non-negative index."""
        if not 0 <= index < len(self.chunks):
            raise IndexError(f"chunk index {index} out of range")
        return self.chunks[index]

    def __iter__(self) -> Iterator[TemplateChunk]:
        return iter(self.chunks)

    def __len__(self) -> int:
        return len(self.chunks)


TemplateCollection = list[Template]