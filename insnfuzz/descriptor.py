"""Test descriptors and the binary stream they are read from."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from typing import BinaryIO


@dataclass(frozen=True)
class Descriptor:
    """An instruction encoding under test, with the id of its input context."""

    data: bytes
    context: int = 0

    def __post_init__(self) -> None:
        object.__setattr__(self, "data", bytes(self.data))
        if not 0 <= self.context <= 0xFF:
            raise ValueError(f"context id {self.context} does not fit in a byte")
        if len(self.data) > 0xFFFFFFFF:
            raise ValueError("descriptor data is too large")

    @property
    def size(self) -> int:
        """Length of the encoding in bytes."""
        return len(self.data)


def _read_exact(stream: BinaryIO, count: int) -> bytes:
    data = stream.read(count)
    if len(data) < count:
        raise EOFError("input ended inside a test descriptor")
    return data


def load_descriptor(stream: BinaryIO) -> Descriptor:
    """Read one descriptor: a size byte, a context byte, then the encoding."""
    size, context = _read_exact(stream, 2)
    return Descriptor(_read_exact(stream, size), context)


def read_descriptors(stream: BinaryIO) -> Iterator[Descriptor]:
    """Yield descriptors until the input ends or a zero-size entry appears."""
    while True:
        try:
            descriptor = load_descriptor(stream)
        except EOFError:
            return
        if descriptor.size == 0:
            return
        yield descriptor