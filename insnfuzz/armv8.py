"""Test records, register state and reports of the bare-metal ARMv8 harness."""

from __future__ import annotations

import struct
from dataclasses import dataclass, field

from .cformat import vsnprintf

GREG_COUNT = 31
VREG_COUNT = 32
ITERATIONS = 10
INSTRUCTION_SIZE = 4

_U64 = (1 << 64) - 1
_KEY = 0x1F2F3F4F5F6F7F8F
_FLAG_BITS = 0xF0000000

_TEST_LAYOUT = struct.Struct("<III")
_STATE_LAYOUT = struct.Struct(f"<{GREG_COUNT}QQ{2 * VREG_COUNT}QIII")


@dataclass(frozen=True)
class TestRecord:
    """One test from the input file: encoding size, context id and encoding."""

    __test__ = False

    size: int
    context_id: int
    data: int


@dataclass(frozen=True)
class VectorRegister:
    """A 128-bit vector register as two 64-bit halves."""

    lo: int = 0
    hi: int = 0


@dataclass
class Armv8State:
    """General and vector registers with flags, rounding mode and FPSR."""

    gregs: tuple = field(default_factory=lambda: (0,) * GREG_COUNT)
    vregs: tuple = field(default_factory=lambda: (VectorRegister(),) * VREG_COUNT)
    flags: int = 0
    rounding_mode: int = 0
    fpsr: int = 0
    padding: int = 0

    def __post_init__(self) -> None:
        self.gregs = tuple(self.gregs)
        self.vregs = tuple(self.vregs)
        if len(self.gregs) != GREG_COUNT:
            raise ValueError(f"gregs must have {GREG_COUNT} entries, not {len(self.gregs)}")
        if len(self.vregs) != VREG_COUNT:
            raise ValueError(f"vregs must have {VREG_COUNT} entries, not {len(self.vregs)}")

    @classmethod
    def unpack(cls, data: bytes) -> "Armv8State":
        """Decode the packed in-memory layout."""
        if len(data) != _STATE_LAYOUT.size:
            raise ValueError(
                f"ARMv8 state needs {_STATE_LAYOUT.size} bytes, got {len(data)}"
            )
        values = _STATE_LAYOUT.unpack(data)
        gregs = values[:GREG_COUNT]
        padding = values[GREG_COUNT]
        halves = values[GREG_COUNT + 1:GREG_COUNT + 1 + 2 * VREG_COUNT]
        vregs = tuple(VectorRegister(lo, hi) for lo, hi in zip(halves[::2], halves[1::2]))
        flags, rounding_mode, fpsr = values[-3:]
        return cls(gregs, vregs, flags, rounding_mode, fpsr, padding)

    def pack(self) -> bytes:
        """Encode as the packed in-memory layout."""
        halves = [half for reg in self.vregs for half in (reg.lo, reg.hi)]
        return _STATE_LAYOUT.pack(
            *self.gregs, self.padding, *halves, self.flags, self.rounding_mode, self.fpsr
        )


class DefaultContext:
    """The default input context: every register from a multiplicative sequence."""

    name = "default"

    def __init__(self) -> None:
        self._prev = _KEY

    def random(self) -> int:
        """Next 64-bit value of the sequence."""
        self._prev = (self._prev * _KEY) & _U64
        return self._prev

    def generate(self) -> Armv8State:
        """Draw a fresh input state."""
        gregs = tuple(self.random() for _ in range(GREG_COUNT))
        vregs = []
        for _ in range(VREG_COUNT):
            lo = self.random()
            hi = self.random()
            vregs.append(VectorRegister(lo, hi))
        flags = self.random() & _FLAG_BITS
        return Armv8State(gregs, tuple(vregs), flags & 0xFFFFFFFF, 0, 0)


def read_tests(data: bytes) -> list[TestRecord]:
    """Decode every whole test record in ``data``; trailing bytes are ignored."""
    whole = len(data) - len(data) % _TEST_LAYOUT.size
    return [TestRecord(*values) for values in _TEST_LAYOUT.iter_unpack(data[:whole])]


def input_file_from_cmdline(cmdline: str) -> str:
    """The input file name: everything after the first space of the command line."""
    _, space, rest = cmdline.partition(" ")
    if not space:
        raise ValueError("command line names no input file")
    return rest


def format_results(input_state: Armv8State, output_state: Armv8State) -> str:
    """Report every register and the flags before and after a run."""
    lines = [
        vsnprintf("X%u\t%lx\t%lx\n", [i, a, b])
        for i, (a, b) in enumerate(zip(input_state.gregs, output_state.gregs))
    ]
    lines.extend(
        vsnprintf("V%u\t%lx:%lx\t%lx:%lx\n", [i, a.hi, a.lo, b.hi, b.lo])
        for i, (a, b) in enumerate(zip(input_state.vregs, output_state.vregs))
    )
    lines.append(vsnprintf("FLAGS\t%lx\t%lx\n", [input_state.flags, output_state.flags]))
    return "".join(lines)


def format_run(test: TestRecord, input_state: Armv8State, output_state: Armv8State) -> str:
    """The full report of one run; tests that are not four bytes long are rejected."""
    if test.size != INSTRUCTION_SIZE:
        raise ValueError("Error! Test has wrong size")
    return (
        vsnprintf("Test %x\n", [test.data])
        + format_results(input_state, output_state)
        + "\n"
    )