"""Register states and result reports for the ARM and Thumb-2 harnesses."""

from __future__ import annotations

import math
import struct
from collections.abc import Callable
from dataclasses import dataclass, field

from .descriptor import Descriptor

Engine = Callable[[], int]

MEMORY_SIZE = 1024
_WORD = 0xFFFFFFFF
_CPSR_IGNORED = ~(1 << 8) & _WORD
_FPSCR_FLAGS = 0xF0000000


def _zeros(count: int) -> tuple:
    return (0,) * count


def _check_length(name: str, values: tuple, count: int) -> tuple:
    values = tuple(values)
    if len(values) != count:
        raise ValueError(f"{name} must have {count} entries, not {len(values)}")
    return values


def _divide(numerator: float, denominator: float) -> float:
    if denominator == 0:
        return math.nan if numerator == 0 else math.inf
    return numerator / denominator


def _flags(engine: Engine) -> int:
    return (engine() & 0xF) << 28


def _instruction_word(test: Descriptor) -> int:
    return int.from_bytes(test.data[:4].ljust(4, b"\0"), "little")


def _cxx_double(value: float) -> str:
    return "%g" % value


def swap_halfwords(insn: int) -> int:
    """Exchange the two 16-bit halves of a 32-bit word."""
    return ((insn & 0xFFFF) << 16) | ((insn & 0xFFFF0000) >> 16)


def format_test_header(test: Descriptor) -> str:
    """The 'Test' line of a Thumb-2 style report."""
    insn = _instruction_word(test)
    if test.size == 4:
        return f"Test {swap_halfwords(insn):08x}\n"
    return f"Test {insn & 0xFFFF:04x}\n"


# --- ARM (A32 with VFP) ---------------------------------------------------

_ARM_LAYOUT = struct.Struct("<I13II64I")


@dataclass
class ArmState:
    """ARM register state; ``sprs`` holds the 64 single-precision bit patterns."""

    cpsr: int = 0
    gprs: tuple = field(default_factory=lambda: _zeros(13))
    fpscr: int = 0
    sprs: tuple = field(default_factory=lambda: _zeros(64))

    def __post_init__(self) -> None:
        self.gprs = _check_length("gprs", self.gprs, 13)
        self.sprs = _check_length("sprs", self.sprs, 64)

    @classmethod
    def unpack(cls, data: bytes) -> "ArmState":
        """Decode the packed in-memory layout."""
        if len(data) != _ARM_LAYOUT.size:
            raise ValueError(f"ARM state needs {_ARM_LAYOUT.size} bytes, got {len(data)}")
        values = _ARM_LAYOUT.unpack(data)
        return cls(values[0], values[1:14], values[14], values[15:])

    def pack(self) -> bytes:
        """Encode as the packed in-memory layout."""
        return _ARM_LAYOUT.pack(self.cpsr, *self.gprs, self.fpscr, *self.sprs)


def _scaled_ratio(engine: Engine) -> float:
    numerator = (10000 * engine()) & _WORD
    denominator = 10000 * float(engine())
    return _divide(float(numerator), denominator)


def randomize_arm_state(engine: Engine) -> ArmState:
    """Draw a random ARM input state from ``engine``."""
    gprs = tuple(engine() for _ in range(13))
    singles = [
        struct.unpack("<I", struct.pack("<f", _scaled_ratio(engine)))[0]
        for _ in range(32)
    ]
    doubles = b"".join(struct.pack("<d", _scaled_ratio(engine)) for _ in range(16))
    sprs = tuple(singles) + struct.unpack("<32I", doubles)
    cpsr = _flags(engine)
    fpscr = _flags(engine)
    return ArmState(cpsr, gprs, fpscr, sprs)


def format_arm_result(test: Descriptor, input_state: ArmState, output_state: ArmState) -> str:
    """Report the registers an ARM instruction changed."""
    lines = [f"Test {_instruction_word(test):08x}\n"]
    lines.extend(
        f"G{i} {a:08x} -> {b:08x}\n"
        for i, (a, b) in enumerate(zip(input_state.gprs, output_state.gprs))
        if a != b
    )
    lines.extend(
        f"F{i} {a:08x} -> {b:08x}\n"
        for i, (a, b) in enumerate(zip(input_state.sprs, output_state.sprs))
        if a != b
    )
    lines.append(
        f"CPSR {input_state.cpsr & _CPSR_IGNORED:08x} -> {output_state.cpsr & _CPSR_IGNORED:08x}\n"
    )
    lines.append(
        f"FPSCR {input_state.fpscr & _FPSCR_FLAGS:08x} -> {output_state.fpscr & _FPSCR_FLAGS:08x}\n"
    )
    lines.append("\n")
    return "".join(lines)


# --- ARM with a memory window ----------------------------------------------

_MEM_LAYOUT = struct.Struct("<8I16dI")


@dataclass
class MemState:
    """Register state of the memory-access harness."""

    gprs: tuple = field(default_factory=lambda: _zeros(8))
    dprs: tuple = field(default_factory=lambda: (0.0,) * 16)
    cpsr: int = 0

    def __post_init__(self) -> None:
        self.gprs = _check_length("gprs", self.gprs, 8)
        self.dprs = _check_length("dprs", self.dprs, 16)

    @classmethod
    def unpack(cls, data: bytes) -> "MemState":
        """Decode the packed in-memory layout."""
        if len(data) != _MEM_LAYOUT.size:
            raise ValueError(f"memory state needs {_MEM_LAYOUT.size} bytes, got {len(data)}")
        values = _MEM_LAYOUT.unpack(data)
        return cls(values[:8], values[8:24], values[24])

    def pack(self) -> bytes:
        """Encode as the packed in-memory layout."""
        return _MEM_LAYOUT.pack(*self.gprs, *self.dprs, self.cpsr)


@dataclass
class MemoryImage:
    """The memory window as it was filled and as the instruction left it."""

    original: bytes
    current: bytearray

    def __post_init__(self) -> None:
        self.original = bytes(self.original)
        self.current = bytearray(self.current)
        if len(self.original) != len(self.current):
            raise ValueError("original and current memory differ in size")


def randomize_mem_state(engine: Engine, base_address: int) -> tuple[MemState, MemoryImage]:
    """Fill the memory window and draw registers pointing into its middle."""
    original = bytes(engine() & 0xFF for _ in range(MEMORY_SIZE))
    pointer = (base_address + MEMORY_SIZE // 2) & _WORD
    offsets = tuple(((engine() & ~0x3) & _WORD) % (MEMORY_SIZE // 4) for _ in range(4))
    dprs = tuple(_divide(float(engine()), float(engine())) for _ in range(16))
    cpsr = _flags(engine)
    state = MemState((pointer,) * 4 + offsets, dprs, cpsr)
    return state, MemoryImage(original, bytearray(original))


def format_mem_result(
    test: Descriptor, input_state: MemState, output_state: MemState, memory: MemoryImage
) -> str:
    """Report registers, changed memory bytes and flags of the memory harness."""
    lines = [format_test_header(test)]
    lines.extend(
        f"{i} {a:08x} -> {b:x}\n"
        for i, (a, b) in enumerate(zip(input_state.gprs, output_state.gprs))
    )
    lines.extend(
        f"{i} {_cxx_double(a).rjust(8, '0')} -> {_cxx_double(b)}\n"
        for i, (a, b) in enumerate(zip(input_state.dprs, output_state.dprs))
    )
    lines.extend(
        f"{offset:x} {old:x} -> {new:x}\n"
        for offset, (old, new) in enumerate(zip(memory.original, memory.current))
        if old != new
    )
    lines.append(
        f"{input_state.cpsr & _CPSR_IGNORED:08x} -> {output_state.cpsr & _CPSR_IGNORED:08x}\n"
    )
    lines.append("\n")
    return "".join(lines)


# --- Thumb-2 -----------------------------------------------------------------

_THUMB2_LAYOUT = struct.Struct("<13II")


@dataclass
class Thumb2State:
    """Thirteen general registers and the status register."""

    gprs: tuple = field(default_factory=lambda: _zeros(13))
    cpsr: int = 0

    def __post_init__(self) -> None:
        self.gprs = _check_length("gprs", self.gprs, 13)

    @classmethod
    def unpack(cls, data: bytes) -> "Thumb2State":
        """Decode the in-memory layout."""
        if len(data) != _THUMB2_LAYOUT.size:
            raise ValueError(f"Thumb-2 state needs {_THUMB2_LAYOUT.size} bytes, got {len(data)}")
        values = _THUMB2_LAYOUT.unpack(data)
        return cls(values[:13], values[13])

    def pack(self) -> bytes:
        """Encode as the in-memory layout."""
        return _THUMB2_LAYOUT.pack(*self.gprs, self.cpsr)


def randomize_thumb2_state(engine: Engine) -> Thumb2State:
    """Draw a random Thumb-2 input state from ``engine``."""
    gprs = tuple(engine() for _ in range(13))
    return Thumb2State(gprs, _flags(engine))


def format_thumb2_result(
    test: Descriptor, input_state: Thumb2State, output_state: Thumb2State
) -> str:
    """Report every register and the flags of a Thumb-2 run."""
    lines = [format_test_header(test)]
    lines.extend(
        f"{i} {a:08x} -> {b:x}\n"
        for i, (a, b) in enumerate(zip(input_state.gprs, output_state.gprs))
    )
    lines.append(
        f"{input_state.cpsr & _CPSR_IGNORED:08x} -> {output_state.cpsr & _CPSR_IGNORED:08x}\n"
    )
    lines.append("\n")
    return "".join(lines)