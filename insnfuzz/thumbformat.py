"""Register states and result reports for the Thumb-2 IT, memory and VFP harnesses."""

from __future__ import annotations

import math
import struct
from collections.abc import Callable
from dataclasses import dataclass, field

from .armformat import MemoryImage, MemState, Thumb2State, format_mem_result, format_test_header
from .descriptor import Descriptor

Engine = Callable[[], int]

_WORD = 0xFFFFFFFF
_CPSR_IGNORED = ~(1 << 8) & _WORD
_FPSCR_FLAGS = 0xF0000000


def _double_text(value: float) -> str:
    return "%g" % value


def _ratio(engine: Engine) -> float:
    numerator = float(engine())
    denominator = float(engine())
    if denominator == 0:
        return math.nan if numerator == 0 else math.inf
    return numerator / denominator


def _flags(engine: Engine) -> int:
    return (engine() & 0xF) << 28


def _gpr_lines(input_gprs: tuple, output_gprs: tuple) -> list[str]:
    return [
        f"{i} {a:08x} -> {b:x}\n"
        for i, (a, b) in enumerate(zip(input_gprs, output_gprs))
    ]


# --- Thumb-2 inside an IT block -------------------------------------------------


def format_thumb2_it_result(
    test: Descriptor, input_state: Thumb2State, output_state: Thumb2State
) -> str:
    """Report every general register of a Thumb-2 IT run; flags are not reported."""
    lines = [format_test_header(test)]
    lines.extend(_gpr_lines(input_state.gprs, output_state.gprs))
    return "".join(lines)


# --- Thumb-2 with a memory window -------------------------------------------------


def format_thumb2_mem_result(
    test: Descriptor, input_state: MemState, output_state: MemState, memory: MemoryImage
) -> str:
    """Report registers, changed memory bytes and flags of a Thumb-2 memory run."""
    return format_mem_result(test, input_state, output_state, memory)


# --- Thumb-2 with VFP ----------------------------------------------------------------

_VFP_LAYOUT = struct.Struct("<8I32dII")


@dataclass
class VfpState:
    """Eight general registers, 32 double registers, and the two status registers."""

    gprs: tuple = field(default_factory=lambda: (0,) * 8)
    dprs: tuple = field(default_factory=lambda: (0.0,) * 32)
    cpsr: int = 0
    fpscr: int = 0

    def __post_init__(self) -> None:
        self.gprs = tuple(self.gprs)
        self.dprs = tuple(self.dprs)
        if len(self.gprs) != 8:
            raise ValueError(f"gprs must have 8 entries, not {len(self.gprs)}")
        if len(self.dprs) != 32:
            raise ValueError(f"dprs must have 32 entries, not {len(self.dprs)}")

    @classmethod
    def unpack(cls, data: bytes) -> "VfpState":
        """Decode the packed in-memory layout."""
        if len(data) != _VFP_LAYOUT.size:
            raise ValueError(f"VFP state needs {_VFP_LAYOUT.size} bytes, got {len(data)}")
        values = _VFP_LAYOUT.unpack(data)
        return cls(values[:8], values[8:40], values[40], values[41])

    def pack(self) -> bytes:
        """Encode as the packed in-memory layout."""
        return _VFP_LAYOUT.pack(*self.gprs, *self.dprs, self.cpsr, self.fpscr)


def randomize_vfp_state(engine: Engine) -> VfpState:
    """Draw a random VFP input state from ``engine``."""
    gprs = tuple(engine() & _WORD for _ in range(8))
    dprs = tuple(_ratio(engine) for _ in range(32))
    cpsr = _flags(engine)
    fpscr = _flags(engine)
    return VfpState(gprs, dprs, cpsr, fpscr)


def format_thumb2_vfp_result(
    test: Descriptor, input_state: VfpState, output_state: VfpState
) -> str:
    """Report every register and the condition flags of a Thumb-2 VFP run."""
    lines = [format_test_header(test)]
    lines.extend(_gpr_lines(input_state.gprs, output_state.gprs))
    lines.extend(
        f"{i} {_double_text(a).rjust(8, '0')} -> {_double_text(b)}\n"
        for i, (a, b) in enumerate(zip(input_state.dprs, output_state.dprs))
    )
    lines.append(
        f"CPSR {input_state.cpsr & _CPSR_IGNORED:08x} -> {output_state.cpsr & _CPSR_IGNORED:08x}\n"
    )
    lines.append(
        f"FPSCR {input_state.fpscr & _FPSCR_FLAGS:08x} -> {output_state.fpscr & _FPSCR_FLAGS:08x}\n"
    )
    lines.append("\n")
    return "".join(lines)