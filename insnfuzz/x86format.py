"""Register state and result report for the x86 harness."""

from __future__ import annotations

import struct
from collections.abc import Callable
from dataclasses import dataclass, field

from .descriptor import Descriptor

Engine = Callable[[], int]

GPR_COUNT = 16
XMM_COUNT = 16
XMM_WIDTH = 16
XMM_FILE_SIZE = XMM_COUNT * XMM_WIDTH
_STACK_POINTER = 4
_WORD = 0xFFFFFFFF

_LAYOUT = struct.Struct(f"<Q{GPR_COUNT}Q{XMM_FILE_SIZE}s")


@dataclass
class X86State:
    """Flags, sixteen 64-bit general registers and the raw XMM register file."""

    flags: int = 0
    gprs: tuple = field(default_factory=lambda: (0,) * GPR_COUNT)
    xmm: bytes = field(default_factory=lambda: bytes(XMM_FILE_SIZE))

    def __post_init__(self) -> None:
        self.gprs = tuple(self.gprs)
        self.xmm = bytes(self.xmm)
        if len(self.gprs) != GPR_COUNT:
            raise ValueError(f"gprs must have {GPR_COUNT} entries, not {len(self.gprs)}")
        if len(self.xmm) != XMM_FILE_SIZE:
            raise ValueError(f"xmm file must be {XMM_FILE_SIZE} bytes, not {len(self.xmm)}")

    def xmm_register(self, index: int) -> bytes:
        """The 16 bytes of one XMM register, least significant first."""
        if not 0 <= index < XMM_COUNT:
            raise IndexError(f"XMM register {index} out of range")
        return self.xmm[index * XMM_WIDTH:(index + 1) * XMM_WIDTH]

    @classmethod
    def unpack(cls, data: bytes) -> "X86State":
        """Decode the packed in-memory layout."""
        if len(data) != _LAYOUT.size:
            raise ValueError(f"x86 state needs {_LAYOUT.size} bytes, got {len(data)}")
        values = _LAYOUT.unpack(data)
        return cls(values[0], values[1:1 + GPR_COUNT], values[-1])

    def pack(self) -> bytes:
        """Encode as the packed in-memory layout."""
        return _LAYOUT.pack(self.flags, *self.gprs, self.xmm)


def randomize_x86_state(engine: Engine, context_id: int) -> X86State:
    """Draw a random input state; ``context_id`` keeps division operands in range."""
    gprs = [engine() & _WORD for _ in range(GPR_COUNT)]
    xmm = b"".join(
        struct.pack("<I", engine() & _WORD) for _ in range(XMM_FILE_SIZE // 4)
    )

    if context_id == 1:  # byte division
        gprs[1:] = [engine() & 0xFF for _ in range(1, GPR_COUNT)]
        gprs[0] = engine() & 0xFF
    elif context_id == 2:  # word division
        dividend = engine() & 0xFFFF
        gprs[1:] = [engine() & 0xFFFF for _ in range(1, GPR_COUNT)]
        gprs[0] = dividend & 0xFFFF
        gprs[2] = dividend >> 16
    elif context_id == 3:  # doubleword division
        dividend = engine() & 0xFFFFFFFF
        gprs[1:] = [engine() & 0xFFFFFFFF for _ in range(1, GPR_COUNT)]
        gprs[0] = dividend & 0xFFFFFFFF
        gprs[2] = dividend >> 32
    elif context_id == 4:  # quadword division
        gprs[2] = 0

    return X86State(0, tuple(gprs), xmm)


def format_x86_result(test: Descriptor, input_state: X86State, output_state: X86State) -> str:
    """Report the registers and flags an x86 instruction changed."""
    lines = [f"Test {test.data.hex()}\n"]
    lines.extend(
        f"G{i} {a:016x} != {b:016x}\n"
        for i, (a, b) in enumerate(zip(input_state.gprs, output_state.gprs))
        if i != _STACK_POINTER and a != b
    )
    for i in range(XMM_COUNT):
        before = input_state.xmm_register(i)
        after = output_state.xmm_register(i)
        if before != after:
            lines.append(f"X{i} {before[::-1].hex()} != {after[::-1].hex()}\n")
    if input_state.flags != output_state.flags:
        lines.append(f"EFLAGS: {input_state.flags:08x} -> {output_state.flags:08x}\n")
    lines.append("\n")
    return "".join(lines)