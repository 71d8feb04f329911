"""The small printf-style formatter used by the bare-metal ARMv8 harness.

Only a handful of conversions are understood: ``%d``, ``%u``, ``%x``, ``%b``,
``%p``, ``%s`` and ``%c``, optionally preceded by a pad width (a leading ``0``
pads with zeros) and an ``l`` that selects 64-bit integer arguments.  Output
is limited to ``size - 1`` characters, as with a buffer that keeps room for
its terminator.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from typing import Any

PRINTF_BUFFER_SIZE = 0x1000

_U32 = 0xFFFFFFFF
_U64 = (1 << 64) - 1
_SIGN64 = 1 << 63
_DIGITS = "0123456789abcdefghijklmnopqrstuvwxyz"


def _next_arg(args: Iterator[Any]) -> Any:
    try:
        return next(args)
    except StopIteration:
        raise ValueError("too few arguments for format") from None


def _int_arg(args: Iterator[Any], spec: str) -> int:
    value = _next_arg(args)
    if not isinstance(value, int):
        raise TypeError(f"%{spec} needs an integer, not {type(value).__name__}")
    return value


def _append_num(limit: int, value: int, base: int, signed: bool, pad: int, pad_char: str) -> str:
    # Characters are produced in the order they would be prepended; a sign is
    # prepended first and therefore ends up after the digits.
    produced: list[str] = []
    if pad >= limit:
        pad = limit - 1
    if signed and value & _SIGN64:
        produced.append("-")
        value = (-value) & _U64
    if value > 0:
        while value > 0 and len(produced) < limit:
            produced.append(_DIGITS[value % base])
            value //= base
    elif len(produced) < limit:
        produced.append("0")
    pad -= len(produced)
    while pad > 0 and len(produced) < limit:
        produced.append(pad_char)
        pad -= 1
    return "".join(reversed(produced))


def _append_str(limit: int, text: str, pad: int, pad_char: str) -> str:
    piece = text[:max(limit, 0)]
    width = min(pad, limit)
    if len(piece) < width:
        piece += pad_char * (width - len(piece))
    return piece


def vsnprintf(fmt: str, args: Iterable[Any] = (), size: int = PRINTF_BUFFER_SIZE) -> str:
    """Format ``args`` according to ``fmt`` into at most ``size - 1`` characters."""
    if size < 0:
        raise ValueError("buffer size must not be negative")
    if size == 0:
        return ""
    fmt = fmt.split("\0", 1)[0]
    arg_iter = iter(args)
    out: list[str] = []
    count = 0
    pos = 0
    end = len(fmt)

    while pos < end and count < size - 1:
        ch = fmt[pos]
        if ch != "%":
            out.append(ch)
            count += 1
            pos += 1
            continue

        pad_size = 0
        pad_char = " "
        wide = False
        spec = ""
        while True:
            pos += 1
            if pos >= end:
                break
            spec = fmt[pos]
            if spec == "0":
                if pad_size > 0:
                    pad_size *= 10
                else:
                    pad_char = "0"
            elif "1" <= spec <= "9":
                pad_size = pad_size * 10 + int(spec)
            elif spec == "l":
                wide = True
            else:
                break
        if pos >= end:
            break

        remaining = size - 1 - count
        if spec in "du":
            raw = _int_arg(arg_iter, spec)
            if wide:
                value = raw & _U64
            elif spec == "u":
                value = raw & _U32
            else:
                value = raw & _U32
                if value & 0x80000000:
                    value |= _U64 ^ _U32
            piece = _append_num(remaining, value, 10, spec == "d", pad_size, pad_char)
        elif spec in "bxp":
            raw = _int_arg(arg_iter, spec)
            value = raw & (_U64 if wide or spec == "p" else _U32)
            piece = ""
            if spec == "p":
                piece = _append_str(remaining, "0x", 0, " ")
            piece += _append_num(
                remaining - len(piece), value, 2 if spec == "b" else 16, False, pad_size, pad_char
            )
        elif spec == "s":
            text = _next_arg(arg_iter)
            if not isinstance(text, str):
                raise TypeError(f"%s needs a string, not {type(text).__name__}")
            piece = _append_str(remaining, text.split("\0", 1)[0], pad_size, pad_char)
        elif spec == "c":
            raw = _next_arg(arg_iter)
            if isinstance(raw, str):
                if len(raw) != 1:
                    raise TypeError("%c needs a single character")
                piece = raw
            elif isinstance(raw, int):
                piece = chr(raw & 0xFF)
            else:
                raise TypeError(f"%c needs a character, not {type(raw).__name__}")
        else:
            piece = spec

        out.append(piece)
        count += len(piece)
        pos += 1

    return "".join(out)