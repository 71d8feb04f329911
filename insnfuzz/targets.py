"""Assembler output formats for the supported instruction sets."""

from __future__ import annotations

import random
from typing import Optional, TextIO

from .registry import ComponentRegistry
from .target import AssemblyTarget
from .templates import (
    BackRefChunk,
    BinaryExpressionChunk,
    ExpressionKind,
    FieldChunk,
    StringChunk,
    Template,
    TemplateChunk,
    ThisChunk,
)

_ARMV8_CONTEXTS = {
    "floating-point-32": 1,
    "floating-point-64": 2,
    "floating-point-32-nans": 3,
    "floating-point-64-nans": 4,
    "floating-point-32-infs": 5,
    "floating-point-64-infs": 6,
}

_X86_CONTEXTS = {
    "bdiv": 1,
    "wdiv": 2,
    "ddiv": 3,
    "qdiv": 4,
}


def armv8_context_id(context: str) -> int:
    """Numeric id of an ARMv8 test context; 0 for the default context."""
    return _ARMV8_CONTEXTS.get(context, 0)


def x86_context_id(context: str) -> int:
    """Numeric id of an x86 test context; 0 for the default context."""
    return _X86_CONTEXTS.get(context, 0)


class _FlatTarget(AssemblyTarget):
    """Shared printing of templates made only of text and field chunks."""

    def _print_flat(self, template: Template) -> None:
        for chunk in template:
            if isinstance(chunk, StringChunk):
                self.write(chunk.data)
            elif isinstance(chunk, FieldChunk):
                values = chunk.descriptor.values
                self.write(values[self.rng.randrange(len(values))])
            else:
                self.write("???")

    def _print_sized(self, template: Template, size_line: str) -> None:
        self.write(size_line)
        self.write("1:\n")
        self.print_bare_template(template)
        self.write("\n")
        self.write("2:\n")


class ArmTarget(_FlatTarget):
    """ARM (A32) output."""

    def print_header(self) -> None:
        self.write(".arm\n")
        self.write(".fpu neon\n")
        self.write(".syntax unified\n")
        self.write(".globl instructions_begin\n")
        self.write("instructions_begin:\n")

    def print_footer(self) -> None:
        self.write(".globl instructions_end\n")
        self.write("instructions_end:\n")
        self.write(".word 0\n")
        self.write("instructions_count:\n")

    def print_bare_template(self, template: Template) -> None:
        self._print_flat(template)

    def print_template(self, template: Template) -> None:
        self._print_sized(template, ".byte 2f-1f\n")


class Armv8Target(AssemblyTarget):
    """ARMv8 (A64) output, with context ids, expressions and back-references."""

    def print_header(self) -> None:
        self.write(".data\n")
        self.write(".globl instructions_begin\n")
        self.write("instructions_begin:\n")

    def print_footer(self) -> None:
        self.write(".globl instructions_end\n")
        self.write("instructions_count:\n")

    def _print_chunk(self, chunk: TemplateChunk, backrefs: dict[TemplateChunk, str]) -> None:
        if isinstance(chunk, StringChunk):
            self.write(chunk.data)
        elif isinstance(chunk, FieldChunk):
            values = chunk.descriptor.values
            value = values[self.rng.randrange(len(values))]
            backrefs[chunk] = value
            self.write(value)
        elif isinstance(chunk, ThisChunk):
            self.write(".")
        elif isinstance(chunk, BackRefChunk):
            try:
                self.write(backrefs[chunk.ref])
            except KeyError:
                raise KeyError("back-reference to a chunk that produced no value") from None
        elif isinstance(chunk, BinaryExpressionChunk):
            self.write("(")
            self._print_chunk(chunk.lhs, backrefs)
            self.write(" + " if chunk.kind is ExpressionKind.PLUS else " ??? ")
            self._print_chunk(chunk.rhs, backrefs)
            self.write(")")

    def print_bare_template(self, template: Template) -> None:
        backrefs: dict[TemplateChunk, str] = {}
        for chunk in template:
            self._print_chunk(chunk, backrefs)

    def print_template(self, template: Template) -> None:
        self.write(".word 2f-1f\n")
        self.write(f".word {armv8_context_id(template.context)}\n")
        self.write("1:\n")
        self.print_bare_template(template)
        self.write("\n")
        self.write("2:\n")


class RiscvTarget(_FlatTarget):
    """RISC-V output; every instruction is framed as four bytes."""

    def print_header(self) -> None:
        self.write(".globl instructions_begin\n")
        self.write("instructions_begin:\n")

    def print_footer(self) -> None:
        self.write(".globl instructions_end\n")
        self.write("instructions_count:\n")

    def print_bare_template(self, template: Template) -> None:
        self._print_flat(template)

    def print_template(self, template: Template) -> None:
        self._print_sized(template, ".byte 0x4\n")


class ThumbTarget(_FlatTarget):
    """Thumb-2 output."""

    def print_header(self) -> None:
        self.write(".thumb\n")
        self.write(".syntax unified\n")
        self.write(".fpu neon\n")
        self.write(".globl instructions_begin\n")
        self.write("instructions_begin:\n")

    def print_footer(self) -> None:
        self.write(".globl instructions_end\n")
        self.write("instructions_count:\n")

    def print_bare_template(self, template: Template) -> None:
        self._print_flat(template)

    def print_template(self, template: Template) -> None:
        self._print_sized(template, ".byte 2f-1f\n")


class X86Target(_FlatTarget):
    """x86 output, with a context id byte after each size byte."""

    def print_header(self) -> None:
        self.write(".text\n")
        self.write(".globl instructions_begin\n")
        self.write("instructions_begin:\n")

    def print_footer(self) -> None:
        self.write(".globl instructions_end\n")
        self.write("instructions_end:\n")
        self.write(".word 0\n")
        self.write("instructions_count:\n")

    def print_bare_template(self, template: Template) -> None:
        self._print_flat(template)

    def print_template(self, template: Template) -> None:
        self._print_sized(template, f".byte 2f-1f\n.byte {x86_context_id(template.context)}\n")


_REGISTRY = ComponentRegistry()
_REGISTRY.register("arm", "ARM", ArmTarget)
_REGISTRY.register("armv8", "ARMv8", Armv8Target)
_REGISTRY.register("riscv", "RISC-V", RiscvTarget)
_REGISTRY.register("thumb2", "Thumb-2", ThumbTarget)
_REGISTRY.register("x86", "x86", X86Target)


def create_target(name: str, stream: TextIO, rng: Optional[random.Random] = None) -> AssemblyTarget:
    """Create the output format called ``name``; raises UnknownComponentError."""
    return _REGISTRY.instantiate(name, stream, rng)


def available_targets() -> list[str]:
    """Names of all output formats, sorted."""
    return list(_REGISTRY)