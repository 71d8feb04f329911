"""Base class for writers that emit templates as assembler source."""

from __future__ import annotations

import abc
import random
from collections.abc import Iterable
from typing import Optional, TextIO

from .templates import Template

# Output goes through a fixed 256-byte buffer, one byte of which is the terminator.
_WRITE_LIMIT = 255


class AssemblyTarget(abc.ABC):
    """Writes templates for one instruction set to a text stream."""

    def __init__(self, stream: TextIO, rng: Optional[random.Random] = None) -> None:
        self.stream = stream
        self.rng = rng if rng is not None else random.Random()
        self.count_per_template = 10
        self.processed_templates = 0

    def write(self, text: str) -> None:
        """Write one piece of output, cut to the length of a single print."""
        self.stream.write(text[:_WRITE_LIMIT])

    @abc.abstractmethod
    def print_header(self) -> None:
        """Write what precedes the instructions."""

    @abc.abstractmethod
    def print_footer(self) -> None:
        """Write what follows the instructions."""

    @abc.abstractmethod
    def print_template(self, template: Template) -> None:
        """Write one instance of a template with its framing."""

    @abc.abstractmethod
    def print_bare_template(self, template: Template) -> None:
        """Write one instance of a template with no framing."""

    def print_template_collection(self, templates: Iterable[Template]) -> None:
        """Write a header, every template ``count_per_template`` times, and a footer."""
        self.processed_templates = 0
        self.print_header()
        for template in templates:
            for _ in range(self.count_per_template):
                self.print_template(template)
                self.processed_templates += 1
        self.print_footer()