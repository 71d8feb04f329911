import io
import random

import pytest

from insnfuzz.target import AssemblyTarget
from insnfuzz.templates import StringChunk, Template


class _Recorder(AssemblyTarget):
    def print_header(self):
        self.write("H")

    def print_footer(self):
        self.write("F")

    def print_template(self, template):
        self.write("[")
        self.print_bare_template(template)
        self.write("]")

    def print_bare_template(self, template):
        for chunk in template:
            self.write(chunk.data)


def _template(text):
    return Template(chunks=[StringChunk(text)])


def test_abstract_base_cannot_be_created():
    with pytest.raises(TypeError):
        AssemblyTarget(io.StringIO())


def test_collection_repeats_each_template_ten_times_by_default():
    out = io.StringIO()
    target = _Recorder(out, random.Random(1))
    target.print_template_collection([_template("a"), _template("b")])
    assert out.getvalue() == "H" + "[a]" * 10 + "[b]" * 10 + "F"
    assert target.processed_templates == 20


def test_collection_respects_count_per_template():
    out = io.StringIO()
    target = _Recorder(out)
    target.count_per_template = 3
    target.print_template_collection([_template("x")])
    assert out.getvalue() == "H[x][x][x]F"
    assert target.processed_templates == 3


def test_processed_count_is_reset_between_collections():
    out = io.StringIO()
    target = _Recorder(out)
    target.count_per_template = 2
    target.print_template_collection([_template("x")])
    target.print_template_collection([])
    assert target.processed_templates == 0
    assert out.getvalue().endswith("HF")


def test_zero_count_writes_only_header_and_footer():
    out = io.StringIO()
    target = _Recorder(out)
    target.count_per_template = 0
    AssemblyTarget.print_template_collection(target, [_template("x")])
    assert target.processed_templates == 0
    assert out.getvalue() == "HF"


def test_write_is_cut_to_one_print_buffer():
    out = io.StringIO()
    target = _Recorder(out)
    target.count_per_template = 1
    target.print_template_collection([_template("z" * 1000)])
    assert target.processed_templates == 1
    assert out.getvalue() == "H[" + "z" * 255 + "]F"


def test_short_write_passes_through():
    out = io.StringIO()
    target = _Recorder(out)
    target.count_per_template = 1
    target.print_template_collection([_template("mov r0, r1\n")])
    assert target.processed_templates == 1
    assert out.getvalue() == "H[mov r0, r1\n]F"