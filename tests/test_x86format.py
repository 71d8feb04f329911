import pytest

from insnfuzz.descriptor import Descriptor
from insnfuzz.mt19937 import MT19937
from insnfuzz.x86format import X86State, format_x86_result, randomize_x86_state

TEST = Descriptor(b"\x0f\x0b", 0)


def _with_gpr(state, index, value):
    gprs = list(state.gprs)
    gprs[index] = value
    return X86State(state.flags, tuple(gprs), state.xmm)


def test_round_trip():
    state = randomize_x86_state(MT19937(9), 0)
    packed = state.pack()
    assert len(packed) == 8 + 16 * 8 + 256
    assert X86State.unpack(packed) == state


def test_unpack_rejects_wrong_length():
    with pytest.raises(ValueError):
        X86State.unpack(b"\0" * 100)


def test_rejects_wrong_sizes():
    with pytest.raises(ValueError):
        X86State(gprs=(0,) * 15)
    with pytest.raises(ValueError):
        X86State(xmm=bytes(255))


def test_xmm_register_index_checked():
    with pytest.raises(IndexError):
        X86State().xmm_register(16)


def test_randomize_is_deterministic_and_clears_flags():
    a = randomize_x86_state(MT19937(4), 0)
    b = randomize_x86_state(MT19937(4), 0)
    assert a == b
    assert a.flags == 0
    assert len(a.xmm) == 256


def test_byte_division_context():
    state = randomize_x86_state(MT19937(1), 1)
    assert all(g <= 0xFF for g in state.gprs)


def test_word_division_context():
    state = randomize_x86_state(MT19937(1), 2)
    assert all(g <= 0xFFFF for g in state.gprs)
    assert state.gprs[2] == 0


def test_doubleword_division_context():
    state = randomize_x86_state(MT19937(1), 3)
    assert all(g <= 0xFFFFFFFF for g in state.gprs)
    assert state.gprs[2] == 0


def test_quadword_division_context_clears_rdx():
    default = randomize_x86_state(MT19937(1), 0)
    state = randomize_x86_state(MT19937(1), 4)
    assert state.gprs[2] == 0
    assert state.gprs[:2] == default.gprs[:2]
    assert state.gprs[3:] == default.gprs[3:]


def test_unchanged_state_reports_only_header():
    state = randomize_x86_state(MT19937(6), 0)
    assert format_x86_result(TEST, state, state) == "Test 0f0b\n\n"


def test_stack_pointer_is_ignored():
    state = X86State()
    assert format_x86_result(TEST, state, _with_gpr(state, 4, 1)) == format_x86_result(
        TEST, state, state
    )


def test_changed_gpr_is_reported():
    state = X86State()
    lines = format_x86_result(TEST, state, _with_gpr(state, 3, 0xFF)).splitlines()
    assert lines[1] == f"G3 {0:016x} != {0xFF:016x}"


def test_changed_xmm_prints_most_significant_byte_first():
    before = X86State()
    xmm = bytearray(256)
    xmm[16] = 0xAB
    after = X86State(0, before.gprs, bytes(xmm))
    line = format_x86_result(TEST, before, after).splitlines()[1]
    assert line.startswith("X1 ")
    left, right = line[3:].split(" != ")
    assert left == "00" * 16
    assert right == "00" * 15 + "ab"


def test_changed_flags_are_reported():
    before = X86State(flags=0)
    after = X86State(flags=0x46)
    lines = format_x86_result(TEST, before, after).splitlines()
    assert lines[1] == f"EFLAGS: {0:08x} -> {0x46:08x}"
    assert lines[-1] == ""