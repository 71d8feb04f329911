import itertools

import pytest

from insnfuzz.mt19937 import MT19937


def test_default_seed_first_value():
    assert MT19937()() == 3499211612


def test_ten_thousandth_value_of_default_engine():
    engine = MT19937()
    values = [engine() for _ in range(10000)]
    assert values[-1] == 4123659995


def test_explicit_default_seed_matches_default():
    a = MT19937()
    b = MT19937(MT19937.DEFAULT_SEED)
    assert [a() for _ in range(50)] == [b() for _ in range(50)]


@pytest.mark.parametrize("seed", [0, 1, 42, 0xFFFFFFFF])
def test_same_seed_same_sequence(seed):
    a = MT19937(seed)
    b = MT19937(seed)
    assert [a() for _ in range(700)] == [b() for _ in range(700)]


def test_different_seeds_differ():
    a = MT19937(1)
    b = MT19937(2)
    assert [a() for _ in range(10)] != [b() for _ in range(10)]


def test_values_fit_in_32_bits():
    engine = MT19937(123)
    values = [engine() for _ in range(2000)]
    assert all(MT19937.MIN <= v <= MT19937.MAX for v in values)


def test_reseed_restarts_sequence():
    engine = MT19937(7)
    first = [engine() for _ in range(5)]
    engine.reseed(7)
    assert [engine() for _ in range(5)] == first


def test_iteration_matches_calls():
    a = MT19937(99)
    b = MT19937(99)
    assert list(itertools.islice(a, 20)) == [b() for _ in range(20)]