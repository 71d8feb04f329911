"""The 32-bit Mersenne Twister, matching the standard mt19937 engine."""

from __future__ import annotations

from collections.abc import Iterator

_N = 624
_M = 397
_MATRIX_A = 0x9908B0DF
_UPPER_MASK = 0x80000000
_LOWER_MASK = 0x7FFFFFFF
_WORD = 0xFFFFFFFF


class MT19937:
    """A Mersenne Twister engine; calling it yields the next 32-bit value."""

    DEFAULT_SEED = 5489
    MIN = 0
    MAX = _WORD

    def __init__(self, seed: int = DEFAULT_SEED) -> None:
        self._state: list[int] = []
        self._index = _N
        self.reseed(seed)

    def reseed(self, seed: int) -> None:
        """Restart the sequence from ``seed``."""
        state = [seed & _WORD]
        for i in range(1, _N):
            prev = state[-1]
            state.append((1812433253 * (prev ^ (prev >> 30)) + i) & _WORD)
        self._state = state
        self._index = _N

    def _twist(self) -> None:
        mt = self._state
        for i in range(_N):
            y = (mt[i] & _UPPER_MASK) | (mt[(i + 1) % _N] & _LOWER_MASK)
            value = mt[(i + _M) % _N] ^ (y >> 1)
            if y & 1:
                value ^= _MATRIX_A
            mt[i] = value
        self._index = 0

    def __call__(self) -> int:
        if self._index >= _N:
            self._twist()
        y = self._state[self._index]
        self._index += 1
        y ^= y >> 11
        y ^= (y << 7) & 0x9D2C5680
        y ^= (y << 15) & 0xEFC60000
        y ^= y >> 18
        return y & _WORD

    def __iter__(self) -> Iterator[int]:
        while True:
            yield self()