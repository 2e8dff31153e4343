"""Seeded pseudo-random generator shared by every draw in a run.

Mulberry32 output is defined entirely by 32-bit
integer arithmetic, so a given seed yields the same stream on every
platform. The draw order inside a run is part of the results contract.
"""

MASK_32 = 0xFFFFFFFF
_INCREMENT = 0x6D2B79F5
_TWO_POW_32 = 4294967296.0


def _imul(a: int, b: int) -> int:
    """Low 32 bits of the product of two 32-bit integers."""
    return (a * b) & MASK_32


class Mulberry32:
    """Mulberry32 generator producing floats in [0, 1).

    Calling an instance advances the state once and returns the next value,
    so an instance can be passed anywhere a zero-argument ``rng()`` is
    expected.
    """

    def __init__(self, seed: int):
        self.seed = seed
        self._state = seed & MASK_32
        self.draws = 0

    def next_uint32(self) -> int:
        """Advance the state and return the next raw 32-bit output."""
        self._state = (self._state + _INCREMENT) & MASK_32
        t = self._state
        t = _imul(t ^ (t >> 15), t | 1)
        t = ((t + _imul(t ^ (t >> 7), t | 61)) & MASK_32) ^ t
        self.draws += 1
        return (t ^ (t >> 14)) & MASK_32

    def random(self) -> float:
        """Next float in [0, 1)."""
        return self.next_uint32() / _TWO_POW_32

    __call__ = random

    def __repr__(self) -> str:
        return f"Mulberry32(seed={self.seed}, draws={self.draws})"
