"""
Alea pseudo-random number generator.

Johannes Baagøe's Alea algorithm: a small, fast generator seeded from
arbitrary strings. Two instances built from the same seed produce the same
sequence, which is what makes terrain generation reproducible.
"""

from typing import Iterable, Union

Seed = Union[str, int, float, Iterable]

_TWO_POW_32 = 0x100000000
_TWO_POW_NEG_32 = 2.3283064365386963e-10


def _uint32(n):
    """Truncate to an unsigned 32-bit integer."""
    return int(n) & 0xFFFFFFFF


class _Mash:
    """Hash function used to turn seed values into initial generator state."""

    def __init__(self):
        self.n = 0xEFC8249D

    def __call__(self, data) -> float:
        n = self.n
        for char in str(data):
            n += ord(char)
            h = 0.02519603282416938 * n
            n = _uint32(h)
            h -= n
            h *= n
            n = _uint32(h)
            h -= n
            n += h * _TWO_POW_32
        self.n = n
        return _uint32(n) * _TWO_POW_NEG_32


class AleaPRNG:
    """
    Seedable random source returning floats in [0, 1).

    Satisfies the ``UniformSource`` protocol expected by the heightmap
    generator. ``call_count`` tracks how many values have been drawn.
    """

    def __init__(self, seed: Seed = "default"):
        self.seed = seed
        self.call_count = 0

        if hasattr(seed, "__iter__") and not isinstance(seed, str):
            parts = list(seed)
        else:
            parts = [seed]

        mash = _Mash()
        state = [mash(" "), mash(" "), mash(" ")]
        for part in parts:
            for k in range(3):
                state[k] -= mash(part)
                if state[k] < 0:
                    state[k] += 1

        self.s0, self.s1, self.s2 = state
        self.c = 1

    def random(self) -> float:
        """Return the next value in [0, 1)."""
        self.call_count += 1
        t = 2091639 * self.s0 + self.c * _TWO_POW_NEG_32
        self.s0 = self.s1
        self.s1 = self.s2
        self.c = int(t)
        self.s2 = t - self.c
        return self.s2

    def uniform(self, low: float, high: float) -> float:
        """Return a value uniformly distributed over [low, high)."""
        return low + self.random() * (high - low)

    def __repr__(self) -> str:
        return f"AleaPRNG(seed={self.seed!r}, call_count={self.call_count})"
