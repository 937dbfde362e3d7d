"""Deterministic random stream shared by every generator.

The stream is mulberry32 over a 32-bit state. String seeds are folded to
32 bits with FNV-1a so the same text always yields the same board.
"""

import random
from typing import Callable, MutableSequence

UINT32_MASK = 0xFFFFFFFF
UINT32_SCALE = 4294967296.0

FNV_OFFSET_BASIS = 2166136261
FNV_PRIME = 16777619
MULBERRY_INCREMENT = 0x6D2B79F5


def _imul(a: int, b: int) -> int:
    """32-bit wrapping multiply."""
    return (a * b) & UINT32_MASK


def hash_seed(text: str) -> int:
    """Fold a string into an unsigned 32-bit seed (FNV-1a).

    Args:
        text: Seed text, e.g. "level-1".

    Returns:
        Integer in [0, 2**32).
    """
    h = FNV_OFFSET_BASIS
    for ch in text:
        h ^= ord(ch)
        h = _imul(h, FNV_PRIME)
    return h


def make_seed(seed: int | str | None = None) -> int:
    """Resolve any accepted seed form to the numeric seed actually used.

    Args:
        seed: Integer, string, or None for a fresh random seed.

    Returns:
        Unsigned 32-bit seed.
    """
    if seed is None:
        return random.randint(0, 2**31 - 1)
    if isinstance(seed, str):
        return hash_seed(seed)
    return int(seed) & UINT32_MASK


class SeededRandom:
    """mulberry32 generator with a small random.Random-like surface."""

    def __init__(self, seed: int | str | None = None) -> None:
        self.seed = make_seed(seed)
        self._state = self.seed

    def random(self) -> float:
        """Return the next float in [0, 1)."""
        self._state = (self._state + MULBERRY_INCREMENT) & UINT32_MASK
        t = self._state
        r = _imul(t ^ (t >> 15), 1 | t)
        r = (r ^ ((r + _imul(r ^ (r >> 7), 61 | r)) & UINT32_MASK)) & UINT32_MASK
        return ((r ^ (r >> 14)) & UINT32_MASK) / UINT32_SCALE

    def randint(self, n: int) -> int:
        """Return an integer in [0, n)."""
        return int(self.random() * n)

    def shuffle(self, items: MutableSequence) -> None:
        """Fisher-Yates shuffle in place, walking from the end."""
        for i in range(len(items) - 1, 0, -1):
            j = self.randint(i + 1)
            items[i], items[j] = items[j], items[i]


def seeded_rng(seed: int | str | None = None) -> Callable[[], float]:
    """Return a bare ``() -> float`` stream for the given seed."""
    return SeededRandom(seed).random
