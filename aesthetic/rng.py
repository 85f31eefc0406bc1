"""
rng.py — Deterministic seeded randomness for aesthetic generation.

A seed string is hashed with FNV-1a (32-bit) and the hash drives a
mulberry32 generator. The same seed always replays the same stream of
floats in [0, 1).

Usage:
    from aesthetic.rng import SeededRandom, hash_string

    rng = SeededRandom.from_seed("abc123|palette|light|Minimal")
    hue = rng.randint(195, 255)
"""

from __future__ import annotations

import random
from typing import Sequence, TypeVar

T = TypeVar("T")

_MASK32 = 0xFFFFFFFF

FNV_OFFSET_BASIS = 0x811C9DC5
FNV_PRIME = 0x01000193
MULBERRY_INCREMENT = 0x6D2B79F5

_BASE36 = "0123456789abcdefghijklmnopqrstuvwxyz"


# ── Hashing ───────────────────────────────────────────────────────────────────

def _code_units(text: str):
    """Yield UTF-16 code units, so astral characters hash as surrogate pairs."""
    data = text.encode("utf-16-le", "surrogatepass")
    for i in range(0, len(data), 2):
        yield data[i] | (data[i + 1] << 8)


def hash_string(text: str) -> int:
    """FNV-1a 32-bit hash of a string → unsigned 32-bit int."""
    h = FNV_OFFSET_BASIS
    for unit in _code_units(text):
        h ^= unit
        h = (h * FNV_PRIME) & _MASK32
    return h


def _imul(a: int, b: int) -> int:
    return (a * b) & _MASK32


# ── Generator ─────────────────────────────────────────────────────────────────

class SeededRandom:
    """
    mulberry32 generator. Calling the instance returns the next float in [0, 1).

    Each generation step (palette, fonts) builds its own instance so that the
    streams never share state.
    """

    def __init__(self, state: int):
        self._state = state & _MASK32

    @classmethod
    def from_seed(cls, seed: str) -> "SeededRandom":
        return cls(hash_string(seed))

    def __call__(self) -> float:
        return self.random()

    def random(self) -> float:
        self._state = (self._state + MULBERRY_INCREMENT) & _MASK32
        x = self._state
        x = _imul(x ^ (x >> 15), x | 1)
        x ^= (x + _imul(x ^ (x >> 7), x | 61)) & _MASK32
        return ((x ^ (x >> 14)) & _MASK32) / 4294967296

    def randint(self, low: int, high: int) -> int:
        """Uniform integer in [low, high], both inclusive."""
        return int(self.random() * (high - low + 1)) + low

    def uniform(self, low: float, high: float) -> float:
        """Uniform float in [low, high)."""
        return self.random() * (high - low) + low

    def choice(self, items: Sequence[T]) -> T:
        if not items:
            raise IndexError("cannot choose from an empty sequence")
        return items[int(self.random() * len(items))]


# ── Seeds ─────────────────────────────────────────────────────────────────────

def to_base36(number: int) -> str:
    if number == 0:
        return "0"
    digits = []
    while number:
        number, rem = divmod(number, 36)
        digits.append(_BASE36[rem])
    return "".join(reversed(digits))


def random_seed() -> str:
    """Short, user-visible base-36 seed for a fresh generation."""
    return to_base36(random.randrange(10 ** 9))
