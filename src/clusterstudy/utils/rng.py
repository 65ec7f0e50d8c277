"""Seedable pseudo-random sources."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

_MASK32 = 0xFFFFFFFF


@runtime_checkable
class RandomSource(Protocol):
    """Anything exposing ``random() -> float`` in [0, 1).

    ``random.Random`` instances and :class:`Mulberry32` both qualify.
    """

    def random(self) -> float:
        ...


def _imul(a: int, b: int) -> int:
    """32-bit wrapping multiply."""
    return (a * b) & _MASK32


class Mulberry32:
    """Mulberry32 generator: 32-bit state, one output per step.

    Small and well mixed; the same seed always yields the same sequence,
    which makes it suitable for reproducible exercise geometry.

    Args:
        seed: Initial 32-bit state (wrapped modulo 2**32)
    """

    def __init__(self, seed: int):
        self.seed = int(seed)
        self._state = self.seed & _MASK32

    def next_uint32(self) -> int:
        self._state = (self._state + 0x6D2B79F5) & _MASK32
        t = self._state
        t = _imul(t ^ (t >> 15), t | 1)
        t ^= (t + _imul(t ^ (t >> 7), t | 61)) & _MASK32
        return (t ^ (t >> 14)) & _MASK32

    def random(self) -> float:
        """Next float in [0, 1)."""
        return self.next_uint32() / 4294967296.0

    def __repr__(self) -> str:
        return f"Mulberry32(seed={self.seed})"
