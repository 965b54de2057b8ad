"""Goldfish Engine - Deterministic Random Number Generator

Every random decision in a game (play/draw coin flip, shuffles, hand
tie-breaks, tutor shuffles) is drawn from one GameRng owned by that game.
The generator is Mulberry32 over 32-bit state, so a seed always yields the
same stream on every platform and in every worker process.
"""
import math
import secrets
from typing import List, MutableSequence, Optional, TypeVar

T = TypeVar('T')

_MASK32 = 0xFFFFFFFF
_INCREMENT = 0x6D2B79F5
_TWO_POW_32 = 4294967296.0


class GameRng:
    """
    Seeded Mulberry32 stream.

    Attributes:
        seed: The seed the stream was created with (lower 32 bits are used)
    """

    def __init__(self, seed: Optional[int] = None):
        """
        Create a generator.

        Args:
            seed: Stream seed. When None, a seed is taken from system entropy
                  and stored on the instance so the game can be replayed.
        """
        if seed is None:
            seed = secrets.randbits(32)
        self.seed = seed
        self._state = seed & _MASK32

    def random(self) -> float:
        """Return the next uniform float in [0, 1)."""
        self._state = (self._state + _INCREMENT) & _MASK32
        t = self._state
        t = ((t ^ (t >> 15)) * (t | 1)) & _MASK32
        t ^= (t + (((t ^ (t >> 7)) * (t | 61)) & _MASK32)) & _MASK32
        return ((t ^ (t >> 14)) & _MASK32) / _TWO_POW_32

    def random_range(self, n: int) -> int:
        """Return a uniform integer in [0, n)."""
        return math.floor(self.random() * n)

    def shuffle(self, items: MutableSequence[T]) -> None:
        """
        Fisher-Yates shuffle in place.

        Walks from the last index down to 1, swapping each element with a
        uniformly drawn index at or before it.
        """
        for i in range(len(items) - 1, 0, -1):
            j = math.floor(self.random() * (i + 1))
            items[i], items[j] = items[j], items[i]

    def shuffled(self, items: List[T]) -> List[T]:
        """Return a shuffled copy, leaving the input untouched."""
        copy = list(items)
        self.shuffle(copy)
        return copy

    def __repr__(self) -> str:
        return f"GameRng(seed={self.seed})"


__all__ = ['GameRng']
