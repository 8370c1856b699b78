"""Seeded pseudo-random generator and seed hashing.

The generator is a mulberry32-style bit mixer over an unsigned 32-bit state.
All arithmetic is masked to 32 bits explicitly; Python integers never
overflow, so every multiply and add is wrapped by hand to keep the
sequence identical to the reference 32-bit implementation.
"""
from __future__ import annotations

import math
from typing import Sequence, TypeVar

T = TypeVar("T")

UINT32_MASK = 0xFFFFFFFF
UINT32_RANGE = 4294967296

_STATE_INCREMENT = 0x6D2B79F5
_HASH_OFFSET_BASIS = 2166136261
_HASH_PRIME = 16777619


class InvalidRangeError(ValueError):
    """Raised when an integer range is requested with max < min."""


class EmptyCollectionError(ValueError):
    """Raised when picking from an empty sequence."""


def _imul(a: int, b: int) -> int:
    return ((a & UINT32_MASK) * (b & UINT32_MASK)) & UINT32_MASK


def normalize_seed(seed: float) -> int:
    """Map any numeric seed to a non-zero unsigned 32-bit integer.

    Non-finite values (NaN, +/-inf) map to 1. Finite values are truncated
    toward zero and wrapped into [0, 2**32); a zero result becomes 1.
    """
    if isinstance(seed, float) and not math.isfinite(seed):
        return 1
    return (int(seed) & UINT32_MASK) or 1


def clamp(value: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, value))


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves toward +infinity.

    Python's round() uses banker's rounding; scores and costs must round
    -2.5 to -2 and 2.5 to 3.
    """
    return math.floor(value + 0.5)


class SeededRng:
    """Deterministic generator; one instance per logical call chain."""

    def __init__(self, seed: float) -> None:
        self._state = normalize_seed(seed)

    def next(self) -> float:
        """Return the next float in [0, 1)."""
        self._state = (self._state + _STATE_INCREMENT) & UINT32_MASK
        t = self._state
        t = _imul(t ^ (t >> 15), t | 1)
        t ^= (t + _imul(t ^ (t >> 7), t | 61)) & UINT32_MASK
        return ((t ^ (t >> 14)) & UINT32_MASK) / UINT32_RANGE

    def int(self, min_value: int, max_value: int) -> int:
        """Return an integer in [min_value, max_value] inclusive."""
        if max_value < min_value:
            raise InvalidRangeError(f"Invalid int range: min={min_value}, max={max_value}")
        span = max_value - min_value + 1
        return math.floor(self.next() * span) + min_value

    def pick(self, items: Sequence[T]) -> T:
        if len(items) == 0:
            raise EmptyCollectionError("Cannot pick from an empty list.")
        return items[self.int(0, len(items) - 1)]

    def chance(self, probability: float) -> bool:
        return self.next() < clamp(probability, 0.0, 1.0)


def create_rng(seed: float) -> SeededRng:
    return SeededRng(seed)


def hash_seed_parts(*parts: float) -> int:
    """Fold integers into one unsigned 32-bit seed (FNV-1a over normalized parts).

    Order dependent: hash_seed_parts(1, 2) != hash_seed_parts(2, 1) in general.
    """
    acc = _HASH_OFFSET_BASIS
    for part in parts:
        acc ^= normalize_seed(part)
        acc = _imul(acc, _HASH_PRIME)
    return acc
