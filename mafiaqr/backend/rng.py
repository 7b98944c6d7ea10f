"""Deterministic hashing and pseudo-random streams for role draws."""

from __future__ import annotations

from typing import Callable, Sequence, TypeVar

T = TypeVar("T")

MASK_32 = 0xFFFFFFFF
FNV_OFFSET_BASIS = 2166136261
FNV_PRIME = 16777619
MULBERRY_INCREMENT = 0x6D2B79F5
TWO_POW_32 = 4294967296

Stream = Callable[[], float]


def _imul(a: int, b: int) -> int:
    return (a * b) & MASK_32


def seed_hash(text: str) -> int:
    """32-bit FNV-1a over the code points of ``text``."""
    acc = FNV_OFFSET_BASIS
    for char in text:
        acc ^= ord(char)
        acc = (acc * FNV_PRIME) & MASK_32
    return acc


class Mulberry32:
    """Reproducible stream of floats in [0, 1) driven only by its counter."""

    def __init__(self, seed: int) -> None:
        self._state = seed & MASK_32

    def __call__(self) -> float:
        self._state = (self._state + MULBERRY_INCREMENT) & MASK_32
        t = self._state
        t = _imul(t ^ (t >> 15), t | 1)
        t ^= (t + _imul(t ^ (t >> 7), t | 61)) & MASK_32
        return ((t ^ (t >> 14)) & MASK_32) / TWO_POW_32


def stream(seed: int) -> Stream:
    return Mulberry32(seed)


def pick(draw: Stream, items: Sequence[T]) -> T:
    if not items:
        raise ValueError("cannot pick from an empty sequence")
    return items[int(draw() * len(items))]


def shuffle(items: Sequence[T], seed: int) -> list[T]:
    """Fisher-Yates permutation seeded by ``seed``; ``items`` is left untouched."""
    shuffled = list(items)
    draw = stream(seed)
    for i in range(len(shuffled) - 1, 0, -1):
        j = int(draw() * (i + 1))
        shuffled[i], shuffled[j] = shuffled[j], shuffled[i]
    return shuffled
