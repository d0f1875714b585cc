"""Row pattern enumeration and the per-size pattern cache."""

import random
from typing import Dict, List, Sequence, Tuple, TypeVar

from .model import Symbol

Row = Tuple[Symbol, ...]
T = TypeVar("T")


def has_triple(values: Sequence) -> bool:
    for i in range(len(values) - 2):
        if values[i] == values[i + 1] == values[i + 2]:
            return True
    return False


def enumerate_patterns(size: int) -> Tuple[Row, ...]:
    """
    All rows of `size` cells with exactly size/2 moons and no three equal
    symbols in a row. Bit 1 of the mask is a moon; rows come out in mask order.
    """
    if size <= 0 or size % 2:
        return ()
    half = size // 2
    patterns: List[Row] = []
    for mask in range(1 << size):
        bits = [(mask >> i) & 1 for i in range(size)]
        if sum(bits) != half:
            continue
        if has_triple(bits):
            continue
        patterns.append(tuple(Symbol.MOON if b else Symbol.SUN for b in bits))
    return tuple(patterns)


class PatternCache:
    """
    Lazily computed, read-only table of valid row patterns keyed by size.
    Entries never change once built, so one cache can be shared freely.
    """

    def __init__(self) -> None:
        self._patterns: Dict[int, Tuple[Row, ...]] = {}

    def get(self, size: int) -> Tuple[Row, ...]:
        patterns = self._patterns.get(size)
        if patterns is None:
            patterns = self._patterns.setdefault(size, enumerate_patterns(size))
        return patterns

    def __contains__(self, size: int) -> bool:
        return size in self._patterns


def shuffled(items: Sequence[T], rng: random.Random) -> List[T]:
    """Return a shuffled copy; the input is left untouched."""
    result = list(items)
    rng.shuffle(result)
    return result
