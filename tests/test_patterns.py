"""Unit tests for row pattern enumeration and the pattern cache."""

import random

import pytest

from src.sunmoon.model import Symbol
from src.sunmoon.patterns import PatternCache, enumerate_patterns, has_triple, shuffled


def test_size_four_has_six_balanced_rows():
    rows = PatternCache().get(4)
    assert len(rows) == 6
    assert len(set(rows)) == 6
    for row in rows:
        assert row.count(Symbol.MOON) == 2
        assert row.count(Symbol.SUN) == 2


def test_size_six_excludes_rows_with_runs_of_three():
    rows = enumerate_patterns(6)
    # 20 balanced rows minus SSS.../MMM... placements
    assert len(rows) == 14
    assert (Symbol.SUN,) * 3 + (Symbol.MOON,) * 3 not in rows


@pytest.mark.parametrize("size", [6, 8, 10])
def test_every_pattern_is_balanced_and_triple_free(size):
    rows = PatternCache().get(size)
    assert rows
    assert len(set(rows)) == len(rows)
    for row in rows:
        assert len(row) == size
        assert row.count(Symbol.SUN) == size // 2
        assert not has_triple(row)


def test_odd_size_has_no_patterns():
    assert enumerate_patterns(5) == ()


def test_cache_computes_each_size_once():
    cache = PatternCache()
    assert 6 not in cache
    first = cache.get(6)
    assert 6 in cache
    assert cache.get(6) is first


def test_has_triple():
    assert has_triple([1, 0, 0, 0])
    assert not has_triple([1, 0, 0, 1, 1, 0])


def test_shuffled_returns_permutation_without_mutating_input():
    items = list(range(10))
    result = shuffled(items, random.Random(3))
    assert items == list(range(10))
    assert sorted(result) == items
