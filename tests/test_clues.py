"""Clue placement tests."""

import random

from src.sunmoon.clues import neighbor_pairs, place_clues
from src.sunmoon.model import BOARD_CONFIGS, ClueType, Direction, empty_board
from src.sunmoon.parser import parse_board

SOLVED_4 = ["SSMM", "MMSS", "SMSM", "MSMS"]


def test_neighbor_pairs_cover_every_adjacency_once():
    pairs = neighbor_pairs(4)
    assert len(pairs) == 24
    assert len(set(pairs)) == 24
    assert (0, 0, Direction.HORIZONTAL) in pairs
    assert (3, 3, Direction.HORIZONTAL) not in pairs
    assert (3, 0, Direction.VERTICAL) not in pairs


def test_clue_types_are_read_from_solution():
    solution = parse_board(SOLVED_4)
    for seed in range(10):
        clues = place_clues(solution, 4, random.Random(seed))
        config = BOARD_CONFIGS[4]
        assert config.min_clues <= len(clues) <= config.max_clues
        assert len({(c.row, c.col, c.direction) for c in clues}) == len(clues)
        for clue in clues:
            (r1, c1), (r2, c2) = clue.first, clue.second
            same = solution[r1][c1] == solution[r2][c2]
            assert clue.type == (ClueType.EQUAL if same else ClueType.DIFFERENT)


def test_unset_cells_are_skipped():
    assert place_clues(empty_board(6), 6, random.Random(0)) == []
