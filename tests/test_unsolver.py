"""Minimizer guarantees: unique completion reachable by deduction alone."""

import random

import pytest

from src.sunmoon.clues import place_clues
from src.sunmoon.generator import generate_solution
from src.sunmoon.model import clone_board
from src.sunmoon.parser import parse_board, parse_clue
from src.sunmoon.patterns import PatternCache
from src.sunmoon.solver_core import solve
from src.sunmoon.unsolver import filled_cells, unsolve
from src.sunmoon.validation import count_solutions
from src.utils.trace import Tracer


def _make_puzzle_parts(size, seed):
    rng = random.Random(seed)
    solution = generate_solution(size, PatternCache(), rng)
    clues = place_clues(solution, size, rng)
    return solution, clues, rng


@pytest.mark.parametrize("size,seed", [(4, 1), (4, 2), (6, 3)])
def test_unsolved_board_has_unique_logical_solution(size, seed):
    solution, clues, rng = _make_puzzle_parts(size, seed)
    snapshot = clone_board(solution)

    board = unsolve(solution, clues, size, rng)

    assert solution == snapshot
    assert count_solutions(board, clues, size, 2) == 1
    result = solve(board, clues, size)
    assert result.solved
    assert result.board == solution
    assert any(v is None for row in board for v in row)
    for r in range(size):
        for c in range(size):
            assert board[r][c] is None or board[r][c] == solution[r][c]


def test_tracer_records_every_candidate_cell():
    solution, clues, rng = _make_puzzle_parts(4, 5)
    tracer = Tracer()

    board = unsolve(solution, clues, 4, rng, tracer)

    removed = [s for s in tracer.steps if s.action_type == "cell_removed"]
    kept = [s for s in tracer.steps if s.action_type == "cell_kept"]
    blanks = sum(1 for row in board for v in row if v is None)
    assert len(removed) == blanks
    assert len(removed) + len(kept) == 16


def test_filled_cells():
    board = parse_board(["S...", "..M.", "....", "...S"])
    assert filled_cells(board, 4) == [(0, 0), (1, 2), (3, 3)]


def test_unsolve_known_solution_with_equal_clue():
    solution = parse_board(["SSMM", "MMSS", "SMSM", "MSMS"])
    clues = [parse_clue("0,0,h,=")]
    board = unsolve(solution, clues, 4, random.Random(0))
    assert solve(board, clues, 4).board == solution
