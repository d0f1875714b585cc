"""Build a complete, valid Sun/Moon solution row by row with backtracking."""

import random
from typing import List, Optional

from .model import Board, CellValue, Symbol, board_config
from .patterns import PatternCache, shuffled
from src.utils.trace import Tracer


def _columns_valid(board: Board, row_index: int, size: int, half: int) -> bool:
    """Check column counts and vertical triples after placing `row_index`."""
    for col in range(size):
        suns = moons = 0
        for row in range(row_index + 1):
            if board[row][col] == Symbol.SUN:
                suns += 1
            elif board[row][col] == Symbol.MOON:
                moons += 1
        if suns > half or moons > half:
            return False

        if row_index >= 2:
            a = board[row_index - 2][col]
            b = board[row_index - 1][col]
            c = board[row_index][col]
            if a is not None and a == b == c:
                return False

    # Column uniqueness only once every row is placed.
    if row_index == size - 1:
        columns = [tuple(board[r][c] for r in range(size)) for c in range(size)]
        if len(set(columns)) != len(columns):
            return False

    return True


def _rows_unique(board: Board, up_to_row: int) -> bool:
    rows = [tuple(board[r]) for r in range(up_to_row + 1)]
    return len(set(rows)) == len(rows)


def generate_solution(
    size: int,
    patterns: PatternCache,
    rng: random.Random,
    tracer: Optional[Tracer] = None,
) -> Optional[Board]:
    """
    Construct a fully filled board satisfying balance, no-triple and
    row/column uniqueness. Returns None if the search is exhausted; callers
    retry with fresh randomness.
    """
    half = board_config(size).half
    all_patterns = patterns.get(size)
    board: List[List[CellValue]] = []

    def _backtrack(row_index: int) -> bool:
        if row_index == size:
            return True

        for pattern in shuffled(all_patterns, rng):
            board.append(list(pattern))
            if _columns_valid(board, row_index, size, half) and _rows_unique(board, row_index):
                if _backtrack(row_index + 1):
                    return True
            board.pop()

        if tracer is not None:
            tracer.log_backtrack(row_index)
        return False

    if _backtrack(0):
        return board
    return None
