"""Strip a full solution down to a puzzle with a unique, logic-reachable answer."""

import random
from typing import List, Optional, Sequence

from .model import Board, Cell, Clue, clone_board
from .patterns import shuffled
from .solver_core import solve
from .validation import count_solutions
from src.utils.trace import Tracer


def filled_cells(board: Board, size: int) -> List[Cell]:
    return [(r, c) for r in range(size) for c in range(size) if board[r][c] is not None]


def unsolve(
    solution: Board,
    clues: Sequence[Clue],
    size: int,
    rng: random.Random,
    tracer: Optional[Tracer] = None,
) -> Board:
    """
    Blank cells one at a time in random order, keeping a removal only when
    the deduction solver still rebuilds exactly `solution` and the board has
    exactly one completion. A single greedy pass: the result is small, not
    necessarily minimum.
    """
    board = clone_board(solution)

    for row, col in shuffled(filled_cells(board, size), rng):
        saved = board[row][col]
        board[row][col] = None

        result = solve(board, clues, size)
        if not (result.solved and result.board == solution):
            board[row][col] = saved
            if tracer is not None:
                tracer.log_cell_kept(row, col, reason="not reachable by deduction")
            continue

        if count_solutions(board, clues, size, limit=2) != 1:
            board[row][col] = saved
            if tracer is not None:
                tracer.log_cell_kept(row, col, reason="ambiguous")
            continue

        if tracer is not None:
            tracer.log_cell_removed(row, col)

    return board
