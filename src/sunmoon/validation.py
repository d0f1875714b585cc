"""Board validation (live error highlighting, win detection) and solution counting."""

from dataclasses import dataclass, field
from typing import Optional, Sequence, Set

from .model import (
    Board,
    Cell,
    CellValue,
    Clue,
    Symbol,
    clone_board,
    count_line,
    get_col,
    is_line_full,
)


@dataclass
class BoardCheck:
    errors: Set[Cell] = field(default_factory=set)
    complete: bool = False

    @property
    def correct(self) -> bool:
        return not self.errors


def find_logic_errors(board: Board, clues: Sequence[Clue], size: int) -> Set[Cell]:
    """
    Every cell involved in a rule violation. Checks are independent so that
    all offending cells can be highlighted at once.
    """
    errors: Set[Cell] = set()
    half = size // 2

    rows = [[(r, c) for c in range(size)] for r in range(size)]
    cols = [[(r, c) for r in range(size)] for c in range(size)]

    for cells in rows + cols:
        for symbol in (Symbol.SUN, Symbol.MOON):
            holding = [(r, c) for r, c in cells if board[r][c] == symbol]
            if len(holding) > half:
                errors.update(holding)

        for i in range(size - 2):
            window = cells[i:i + 3]
            a, b, d = (board[r][c] for r, c in window)
            if a is not None and a == b == d:
                errors.update(window)

    for clue in clues:
        (r1, c1), (r2, c2) = clue.first, clue.second
        if not clue.is_satisfied_by(board[r1][c1], board[r2][c2]):
            errors.add((r1, c1))
            errors.add((r2, c2))

    for lines in (rows, cols):
        values = [[board[r][c] for r, c in cells] for cells in lines]
        for i in range(size):
            if not is_line_full(values[i]):
                continue
            for j in range(i + 1, size):
                if is_line_full(values[j]) and values[i] == values[j]:
                    errors.update(lines[i])
                    errors.update(lines[j])

    return errors


def is_complete(board: Board) -> bool:
    return len(board) > 0 and all(v is not None for row in board for v in row)


def check_board(board: Board, clues: Sequence[Clue], size: int) -> BoardCheck:
    """Errors plus the win condition: fully filled with no violation."""
    errors = find_logic_errors(board, clues, size)
    return BoardCheck(errors=errors, complete=not errors and is_complete(board))


def _violates_uniqueness(board: Board, row: int, col: int, size: int) -> bool:
    """A just-completed row/column must not duplicate another complete one."""
    if is_line_full(board[row]):
        for r2 in range(size):
            if r2 != row and is_line_full(board[r2]) and board[r2] == board[row]:
                return True

    column = get_col(board, col, size)
    if is_line_full(column):
        for c2 in range(size):
            if c2 == col:
                continue
            other = get_col(board, c2, size)
            if is_line_full(other) and other == column:
                return True
    return False


def _placement_valid(
    board: Board, clues: Sequence[Clue], size: int, row: int, col: int, value: CellValue
) -> bool:
    """Local check of `value` at (row, col); the board is left as it was."""
    half = size // 2
    board[row][col] = value
    try:
        line_row = board[row]
        line_col = get_col(board, col, size)

        for line, idx in ((line_row, col), (line_col, row)):
            sun, moon, _ = count_line(line)
            if sun > half or moon > half:
                return False
            for start in range(max(0, idx - 2), min(size - 3, idx) + 1):
                a, b, d = line[start], line[start + 1], line[start + 2]
                if a is not None and a == b == d:
                    return False

        for clue in clues:
            if (row, col) == clue.first:
                other = clue.second
            elif (row, col) == clue.second:
                other = clue.first
            else:
                continue
            if not clue.is_satisfied_by(value, board[other[0]][other[1]]):
                return False

        return not _violates_uniqueness(board, row, col, size)
    finally:
        board[row][col] = None


def _first_blank(board: Board, size: int) -> Optional[Cell]:
    for r in range(size):
        for c in range(size):
            if board[r][c] is None:
                return (r, c)
    return None


def count_solutions(board: Board, clues: Sequence[Clue], size: int, limit: int = 2) -> int:
    """
    Count completions of `board` by plain cell-at-a-time backtracking,
    stopping as soon as `limit` have been found.
    """
    working = clone_board(board)
    found = 0

    def _backtrack() -> None:
        nonlocal found
        if found >= limit:
            return
        target = _first_blank(working, size)
        if target is None:
            found += 1
            return

        row, col = target
        for value in (Symbol.SUN, Symbol.MOON):
            if _placement_valid(working, clues, size, row, col, value):
                working[row][col] = value
                _backtrack()
                working[row][col] = None
                if found >= limit:
                    return

    _backtrack()
    return found
