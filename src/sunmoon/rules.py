"""Deduction rules for the Sun/Moon solver.

Each rule is a pure function `(board, clues, size) -> List[SolveStep]` that
proposes placements without touching the board. Rules are collected in
`RULES` in ascending weight; the solver always prefers the earliest rule that
produces something.
"""

from dataclasses import dataclass
from typing import Callable, Iterator, List, Sequence, Tuple

from .model import (
    Board,
    Cell,
    Clue,
    ClueType,
    Direction,
    SolveStep,
    Symbol,
    clone_board,
    count_line,
    count_symbol,
    get_col,
    get_row,
    opposite,
)

RuleFn = Callable[[Board, Sequence[Clue], int], List[SolveStep]]

# Rule 10 only enumerates when this few blanks remain.
ENUMERATION_LIMIT = 12


@dataclass(frozen=True)
class Rule:
    name: str
    weight: int
    apply: RuleFn

    def __call__(self, board: Board, clues: Sequence[Clue], size: int) -> List[SolveStep]:
        return self.apply(board, clues, size)


def _lines(size: int) -> Iterator[List[Cell]]:
    """Cell coordinates of every row, then every column."""
    for r in range(size):
        yield [(r, c) for c in range(size)]
    for c in range(size):
        yield [(r, c) for r in range(size)]


def _values(board: Board, cells: List[Cell]) -> list:
    return [board[r][c] for r, c in cells]


def _clue_line(board: Board, clue: Clue, size: int) -> list:
    """The row (horizontal clue) or column (vertical clue) holding both cells."""
    if clue.direction == Direction.HORIZONTAL:
        return get_row(board, clue.row)
    return get_col(board, clue.col, size)


def clue_propagation(board: Board, clues: Sequence[Clue], size: int) -> List[SolveStep]:
    """One filled side of a clue fixes the other side."""
    steps: List[SolveStep] = []
    for clue in clues:
        (r1, c1), (r2, c2) = clue.first, clue.second
        v1 = board[r1][c1]
        v2 = board[r2][c2]

        if v1 is not None and v2 is None:
            value = v1 if clue.type == ClueType.EQUAL else opposite(v1)
            steps.append(SolveStep(r2, c2, value, "Clue Propagation", 1))
        elif v1 is None and v2 is not None:
            value = v2 if clue.type == ClueType.EQUAL else opposite(v2)
            steps.append(SolveStep(r1, c1, value, "Clue Propagation", 1))
    return steps


def almost_full(board: Board, clues: Sequence[Clue], size: int) -> List[SolveStep]:
    """A line holding half of one symbol takes the other symbol everywhere else."""
    steps: List[SolveStep] = []
    half = size // 2
    for cells in _lines(size):
        line = _values(board, cells)
        sun, moon, _ = count_line(line)
        if sun == half:
            fill = Symbol.MOON
        elif moon == half:
            fill = Symbol.SUN
        else:
            continue
        for (r, c), v in zip(cells, line):
            if v is None:
                steps.append(SolveStep(r, c, fill, "Almost Full", 1))
    return steps


def triple_prevention(board: Board, clues: Sequence[Clue], size: int) -> List[SolveStep]:
    """Two equal neighbours force the cells on either side to the opposite symbol."""
    steps: List[SolveStep] = []
    for cells in _lines(size):
        line = _values(board, cells)
        for i in range(size - 1):
            a, b = line[i], line[i + 1]
            if a is None or a != b:
                continue
            if i > 0 and line[i - 1] is None:
                r, c = cells[i - 1]
                steps.append(SolveStep(r, c, opposite(a), "Triple Prevention", 1))
            if i + 2 < size and line[i + 2] is None:
                r, c = cells[i + 2]
                steps.append(SolveStep(r, c, opposite(a), "Triple Prevention", 1))
    return steps


def gap_fill(board: Board, clues: Sequence[Clue], size: int) -> List[SolveStep]:
    """X _ X: the gap takes the opposite of X."""
    steps: List[SolveStep] = []
    for cells in _lines(size):
        line = _values(board, cells)
        for i in range(size - 2):
            a, b, d = line[i], line[i + 1], line[i + 2]
            if a is not None and b is None and a == d:
                r, c = cells[i + 1]
                steps.append(SolveStep(r, c, opposite(a), "Gap Fill", 2))
    return steps


def touching_pair(board: Board, clues: Sequence[Clue], size: int) -> List[SolveStep]:
    """
    A blank "=" pair next to two equal filled cells cannot match them, so both
    pair cells take the opposite symbol.
    """
    steps: List[SolveStep] = []
    for clue in clues:
        if clue.type != ClueType.EQUAL:
            continue
        (r1, c1), (r2, c2) = clue.first, clue.second
        if board[r1][c1] is not None or board[r2][c2] is not None:
            continue

        if clue.direction == Direction.HORIZONTAL:
            line = get_row(board, r1)
            start, end = c1, c2
        else:
            line = get_col(board, c1, size)
            start, end = r1, r2

        forced = []
        if start > 0 and line[start - 1] is not None:
            adj = line[start - 1]
            if start > 1 and line[start - 2] == adj:
                forced.append(opposite(adj))
        if end + 1 < size and line[end + 1] is not None:
            adj = line[end + 1]
            if end + 2 < size and line[end + 2] == adj:
                forced.append(opposite(adj))

        for value in forced:
            steps.append(SolveStep(r1, c1, value, "Touching Pair", 4))
            steps.append(SolveStep(r2, c2, value, "Touching Pair", 4))
    return steps


def edge_pair(board: Board, clues: Sequence[Clue], size: int) -> List[SolveStep]:
    """
    Equal endpoints on a line that is not yet full of that symbol: a blank
    next to an endpoint followed by the same symbol is forced opposite.
    """
    steps: List[SolveStep] = []
    half = size // 2
    for cells in _lines(size):
        line = _values(board, cells)
        sun, moon, blank = count_line(line)
        if blank <= 1:
            continue

        first, last = line[0], line[size - 1]
        if first is None or first != last:
            continue
        count = sun if first == Symbol.SUN else moon
        if count == half:
            continue

        if line[1] is None and line[2] == first:
            r, c = cells[1]
            steps.append(SolveStep(r, c, opposite(first), "Edge Pair", 6))
        if line[size - 2] is None and line[size - 3] == first:
            r, c = cells[size - 2]
            steps.append(SolveStep(r, c, opposite(first), "Edge Pair", 6))
    return steps


def equal_gap(board: Board, clues: Sequence[Clue], size: int) -> List[SolveStep]:
    """A blank "=" pair in a line where one symbol is at capacity takes the other."""
    steps: List[SolveStep] = []
    half = size // 2
    for clue in clues:
        if clue.type != ClueType.EQUAL:
            continue
        (r1, c1), (r2, c2) = clue.first, clue.second
        if board[r1][c1] is not None or board[r2][c2] is not None:
            continue

        sun, moon, _ = count_line(_clue_line(board, clue, size))
        if sun == half:
            value = Symbol.MOON
        elif moon == half:
            value = Symbol.SUN
        else:
            continue
        steps.append(SolveStep(r1, c1, value, "Equal-Gap", 7))
        steps.append(SolveStep(r2, c2, value, "Equal-Gap", 7))
    return steps


def opposite_inference(board: Board, clues: Sequence[Clue], size: int) -> List[SolveStep]:
    """
    A blank "x" pair holding the last two blanks of a balanced line: the
    orientation that would overflow a crossing line is ruled out.
    """
    steps: List[SolveStep] = []
    half = size // 2
    for clue in clues:
        if clue.type != ClueType.DIFFERENT:
            continue
        (r1, c1), (r2, c2) = clue.first, clue.second
        if board[r1][c1] is not None or board[r2][c2] is not None:
            continue

        sun, moon, blank = count_line(_clue_line(board, clue, size))
        if not (blank == 2 and sun == half - 1 and moon == half - 1):
            continue

        if clue.direction == Direction.HORIZONTAL:
            cross_a, cross_b = get_col(board, c1, size), get_col(board, c2, size)
        else:
            cross_a, cross_b = get_row(board, r1), get_row(board, r2)

        for trial in (Symbol.SUN, Symbol.MOON):
            other = opposite(trial)
            if count_symbol(cross_a, trial) >= half or count_symbol(cross_b, other) >= half:
                steps.append(SolveStep(r1, c1, other, "Opposite Inference", 9))
                steps.append(SolveStep(r2, c2, trial, "Opposite Inference", 9))
                break
    return steps


def inverse_big_gap(board: Board, clues: Sequence[Clue], size: int) -> List[SolveStep]:
    """X _ _ X with X one short of half: first gap is opposite, second is X."""
    steps: List[SolveStep] = []
    half = size // 2
    for cells in _lines(size):
        line = _values(board, cells)
        sun, moon, blank = count_line(line)
        if blank < 2:
            continue

        for i in range(size - 3):
            a, b, c, d = line[i], line[i + 1], line[i + 2], line[i + 3]
            if a is None or b is not None or c is not None or a != d:
                continue
            count = sun if a == Symbol.SUN else moon
            if count == half - 1:
                rb, cb = cells[i + 1]
                rc, cc = cells[i + 2]
                steps.append(SolveStep(rb, cb, opposite(a), "Inverse Big Gap", 9))
                steps.append(SolveStep(rc, cc, a, "Inverse Big Gap", 9))
    return steps


def is_valid_partial(board: Board, clues: Sequence[Clue], size: int) -> bool:
    """No line overflow, no triple run and no broken clue among filled cells."""
    half = size // 2
    for cells in _lines(size):
        line = _values(board, cells)
        sun, moon, _ = count_line(line)
        if sun > half or moon > half:
            return False
        for i in range(size - 2):
            if line[i] is not None and line[i] == line[i + 1] == line[i + 2]:
                return False

    for clue in clues:
        (r1, c1), (r2, c2) = clue.first, clue.second
        if not clue.is_satisfied_by(board[r1][c1], board[r2][c2]):
            return False
    return True


def constraint_enumeration(board: Board, clues: Sequence[Clue], size: int) -> List[SolveStep]:
    """Near the end, a blank whose one symbol breaks local validity takes the other."""
    steps: List[SolveStep] = []
    blanks: List[Tuple[int, int]] = [
        (r, c) for r in range(size) for c in range(size) if board[r][c] is None
    ]
    if not blanks or len(blanks) > ENUMERATION_LIMIT:
        return steps

    for r, c in blanks:
        allowed = []
        for trial in (Symbol.SUN, Symbol.MOON):
            test_board = clone_board(board)
            test_board[r][c] = trial
            if is_valid_partial(test_board, clues, size):
                allowed.append(trial)
        if len(allowed) == 1:
            steps.append(SolveStep(r, c, allowed[0], "Constraint Enumeration", 10))
    return steps


RULES: Tuple[Rule, ...] = (
    Rule("Clue Propagation", 1, clue_propagation),
    Rule("Almost Full", 1, almost_full),
    Rule("Triple Prevention", 1, triple_prevention),
    Rule("Gap Fill", 2, gap_fill),
    Rule("Touching Pair", 4, touching_pair),
    Rule("Edge Pair", 6, edge_pair),
    Rule("Equal-Gap", 7, equal_gap),
    Rule("Opposite Inference", 9, opposite_inference),
    Rule("Inverse Big Gap", 9, inverse_big_gap),
    Rule("Constraint Enumeration", 10, constraint_enumeration),
)
