"""Sun/Moon core data structures and board helpers."""

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple


class Symbol(str, Enum):
    SUN = "sun"
    MOON = "moon"


class Direction(str, Enum):
    HORIZONTAL = "h"
    VERTICAL = "v"


class ClueType(str, Enum):
    EQUAL = "="
    DIFFERENT = "x"


CellValue = Optional[Symbol]
Board = List[List[CellValue]]
Cell = Tuple[int, int]


class GenerationFailure(RuntimeError):
    """Raised when no acceptable puzzle could be built within the allowed attempts."""


@dataclass(frozen=True)
class BoardConfig:
    size: int
    half: int
    min_clues: int
    max_clues: int


BOARD_CONFIGS: Dict[int, BoardConfig] = {
    4: BoardConfig(size=4, half=2, min_clues=2, max_clues=4),
    6: BoardConfig(size=6, half=3, min_clues=4, max_clues=8),
    8: BoardConfig(size=8, half=4, min_clues=6, max_clues=12),
    10: BoardConfig(size=10, half=5, min_clues=8, max_clues=16),
}

SUPPORTED_SIZES = tuple(sorted(BOARD_CONFIGS))


def board_config(size: int) -> BoardConfig:
    try:
        return BOARD_CONFIGS[size]
    except KeyError:
        raise ValueError(f"Unsupported board size {size}; expected one of {SUPPORTED_SIZES}") from None


@dataclass(frozen=True)
class Clue:
    """
    A labelled relation between two adjacent cells.
    Horizontal clues bind (row, col) and (row, col + 1); vertical clues bind
    (row, col) and (row + 1, col).
    """

    row: int
    col: int
    direction: Direction
    type: ClueType

    @property
    def first(self) -> Cell:
        return (self.row, self.col)

    @property
    def second(self) -> Cell:
        if self.direction == Direction.HORIZONTAL:
            return (self.row, self.col + 1)
        return (self.row + 1, self.col)

    def is_satisfied_by(self, v1: CellValue, v2: CellValue) -> bool:
        """True unless both values are set and contradict the clue."""
        if v1 is None or v2 is None:
            return True
        if self.type == ClueType.EQUAL:
            return v1 == v2
        return v1 != v2

    def to_dict(self) -> Dict[str, Any]:
        return {
            "row": self.row,
            "col": self.col,
            "direction": self.direction.value,
            "type": self.type.value,
        }


@dataclass(frozen=True)
class SolveStep:
    row: int
    col: int
    value: Symbol
    rule: str
    weight: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "row": self.row,
            "col": self.col,
            "value": self.value.value,
            "rule": self.rule,
            "weight": self.weight,
        }


@dataclass
class SolveResult:
    solved: bool
    board: Board
    difficulty: int
    steps: List[SolveStep] = field(default_factory=list)
    rules_used: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class Puzzle:
    board: Board
    solution: Board
    clues: Tuple[Clue, ...]
    difficulty: int
    label: str
    size: int
    hash: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "size": self.size,
            "hash": self.hash,
            "board": board_to_json(self.board),
            "solution": board_to_json(self.solution),
            "clues": [c.to_dict() for c in self.clues],
            "difficulty": self.difficulty,
            "label": self.label,
        }


@dataclass
class PuzzleState:
    """A board in play: current cells, its clues, and the solution when known."""

    size: int
    board: Board
    clues: List[Clue] = field(default_factory=list)
    solution: Optional[Board] = None
    id: str = "unknown"


def difficulty_label(difficulty: int) -> str:
    if difficulty <= 6:
        return "Easy"
    if difficulty <= 15:
        return "Medium"
    if difficulty <= 30:
        return "Hard"
    return "Very Hard"


def stars_from_time(seconds: Optional[float]) -> int:
    """Star rating for a completed puzzle given the solve time in seconds."""
    if seconds is None or not math.isfinite(seconds):
        return 0
    if seconds <= 120:
        return 3
    if seconds <= 240:
        return 2
    return 0


def opposite(value: CellValue) -> CellValue:
    if value == Symbol.SUN:
        return Symbol.MOON
    if value == Symbol.MOON:
        return Symbol.SUN
    return None


def empty_board(size: int) -> Board:
    return [[None] * size for _ in range(size)]


def clone_board(board: Board) -> Board:
    return [list(row) for row in board]


def board_to_json(board: Board) -> List[List[Optional[str]]]:
    return [[getattr(v, "value", v) for v in row] for row in board]


def get_row(board: Board, r: int) -> List[CellValue]:
    return board[r]


def get_col(board: Board, c: int, size: int) -> List[CellValue]:
    return [board[r][c] for r in range(size)]


def count_line(line: List[CellValue]) -> Tuple[int, int, int]:
    """Return (suns, moons, blanks) for a row or column."""
    sun = moon = blank = 0
    for v in line:
        if v == Symbol.SUN:
            sun += 1
        elif v == Symbol.MOON:
            moon += 1
        else:
            blank += 1
    return sun, moon, blank


def count_symbol(line: List[CellValue], value: CellValue) -> int:
    return sum(1 for v in line if v == value)


def is_line_full(line: List[CellValue]) -> bool:
    return all(v is not None for v in line)
