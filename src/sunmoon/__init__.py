"""Sun/Moon puzzle engine: generation, deduction solving, minimization and validation."""

from .model import (
    BOARD_CONFIGS,
    Clue,
    ClueType,
    Direction,
    GenerationFailure,
    Puzzle,
    PuzzleState,
    SolveResult,
    SolveStep,
    Symbol,
    difficulty_label,
)
from .factory import PuzzleEngine, generate_puzzle, hash_puzzle
from .parser import parse_puzzle
from .solver_core import next_hint, solve
from .validation import check_board, count_solutions, find_logic_errors, is_complete

__all__ = [
    "BOARD_CONFIGS",
    "Clue",
    "ClueType",
    "Direction",
    "GenerationFailure",
    "Puzzle",
    "PuzzleState",
    "SolveResult",
    "SolveStep",
    "Symbol",
    "difficulty_label",
    "PuzzleEngine",
    "generate_puzzle",
    "hash_puzzle",
    "parse_puzzle",
    "next_hint",
    "solve",
    "check_board",
    "count_solutions",
    "find_logic_errors",
    "is_complete",
]
