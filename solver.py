"""Top-level Sun/Moon solve interface.

Expose `solve_puzzle(puzzle)` that accepts either a pre-built PuzzleState or a raw
puzzle dictionary compatible with `src.sunmoon.parser.parse_puzzle`.
"""

from typing import Any, Optional

from src.sunmoon import solver_core
from src.sunmoon.model import PuzzleState, SolveResult
from src.sunmoon.parser import parse_puzzle
from src.utils.trace import Tracer


def _as_state(puzzle: Any) -> PuzzleState:
    if isinstance(puzzle, PuzzleState):
        return puzzle
    if isinstance(puzzle, dict):
        return parse_puzzle(puzzle)
    raise TypeError("solve_puzzle expects a PuzzleState instance or puzzle dictionary")


def solve_puzzle(puzzle: Any, tracer: Optional[Tracer] = None) -> SolveResult:
    """
    Solve a puzzle by deduction and return the SolveResult.
    Accepts:
      - PuzzleState instances (used directly)
      - Raw puzzle dictionaries (parsed via `parse_puzzle`)
    """
    state = _as_state(puzzle)
    return solver_core.solve(state.board, state.clues, state.size, tracer=tracer)


__all__ = ["solve_puzzle"]
