"""Puzzle generation pipeline: solution -> clues -> unsolve -> score -> hash."""

import hashlib
import json
import random
from typing import List, Optional, Sequence

from .clues import place_clues
from .generator import generate_solution
from .model import (
    Board,
    Clue,
    GenerationFailure,
    Puzzle,
    board_config,
    board_to_json,
    difficulty_label,
)
from .patterns import PatternCache
from .solver_core import solve
from .unsolver import unsolve
from src.utils.trace import Tracer

MAX_SOLUTION_ATTEMPTS = 5


def hash_puzzle(solution: Board, clues: Sequence[Clue]) -> str:
    """SHA-256 of the compact JSON form of (solution, clues); used as a dedup key."""
    payload = {
        "solution": board_to_json(solution),
        "clues": [clue.to_dict() for clue in clues],
    }
    data = json.dumps(payload, separators=(",", ":"))
    return hashlib.sha256(data.encode("utf-8")).hexdigest()


def generate_puzzle(
    size: int,
    patterns: PatternCache,
    rng: random.Random,
    tracer: Optional[Tracer] = None,
) -> Puzzle:
    board_config(size)

    solution = None
    for attempt in range(1, MAX_SOLUTION_ATTEMPTS + 1):
        if tracer is not None:
            tracer.log_generation_attempt(size, attempt)
        solution = generate_solution(size, patterns, rng, tracer)
        if solution is not None:
            break
    if solution is None:
        raise GenerationFailure(
            f"Failed to generate solution for size {size} after {MAX_SOLUTION_ATTEMPTS} attempts"
        )

    clues = place_clues(solution, size, rng)
    board = unsolve(solution, clues, size, rng, tracer)
    result = solve(board, clues, size)

    return Puzzle(
        board=board,
        solution=solution,
        clues=tuple(clues),
        difficulty=result.difficulty,
        label=difficulty_label(result.difficulty),
        size=size,
        hash=hash_puzzle(solution, clues),
    )


class PuzzleEngine:
    """
    Owns the pattern cache and the random source for the randomized parts of
    the engine. Pass `seed` for reproducible output.
    """

    def __init__(
        self,
        seed: Optional[int] = None,
        patterns: Optional[PatternCache] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.patterns = patterns if patterns is not None else PatternCache()
        self.rng = rng if rng is not None else random.Random(seed)

    def generate_solution(self, size: int, tracer: Optional[Tracer] = None) -> Optional[Board]:
        board_config(size)
        return generate_solution(size, self.patterns, self.rng, tracer)

    def place_clues(self, solution: Board, size: int) -> List[Clue]:
        return place_clues(solution, size, self.rng)

    def unsolve(
        self, solution: Board, clues: Sequence[Clue], size: int, tracer: Optional[Tracer] = None
    ) -> Board:
        return unsolve(solution, clues, size, self.rng, tracer)

    def generate_puzzle(self, size: int, tracer: Optional[Tracer] = None) -> Puzzle:
        return generate_puzzle(size, self.patterns, self.rng, tracer)
