"""Rule-based deduction solver: fixed-point over ordered rules, hints, scoring."""

from typing import Dict, List, Optional, Sequence, Tuple

from .model import Board, Clue, SolveResult, SolveStep, clone_board
from .rules import RULES, Rule
from src.utils.trace import Tracer


def solve(
    board: Board,
    clues: Sequence[Clue],
    size: int,
    tracer: Optional[Tracer] = None,
    rules: Sequence[Rule] = RULES,
) -> SolveResult:
    """
    Apply rules to a copy of `board` until none makes progress.
    The first rule that yields placements on blank cells wins the pass: all
    of its placements are applied and the scan restarts from the easiest rule.
    The input board is never modified. Never guesses; a board the rules
    cannot finish comes back with `solved=False`.
    """
    work = clone_board(board)
    steps: List[SolveStep] = []
    rules_used: List[str] = []
    difficulty = 0

    while True:
        applied = _apply_first_rule(work, clues, size, rules)
        if not applied:
            break
        for step in applied:
            work[step.row][step.col] = step.value
            steps.append(step)
            difficulty += step.weight
            if step.rule not in rules_used:
                rules_used.append(step.rule)
            if tracer is not None:
                tracer.log_deduction(step.row, step.col, step.value, step.rule, step.weight)

    solved = all(v is not None for row in work for v in row)
    if solved and tracer is not None:
        tracer.log_solution_found(difficulty=difficulty)

    return SolveResult(
        solved=solved,
        board=work,
        difficulty=difficulty,
        steps=steps,
        rules_used=rules_used,
    )


def _apply_first_rule(
    board: Board, clues: Sequence[Clue], size: int, rules: Sequence[Rule]
) -> List[SolveStep]:
    """Deduplicated placements from the first productive rule, or []."""
    for rule in rules:
        unique: Dict[Tuple[int, int], SolveStep] = {}
        for step in _open_steps(board, rule(board, clues, size)):
            unique.setdefault((step.row, step.col), step)
        if unique:
            return list(unique.values())
    return []


def _open_steps(board: Board, steps: List[SolveStep]) -> List[SolveStep]:
    return [s for s in steps if board[s.row][s.col] is None and s.value is not None]


def next_hint(
    board: Board, clues: Sequence[Clue], size: int, rules: Sequence[Rule] = RULES
) -> Optional[SolveStep]:
    """The easiest single deduction available on the current board."""
    work = clone_board(board)
    for rule in rules:
        candidates = _open_steps(work, rule(work, clues, size))
        if candidates:
            return candidates[0]
    return None


def solution_hint(board: Board, solution: Board) -> Optional[SolveStep]:
    """
    Fallback hint read straight from the stored solution: the first cell in
    row-major order that differs from it.
    """
    for r, row in enumerate(solution):
        for c, target in enumerate(row):
            current = board[r][c] if r < len(board) and c < len(board[r]) else None
            if current != target:
                return SolveStep(r, c, target, "Solution cell", 0)
    return None
