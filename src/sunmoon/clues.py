"""Place equal / different clues on a solved board."""

import random
from typing import List, Tuple

from .model import Board, Clue, ClueType, Direction, board_config
from .patterns import shuffled


def neighbor_pairs(size: int) -> List[Tuple[int, int, Direction]]:
    pairs: List[Tuple[int, int, Direction]] = []
    for r in range(size):
        for c in range(size):
            if c + 1 < size:
                pairs.append((r, c, Direction.HORIZONTAL))
            if r + 1 < size:
                pairs.append((r, c, Direction.VERTICAL))
    return pairs


def place_clues(solution: Board, size: int, rng: random.Random) -> List[Clue]:
    """
    Pick a random number of adjacent pairs (within the size's clue range) and
    label each from the solution: "=" when both cells match, "x" otherwise.
    """
    config = board_config(size)
    num_clues = rng.randint(config.min_clues, config.max_clues)

    clues: List[Clue] = []
    for row, col, direction in shuffled(neighbor_pairs(size), rng):
        if len(clues) >= num_clues:
            break

        v1 = solution[row][col]
        if direction == Direction.HORIZONTAL:
            v2 = solution[row][col + 1]
        else:
            v2 = solution[row + 1][col]
        if v1 is None or v2 is None:
            continue

        clue_type = ClueType.EQUAL if v1 == v2 else ClueType.DIFFERENT
        clues.append(Clue(row=row, col=col, direction=direction, type=clue_type))

    return clues
