"""Puzzle parser: convert raw puzzle records into typed puzzle state.

Supports:
- JSON-style boards: nested lists of "sun" / "moon" / null
- Compact text boards: one string per row, "S" / "M" / "." (also "0"/"1", "_")
- Clues as dicts {"row", "col", "direction", "type"} or strings "row,col,h,="
"""

from __future__ import annotations

import json
from typing import Any, Dict, List, Optional

from .model import (
    Board,
    CellValue,
    Clue,
    ClueType,
    Direction,
    PuzzleState,
    Symbol,
    board_config,
)

_SYMBOL_TOKENS = {
    "sun": Symbol.SUN,
    "s": Symbol.SUN,
    "0": Symbol.SUN,
    "moon": Symbol.MOON,
    "m": Symbol.MOON,
    "1": Symbol.MOON,
}
_BLANK_TOKENS = {"", ".", "_", "-", "null", "none", "empty"}

_DIRECTION_TOKENS = {
    "h": Direction.HORIZONTAL,
    "horizontal": Direction.HORIZONTAL,
    "v": Direction.VERTICAL,
    "vertical": Direction.VERTICAL,
}
_TYPE_TOKENS = {
    "=": ClueType.EQUAL,
    "eq": ClueType.EQUAL,
    "equal": ClueType.EQUAL,
    "x": ClueType.DIFFERENT,
    "×": ClueType.DIFFERENT,
    "diff": ClueType.DIFFERENT,
    "different": ClueType.DIFFERENT,
}


def parse_cell(token: Any) -> CellValue:
    if token is None:
        return None
    if isinstance(token, Symbol):
        return token
    key = str(token).strip().lower()
    if key in _BLANK_TOKENS:
        return None
    if key in _SYMBOL_TOKENS:
        return _SYMBOL_TOKENS[key]
    raise ValueError(f"Unrecognized cell value: {token!r}")


def parse_board(raw: Any) -> Board:
    """Accept a nested list, a list of row strings, or a newline-separated string."""
    if isinstance(raw, str):
        stripped = raw.strip()
        if stripped.startswith("["):
            return parse_board(json.loads(stripped))
        raw = [line for line in stripped.splitlines() if line.strip()]
    elif hasattr(raw, "tolist"):
        raw = raw.tolist()

    if not isinstance(raw, (list, tuple)):
        raise ValueError(f"Board must be a list or text, got {type(raw).__name__}")

    board: Board = []
    for row in raw:
        if isinstance(row, str):
            tokens = row.split() if " " in row.strip() else list(row.strip())
        elif hasattr(row, "tolist"):
            tokens = row.tolist()
        else:
            tokens = list(row)
        board.append([parse_cell(t) for t in tokens])
    return board


def format_board(board: Board) -> str:
    """Render a board in the compact text notation (S / M / .)."""
    chars = {Symbol.SUN: "S", Symbol.MOON: "M", None: "."}
    return "\n".join("".join(chars[v] for v in row) for row in board)


def parse_clue(raw: Any) -> Clue:
    if isinstance(raw, Clue):
        return raw
    if isinstance(raw, str):
        parts = [p.strip() for p in raw.split(",")]
        if len(parts) != 4:
            raise ValueError(f"Clue text must be 'row,col,direction,type', got {raw!r}")
        raw = dict(zip(("row", "col", "direction", "type"), parts))
    if not isinstance(raw, dict):
        raise ValueError(f"Unrecognized clue: {raw!r}")

    try:
        direction = _DIRECTION_TOKENS[str(raw["direction"]).strip().lower()]
        clue_type = _TYPE_TOKENS[str(raw["type"]).strip().lower()]
        return Clue(row=int(raw["row"]), col=int(raw["col"]), direction=direction, type=clue_type)
    except (KeyError, TypeError, ValueError) as exc:
        raise ValueError(f"Malformed clue {raw!r}: {exc}") from exc


def parse_clues(raw: Any) -> List[Clue]:
    if raw is None:
        return []
    if isinstance(raw, str):
        stripped = raw.strip()
        if not stripped:
            return []
        if stripped.startswith("["):
            raw = json.loads(stripped)
        else:
            raw = [part for part in stripped.split(";") if part.strip()]
    if hasattr(raw, "tolist"):
        raw = raw.tolist()
    return [parse_clue(c) for c in raw]


def _check_shape(board: Board, size: int, what: str) -> None:
    if len(board) != size or any(len(row) != size for row in board):
        raise ValueError(f"{what} must be {size}x{size}")


def _check_clue_bounds(clues: List[Clue], size: int) -> None:
    for clue in clues:
        for r, c in (clue.first, clue.second):
            if not (0 <= r < size and 0 <= c < size):
                raise ValueError(f"Clue {clue.to_dict()} falls outside a {size}x{size} board")


def parse_puzzle(puzzle_json: Dict[str, Any]) -> PuzzleState:
    raw_board = puzzle_json.get("board")
    if raw_board is None:
        raise ValueError("Puzzle record has no 'board'")
    board = parse_board(raw_board)

    size_value = puzzle_json.get("size")
    size = int(size_value) if size_value not in (None, "") else len(board)
    board_config(size)
    _check_shape(board, size, "Board")

    clues = parse_clues(puzzle_json.get("clues"))
    _check_clue_bounds(clues, size)

    solution: Optional[Board] = None
    if puzzle_json.get("solution") is not None:
        solution = parse_board(puzzle_json["solution"])
        _check_shape(solution, size, "Solution")

    return PuzzleState(
        size=size,
        board=board,
        clues=clues,
        solution=solution,
        id=str(puzzle_json.get("id", "unknown")),
    )
