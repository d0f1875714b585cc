"""CLI entrypoint: generate puzzles, or load puzzle(s) and solve / check / hint them."""

import argparse
import csv
import json
import os
import random
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Set

from solver import solve_puzzle
from src.sunmoon.factory import PuzzleEngine
from src.sunmoon.loader import load_puzzles
from src.sunmoon.model import (
    SUPPORTED_SIZES,
    GenerationFailure,
    Puzzle,
    PuzzleState,
    board_to_json,
    difficulty_label,
)
from src.sunmoon.parser import parse_puzzle
from src.sunmoon.solver_core import next_hint, solution_hint
from src.sunmoon.validation import check_board
from src.utils.io import save_json, save_jsonl
from src.utils.trace import Tracer, get_tracer, reset_tracer

MAX_GENERATION_ATTEMPTS = 5
LABELS = ("Easy", "Medium", "Hard", "Very Hard")


def _env_int(parser: argparse.ArgumentParser, name: str) -> Optional[int]:
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return None
    try:
        return int(raw)
    except ValueError:
        parser.error(f"${name} must be an integer, got {raw!r}")


def _env_size(parser: argparse.ArgumentParser) -> int:
    # argparse does not apply `choices` to defaults
    size = _env_int(parser, "SUNMOON_SIZE")
    if size is None:
        return 6
    if size not in SUPPORTED_SIZES:
        parser.error(f"$SUNMOON_SIZE must be one of {SUPPORTED_SIZES}, got {size}")
    return size


def parse_args(argv: Optional[List[str]] = None):
    parser = argparse.ArgumentParser(description="Generate, solve and check Sun/Moon puzzles")
    sub = parser.add_subparsers(dest="command", required=True)

    gen = sub.add_parser("generate", help="Generate new puzzles")
    gen.add_argument(
        "--size",
        type=int,
        choices=SUPPORTED_SIZES,
        default=_env_size(parser),
        help="Board size (default: $SUNMOON_SIZE or 6)",
    )
    gen.add_argument("--count", type=int, default=1, help="Number of distinct puzzles to produce")
    gen.add_argument(
        "--seed",
        type=int,
        default=_env_int(parser, "SUNMOON_SEED"),
        help="Random seed (default: $SUNMOON_SEED, else unseeded)",
    )
    gen.add_argument(
        "--label",
        choices=LABELS,
        default=None,
        help="Only accept puzzles with this difficulty label.",
    )
    gen.add_argument(
        "--attempts",
        type=int,
        default=MAX_GENERATION_ATTEMPTS,
        help="Generation attempts allowed per puzzle.",
    )
    gen.add_argument("--output", type=Path, default=None, help="Optional .json or .jsonl output path")
    gen.add_argument("--trace-dir", type=Path, default=None, help="Optional directory for trace CSVs")

    for name, help_text in (
        ("solve", "Solve puzzles by deduction and score them"),
        ("check", "Report rule violations and completion"),
        ("hint", "Return the next deduction for each board"),
    ):
        cmd = sub.add_parser(name, help=help_text)
        cmd.add_argument("input", type=Path, help="Path to puzzle file or directory of puzzles")
        cmd.add_argument("--output", type=Path, default=None, help="Optional path to write results CSV")
        cmd.add_argument("--trace-dir", type=Path, default=None, help="Optional directory for trace CSVs")

    return parser.parse_args(argv)


def generate_unique(
    engine: PuzzleEngine,
    size: int,
    seen: Set[str],
    *,
    attempts: int = MAX_GENERATION_ATTEMPTS,
    label: Optional[str] = None,
    tracer: Optional[Tracer] = None,
) -> Puzzle:
    """
    Generate a puzzle whose hash is not in `seen` (and, if given, whose label
    matches). The new hash is added to `seen`.
    """
    for attempt in range(1, attempts + 1):
        try:
            puzzle = engine.generate_puzzle(size, tracer=tracer)
        except GenerationFailure as e:
            print(f"Attempt {attempt}: {e}")
            continue
        if puzzle.hash in seen:
            continue
        if label is not None and puzzle.label != label:
            continue
        seen.add(puzzle.hash)
        return puzzle

    wanted = f" {label}" if label else ""
    raise GenerationFailure(f"Failed to generate a unique{wanted} puzzle of size {size} in {attempts} attempts")


def solve_record(state: PuzzleState, tracer: Tracer) -> Dict[str, Any]:
    result = solve_puzzle(state, tracer=tracer)
    return {
        "solved": result.solved,
        "difficulty": result.difficulty,
        "label": difficulty_label(result.difficulty),
        "rules_used": result.rules_used,
        "board": board_to_json(result.board),
    }


def check_record(state: PuzzleState, tracer: Tracer) -> Dict[str, Any]:
    check = check_board(state.board, state.clues, state.size)
    return {
        "correct": check.correct,
        "complete": check.complete,
        "errors": [list(cell) for cell in sorted(check.errors)],
    }


def hint_record(state: PuzzleState, tracer: Tracer) -> Dict[str, Any]:
    step = next_hint(state.board, state.clues, state.size)
    if step is None and state.solution is not None:
        step = solution_hint(state.board, state.solution)
    if step is not None:
        tracer.log_deduction(step.row, step.col, step.value, step.rule, step.weight)
    return {"hint": step.to_dict() if step else None}


HANDLERS: Dict[str, Callable[[PuzzleState, Tracer], Dict[str, Any]]] = {
    "solve": solve_record,
    "check": check_record,
    "hint": hint_record,
}


def write_results_csv(results, output_path: Path):
    with open(output_path, "w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(["id", "result", "steps"])

        for r in results:
            writer.writerow([
                r["id"],
                json.dumps(r["result"], ensure_ascii=False, separators=(",", ":")),
                r["steps"]
            ])


def _collect_puzzles(input_path: Path) -> List[Dict[str, Any]]:
    puzzles: List[Dict[str, Any]] = []
    if input_path.is_file():
        puzzles = load_puzzles(str(input_path))
    elif input_path.is_dir():
        for file_path in sorted(input_path.iterdir()):
            if file_path.suffix in [".json", ".jsonl", ".parquet", ".csv"]:
                puzzles.extend(load_puzzles(str(file_path)))
    else:
        raise ValueError(f"Input path {input_path} is neither file nor directory")
    return puzzles


def run_generate(args) -> List[Dict[str, Any]]:
    engine = PuzzleEngine(rng=random.Random(args.seed))
    seen: Set[str] = set()
    generated: List[Dict[str, Any]] = []

    for index in range(args.count):
        reset_tracer()
        tracer = get_tracer()
        try:
            puzzle = generate_unique(
                engine, args.size, seen, attempts=args.attempts, label=args.label, tracer=tracer
            )
        except GenerationFailure as e:
            print(f"ERROR: {e}")
            continue

        record = {"id": puzzle.hash[:12], **puzzle.to_dict()}
        generated.append(record)
        print(f"Generated {record['id']}: size {puzzle.size}, {puzzle.label} ({puzzle.difficulty})")
        if args.trace_dir:
            tracer.to_csv(args.trace_dir / f"generate_{index}_{record['id']}.csv")

    if args.output:
        if args.output.suffix == ".jsonl":
            save_jsonl(args.output, generated)
        else:
            save_json(args.output, generated)
    else:
        for record in generated:
            print(json.dumps(record, separators=(",", ":")))
    return generated


def run_records(args) -> List[Dict[str, Any]]:
    handler = HANDLERS[args.command]
    results = []

    for puzzle in _collect_puzzles(args.input):
        reset_tracer()
        tracer = get_tracer()
        puzzle_id = str(puzzle.get("id", "unknown"))

        try:
            state = parse_puzzle(puzzle)
            payload = handler(state, tracer)
            summary = tracer.summary()
            results.append({
                "id": puzzle_id,
                "result": payload,
                "steps": summary["num_deductions"],
            })
            if args.trace_dir:
                tracer.to_csv(args.trace_dir / f"{args.command}_{puzzle_id}.csv")
        except Exception as e:
            print(f"ERROR: Failed to {args.command} puzzle {puzzle_id}: {e}")
            results.append({
                "id": puzzle_id,
                "result": {"error": str(e)},
                "steps": -1
            })

    if args.output:
        write_results_csv(results, args.output)
    else:
        print(results)
    return results


def main(argv: Optional[List[str]] = None):
    args = parse_args(argv)
    if args.command == "generate":
        return run_generate(args)
    return run_records(args)


if __name__ == "__main__":
    main()
