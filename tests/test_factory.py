"""Puzzle factory, hashing and difficulty labelling."""

import json
import random

import pytest

from src.sunmoon import factory
from src.sunmoon.factory import PuzzleEngine, generate_puzzle, hash_puzzle
from src.sunmoon.model import (
    BOARD_CONFIGS,
    ClueType,
    GenerationFailure,
    difficulty_label,
    stars_from_time,
)
from src.sunmoon.parser import parse_board, parse_clue
from src.sunmoon.patterns import PatternCache
from src.sunmoon.solver_core import solve
from src.utils.trace import Tracer

SOLVED_4 = ["SSMM", "MMSS", "SMSM", "MSMS"]


def test_hash_is_deterministic_sha256_hex():
    solution = parse_board(SOLVED_4)
    clues = [parse_clue("0,0,h,="), parse_clue("1,1,v,x")]
    digest = hash_puzzle(solution, clues)
    assert digest == hash_puzzle(parse_board(SOLVED_4), list(clues))
    assert len(digest) == 64
    int(digest, 16)


def test_hash_changes_with_clue_type():
    solution = parse_board(SOLVED_4)
    same = hash_puzzle(solution, [parse_clue("0,0,h,=")])
    flipped = hash_puzzle(solution, [parse_clue("0,0,h,x")])
    assert same != flipped


@pytest.mark.parametrize(
    "score,label",
    [(0, "Easy"), (6, "Easy"), (7, "Medium"), (15, "Medium"), (16, "Hard"), (30, "Hard"), (31, "Very Hard")],
)
def test_difficulty_label_thresholds(score, label):
    assert difficulty_label(score) == label


@pytest.mark.parametrize("size,seed", [(4, 11), (6, 12)])
def test_generated_puzzle_is_consistent(size, seed):
    puzzle = generate_puzzle(size, PatternCache(), random.Random(seed))

    assert puzzle.size == size
    config = BOARD_CONFIGS[size]
    assert config.min_clues <= len(puzzle.clues) <= config.max_clues
    for clue in puzzle.clues:
        (r1, c1), (r2, c2) = clue.first, clue.second
        same = puzzle.solution[r1][c1] == puzzle.solution[r2][c2]
        assert clue.type == (ClueType.EQUAL if same else ClueType.DIFFERENT)

    result = solve(puzzle.board, puzzle.clues, size)
    assert result.solved
    assert result.board == puzzle.solution
    assert result.difficulty == puzzle.difficulty
    assert puzzle.label == difficulty_label(puzzle.difficulty)
    assert puzzle.hash == hash_puzzle(puzzle.solution, puzzle.clues)


def test_engine_with_same_seed_is_reproducible():
    a = PuzzleEngine(seed=99).generate_puzzle(4)
    b = PuzzleEngine(seed=99).generate_puzzle(4)
    assert a.hash == b.hash
    assert a.board == b.board


def test_engine_shares_pattern_cache_between_calls():
    engine = PuzzleEngine(seed=1)
    engine.generate_solution(6)
    assert 6 in engine.patterns


def test_puzzle_to_dict_is_json_ready():
    puzzle = PuzzleEngine(seed=5).generate_puzzle(4)
    payload = json.loads(json.dumps(puzzle.to_dict()))
    assert payload["size"] == 4
    assert payload["hash"] == puzzle.hash
    assert set(v for row in payload["solution"] for v in row) == {"sun", "moon"}
    assert all(c["type"] in ("=", "x") for c in payload["clues"])


def test_generation_failure_after_retries(monkeypatch):
    calls = []

    def _never(size, patterns, rng, tracer=None):
        calls.append(size)
        return None

    monkeypatch.setattr(factory, "generate_solution", _never)
    tracer = Tracer()
    with pytest.raises(GenerationFailure):
        generate_puzzle(6, PatternCache(), random.Random(0), tracer)
    assert len(calls) == factory.MAX_SOLUTION_ATTEMPTS
    assert tracer.summary()["action_counts"]["generation_attempt"] == factory.MAX_SOLUTION_ATTEMPTS


def test_unsupported_size_is_rejected():
    with pytest.raises(ValueError):
        PuzzleEngine(seed=0).generate_puzzle(5)


@pytest.mark.parametrize(
    "seconds,stars",
    [(None, 0), (float("nan"), 0), (60, 3), (120, 3), (121, 2), (240, 2), (241, 0)],
)
def test_stars_from_time(seconds, stars):
    assert stars_from_time(seconds) == stars


def test_hash_accepts_plain_string_boards():
    solution = parse_board(SOLVED_4)
    raw = [[v.value for v in row] for row in solution]
    clues = [parse_clue("0,0,h,=")]
    assert hash_puzzle(raw, clues) == hash_puzzle(solution, clues)
