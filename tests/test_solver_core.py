"""Unit tests for the deduction solver loop, hints and scoring."""

from src.sunmoon import solver_core
from src.sunmoon.model import SolveStep, Symbol, clone_board, empty_board
from src.sunmoon.parser import parse_board, parse_clue
from src.utils.trace import Tracer

S, M = Symbol.SUN, Symbol.MOON
SOLVED_4 = ["SSMM", "MMSS", "SMSM", "MSMS"]


def _scenario_board():
    board = parse_board(SOLVED_4)
    board[0][0] = None
    return board


def test_clue_propagation_rederives_blanked_cell():
    solution = parse_board(SOLVED_4)
    clues = [parse_clue("0,0,h,=")]

    result = solver_core.solve(_scenario_board(), clues, 4)

    assert result.solved
    assert result.board == solution
    assert result.steps == [SolveStep(0, 0, S, "Clue Propagation", 1)]
    assert result.difficulty == 1
    assert result.rules_used == ["Clue Propagation"]


def test_solve_does_not_modify_input():
    board = _scenario_board()
    snapshot = clone_board(board)
    solver_core.solve(board, [parse_clue("0,0,h,=")], 4)
    assert board == snapshot


def test_almost_full_row_filled_in_single_pass():
    board = parse_board(["S.S..S"] + ["......"] * 5)

    result = solver_core.solve(board, [], 6)

    assert not result.solved
    assert [(s.row, s.col, s.value) for s in result.steps] == [(0, 1, M), (0, 3, M), (0, 4, M)]
    assert result.rules_used == ["Almost Full"]
    assert result.difficulty == 3


def test_empty_board_without_clues_makes_no_progress():
    result = solver_core.solve(empty_board(4), [], 4)
    assert not result.solved
    assert result.steps == []
    assert result.difficulty == 0


def test_first_rule_placements_are_deduplicated_by_cell():
    board = parse_board(["SS.SS."] + ["......"] * 5)
    steps = solver_core._apply_first_rule(board, [], 6, solver_core.RULES)
    assert [(s.row, s.col) for s in steps] == [(0, 2), (0, 5)]
    assert {s.rule for s in steps} == {"Triple Prevention"}


def test_difficulty_is_sum_of_step_weights():
    board = parse_board(["S..S..", "......", "......", "......", "......", "......"])
    result = solver_core.solve(board, [parse_clue("2,2,h,=")], 6)
    assert result.difficulty == sum(s.weight for s in result.steps)
    assert result.rules_used[0] == result.steps[0].rule


def test_tracer_receives_each_deduction():
    tracer = Tracer()
    result = solver_core.solve(_scenario_board(), [parse_clue("0,0,h,=")], 4, tracer=tracer)
    actions = [s.action_type for s in tracer.steps]
    assert actions == ["deduce"] * len(result.steps) + ["solution_found"]
    assert tracer.steps[0].value == "sun"


def test_next_hint_prefers_easiest_rule():
    board = parse_board(["S.S..S"] + ["......"] * 5)
    hint = solver_core.next_hint(board, [], 6)
    assert hint == SolveStep(0, 1, M, "Almost Full", 1)


def test_next_hint_leaves_board_alone():
    board = _scenario_board()
    snapshot = clone_board(board)
    hint = solver_core.next_hint(board, [parse_clue("0,0,h,=")], 4)
    assert hint == SolveStep(0, 0, S, "Clue Propagation", 1)
    assert board == snapshot


def test_next_hint_none_when_stuck():
    assert solver_core.next_hint(empty_board(4), [], 4) is None


def test_solution_hint_reports_first_mismatch():
    solution = parse_board(SOLVED_4)
    board = parse_board(["SSMM", "MS..", "....", "...."])
    assert solver_core.solution_hint(board, solution) == SolveStep(1, 1, M, "Solution cell", 0)
    assert solver_core.solution_hint(solution, solution) is None
