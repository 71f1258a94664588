# tests/test_rules.py
from __future__ import annotations

import pytest

from block_breeze.game import Board, ScoreState, ScoringRules, ShapeKind, praise_for, resolve_clears, shape_for
from block_breeze.game.rules import PRAISE, praise_tier

from helpers import ScriptedRandom

ROW_NEARLY_FULL = [
    "#######.",
    "........",
    "........",
    "........",
    "........",
    "........",
    "........",
    "........",
]

CROSS_NEARLY_FULL = [
    "...#....",
    "...#....",
    "###.####",
    "...#....",
    "...#....",
    "...#....",
    "...#....",
    "...#....",
]

DOT = shape_for(ShapeKind.DOT)


def test_single_row_at_base_multiplier_scores_80() -> None:
    board = Board.from_rows(ROW_NEARLY_FULL).apply(DOT, 0, 7, 3)
    state = ScoreState()
    cleared_board, result = resolve_clears(board, state, ScoringRules())
    assert result.lines_cleared == 1
    assert result.cleared_cells == 8
    assert result.score_delta == 80
    assert result.new_score == 80
    assert result.rows == frozenset({0})
    assert result.cols == frozenset()
    assert cleared_board.filled_count == 0
    assert state.multiplier == pytest.approx(1.1)


def test_row_and_column_crossing_scores_200() -> None:
    board = Board.from_rows(CROSS_NEARLY_FULL).apply(DOT, 2, 3, 3)
    state = ScoreState()
    cleared_board, result = resolve_clears(board, state, ScoringRules())
    assert result.lines_cleared == 2
    assert result.cleared_cells == 15
    assert result.score_delta == 200
    assert result.praise_tier == 2
    assert cleared_board.filled_count == 0


def test_multiplier_grows_on_streak_and_resets_on_quiet_placement() -> None:
    rules = ScoringRules()
    state = ScoreState()

    board = Board.from_rows(ROW_NEARLY_FULL).apply(DOT, 0, 7, 3)
    board, first = resolve_clears(board, state, rules)
    assert first.score_delta == 80
    assert state.multiplier == pytest.approx(1.1)

    board = board.apply(shape_for(ShapeKind.LINE_H), 3, 0, 3).apply(shape_for(ShapeKind.LINE_H), 3, 4, 3)
    board, second = resolve_clears(board, state, rules)
    assert second.score_delta == 88
    assert state.multiplier == pytest.approx(1.2)
    assert state.score == 168

    board = board.apply(DOT, 5, 5, 3)
    board, quiet = resolve_clears(board, state, rules)
    assert quiet.lines_cleared == 0
    assert quiet.score_delta == 0
    assert quiet.new_score == 168
    assert quiet.praise_tier == 0
    assert state.multiplier == 1.0
    assert board.filled_count == 1


def test_best_tracks_high_water_mark() -> None:
    state = ScoreState(score=0, best=500)
    board = Board.from_rows(ROW_NEARLY_FULL).apply(DOT, 0, 7, 3)
    _, result = resolve_clears(board, state, ScoringRules())
    assert result.new_best == 500

    state = ScoreState(score=450, best=500)
    _, result = resolve_clears(board, state, ScoringRules())
    assert result.new_score == 530
    assert result.new_best == 530
    assert state.best == 530


def test_score_rounds_half_up() -> None:
    rules = ScoringRules()
    assert rules.score_for_clear(1, 1, 1.05) == 11
    assert rules.score_for_clear(8, 1, 1.3) == 104
    assert rules.score_for_clear(0, 0, 2.0) == 0


def test_praise_is_bucketed_to_four_tiers() -> None:
    assert praise_tier(0) == 0
    assert praise_tier(1) == 1
    assert praise_tier(4) == 4
    assert praise_tier(7) == 4
    rng = ScriptedRandom([])
    assert praise_for(0, rng) is None
    assert praise_for(1, rng) == PRAISE[1][0]
    assert praise_for(6, rng) in PRAISE[4]
