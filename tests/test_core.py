# tests/test_core.py
from __future__ import annotations

import json
from typing import List

import pytest

from block_breeze.game import (
    BEST_SCORE_KEY,
    BlockBreezeGame,
    Board,
    GameConfig,
    JsonBestScoreStore,
    MemoryBestScoreStore,
    ShapeKind,
    shape_for,
)

from helpers import ScriptedRandom

DOT = shape_for(ShapeKind.DOT)
DOMINO_H = shape_for(ShapeKind.DOMINO_H)
SQUARE = shape_for(ShapeKind.SQUARE)


def _dots_game(store=None) -> BlockBreezeGame:
    return BlockBreezeGame(rng=ScriptedRandom([DOT]), store=store)


def _fill_row_zero(game: BlockBreezeGame) -> List:
    outcomes = []
    for col in range(8):
        idx = next(i for i, p in enumerate(game.deal) if not p.placed)
        outcomes.append(game.place(idx, 0, col))
    return outcomes


def test_new_game_deals_three_unplaced_pieces() -> None:
    game = BlockBreezeGame(GameConfig(random_seed=3))
    assert game.deal is not None
    assert len(game.deal) == 3
    assert not any(p.placed for p in game.deal)
    assert game.score == 0
    assert game.multiplier == 1.0
    assert not game.game_over
    assert game.board == Board.empty()


def test_best_is_loaded_from_store() -> None:
    game = _dots_game(MemoryBestScoreStore({BEST_SCORE_KEY: 1234}))
    assert game.best == 1234


def test_invalid_placement_is_rejected_without_state_change() -> None:
    game = BlockBreezeGame(rng=ScriptedRandom([SQUARE]))
    before = game.get_state()
    for idx, row, col in [(0, 7, 7), (0, -1, 0), (3, 0, 0), (-1, 0, 0)]:
        outcome = game.place(idx, row, col)
        assert not outcome.accepted
        assert outcome.clear is None
    after = game.get_state()
    assert game.board == Board.empty()
    assert after["score"] == before["score"]
    assert after["pieces_remaining"] == 3
    assert not any(p.placed for p in game.deal)


def test_placing_same_piece_twice_is_rejected() -> None:
    game = _dots_game()
    assert game.place(0, 4, 4).accepted
    assert not game.place(0, 5, 5).accepted
    assert game.board.filled_count == 1


def test_placement_writes_piece_color() -> None:
    game = _dots_game()
    color = game.deal[1].color
    game.place(1, 2, 6)
    assert game.board[2, 6] == color


def test_full_row_clears_scores_and_persists_best() -> None:
    store = MemoryBestScoreStore()
    game = _dots_game(store)
    outcomes = _fill_row_zero(game)
    assert all(o.accepted for o in outcomes)
    assert all(o.clear.lines_cleared == 0 for o in outcomes[:-1])

    last = outcomes[-1].clear
    assert last.lines_cleared == 1
    assert last.cleared_cells == 8
    assert last.score_delta == 80
    assert last.new_score == 80
    assert last.new_best == 80
    assert game.board.filled_count == 0
    assert store.load() == 80
    assert game.total_lines_cleared == 1
    assert game.total_pieces_placed == 8


def test_quiet_placement_resets_multiplier() -> None:
    game = _dots_game()
    _fill_row_zero(game)
    assert game.multiplier > 1.0
    idx = next(i for i, p in enumerate(game.deal) if not p.placed)
    outcome = game.place(idx, 4, 4)
    assert outcome.clear.lines_cleared == 0
    assert game.multiplier == 1.0
    assert game.score == 80


def test_new_deal_after_all_three_placed() -> None:
    game = _dots_game()
    first = game.deal
    for i in range(3):
        game.place(i, 1, i)
    assert game.deal is not first
    assert not any(p.placed for p in game.deal)


def test_game_ends_when_no_unplaced_piece_fits(diagonal_rows) -> None:
    game = BlockBreezeGame(rng=ScriptedRandom([DOMINO_H]))
    game.board = Board.from_rows(diagonal_rows)
    assert game.any_placement_available()

    outcome = game.place(0, 0, 0)
    assert outcome.accepted
    assert outcome.clear.lines_cleared == 0
    assert outcome.board_exhausted
    assert game.game_over
    assert not game.any_placement_available()
    assert game.get_valid_actions() == []
    assert not game.place(1, 0, 0).accepted


def test_failed_deal_request_ends_game() -> None:
    game = BlockBreezeGame(rng=ScriptedRandom([SQUARE]))
    game.board = Board.from_rows([
        "########",
        "########",
        "########",
        "####.###",
        "########",
        "########",
        "########",
        "########",
    ])
    assert game.request_deal() is None
    assert game.deal is None
    assert game.game_over
    assert not game.place(0, 3, 4).accepted


def test_reset_keeps_best_and_clears_the_rest() -> None:
    game = _dots_game()
    _fill_row_zero(game)
    game.place(next(i for i, p in enumerate(game.deal) if not p.placed), 6, 6)
    before = game.deal
    game.reset()
    assert game.deal is not None
    assert game.deal is not before
    assert not any(p.placed for p in game.deal)
    assert game.score == 0
    assert game.best == 80
    assert game.multiplier == 1.0
    assert game.board == Board.empty()
    assert game.step_count == 0
    assert not game.game_over


def test_valid_actions_match_fits() -> None:
    game = BlockBreezeGame(GameConfig(random_seed=7))
    actions = game.get_valid_actions()
    assert actions
    for idx, row, col in actions:
        assert game.board.fits(game.deal[idx].shape, row, col)
    stats = game.get_game_stats()
    assert stats["pieces_placed"] == 0


def test_json_store_round_trip_through_game(tmp_path) -> None:
    path = tmp_path / "nested" / "best.json"
    store = JsonBestScoreStore(str(path))
    assert store.load() == 0

    game = _dots_game(store)
    _fill_row_zero(game)
    assert json.loads(path.read_text(encoding="utf-8")) == {BEST_SCORE_KEY: 80}

    again = BlockBreezeGame(rng=ScriptedRandom([DOT]), store=JsonBestScoreStore(str(path)))
    assert again.best == 80


class _FailingStore(MemoryBestScoreStore):
    def save(self, value: int, key: str = BEST_SCORE_KEY) -> None:
        raise OSError("disk full")


def test_failed_best_save_leaves_session_complete() -> None:
    game = _dots_game(_FailingStore())
    game.board = Board.from_rows(["#####..."] + ["........"] * 7)
    first = game.deal
    game.place(0, 0, 5)
    game.place(1, 0, 6)
    with pytest.raises(OSError):
        game.place(2, 0, 7)
    assert game.score == 80
    assert game.best == 80
    assert game.board.filled_count == 0
    assert game.deal is not first
    assert not any(p.placed for p in game.deal)
    assert not game.game_over


def test_third_placement_with_no_fair_deal_ends_game() -> None:
    game = _dots_game()
    game.board = Board.from_rows(["#.#.#.#.", ".#.#.#.#"] * 4)
    game.dealer.rng = ScriptedRandom([SQUARE])

    assert game.place(0, 0, 1).accepted
    assert game.place(1, 0, 3).accepted
    outcome = game.place(2, 1, 0)
    assert outcome.accepted
    assert outcome.clear.lines_cleared == 0
    assert outcome.board_exhausted
    assert game.deal is None
    assert game.game_over
    assert not game.place(0, 0, 5).accepted
