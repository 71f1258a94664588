from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import Any, List, Optional, Tuple

from .board import BOARD_SIZE, Board
from .dealer import DEFAULT_DEAL_ATTEMPTS, PIECES_PER_DEAL, Deal, FairDealer
from .placement import fits_anywhere
from .rules import ClearResult, ScoreState, ScoringRules, resolve_clears
from .storage import BEST_SCORE_KEY, MemoryBestScoreStore


logger = logging.getLogger(__name__)


@dataclass
class GameConfig:
    board_size: int = BOARD_SIZE
    pieces_per_deal: int = PIECES_PER_DEAL
    deal_attempts: int = DEFAULT_DEAL_ATTEMPTS
    random_seed: Optional[int] = None
    max_episode_steps: int = 10000
    best_score_key: str = BEST_SCORE_KEY


@dataclass(frozen=True)
class PlacementOutcome:
    accepted: bool
    clear: Optional[ClearResult] = None
    board_exhausted: bool = False


REJECTED = PlacementOutcome(accepted=False)


class BlockBreezeGame:
    """Game session: deal, place, clear, score, re-deal or end."""

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        rules: Optional[ScoringRules] = None,
        rng: Optional[Any] = None,
        store: Optional[Any] = None,
    ) -> None:
        self.config = config or GameConfig()
        self.rules = rules or ScoringRules()
        self.rng = rng if rng is not None else random.Random(self.config.random_seed)
        self.store = store if store is not None else MemoryBestScoreStore()
        self.dealer = FairDealer(
            self.rng,
            attempts=self.config.deal_attempts,
            pieces_per_deal=self.config.pieces_per_deal,
        )
        self.board = Board.empty(self.config.board_size)
        self.state = ScoreState(
            best=self.store.load(self.config.best_score_key),
            multiplier=self.rules.base_multiplier,
        )
        self.deal: Optional[Deal] = None
        self.game_over = False
        self.step_count = 0
        self.total_lines_cleared = 0
        self.total_pieces_placed = 0
        self.last_clear: Optional[ClearResult] = None
        self.reset()

    @property
    def score(self) -> int:
        return self.state.score

    @property
    def best(self) -> int:
        return self.state.best

    @property
    def multiplier(self) -> float:
        return self.state.multiplier

    def reset(self, seed: Optional[int] = None) -> None:
        if seed is not None and hasattr(self.rng, "seed"):
            self.rng.seed(seed)
        self.board = Board.empty(self.config.board_size)
        self.state.score = 0
        self.state.multiplier = self.rules.base_multiplier
        self.game_over = False
        self.step_count = 0
        self.total_lines_cleared = 0
        self.total_pieces_placed = 0
        self.last_clear = None
        self.request_deal()

    def request_deal(self) -> Optional[Deal]:
        outcome = self.dealer.deal(self.board)
        self.deal = outcome.deal
        if outcome.exhausted:
            self._end("no fair deal")
        return self.deal

    def _end(self, reason: str) -> None:
        if not self.game_over:
            logger.info("game over (%s): score=%d best=%d", reason, self.state.score, self.state.best)
        self.game_over = True

    def place(self, piece_idx: int, row: int, col: int) -> PlacementOutcome:
        if self.game_over or self.deal is None:
            return REJECTED
        if piece_idx < 0 or piece_idx >= len(self.deal):
            return REJECTED
        piece = self.deal[piece_idx]
        if piece.placed or not self.board.fits(piece.shape, row, col):
            return REJECTED

        previous_best = self.state.best
        placed = self.board.apply(piece.shape, row, col, piece.color)
        piece.placed = True
        self.board, clear = resolve_clears(placed, self.state, self.rules)
        self.step_count += 1
        self.total_pieces_placed += 1
        self.total_lines_cleared += clear.lines_cleared
        self.last_clear = clear

        if self.deal.all_placed():
            self.request_deal()
        if not self.game_over and not self.any_placement_available():
            self._end("no placement available")

        # Session state is complete before the store is touched.
        if self.state.best > previous_best:
            self.store.save(self.state.best, self.config.best_score_key)
            logger.debug("new best %d", self.state.best)
        return PlacementOutcome(accepted=True, clear=clear, board_exhausted=self.game_over)

    def any_placement_available(self) -> bool:
        if self.deal is None:
            return False
        return any(fits_anywhere(self.board, p.shape) for p in self.deal.remaining())

    def get_valid_actions(self) -> List[Tuple[int, int, int]]:
        """List of (piece_idx, row, col) valid actions"""
        actions: List[Tuple[int, int, int]] = []
        if self.game_over or self.deal is None:
            return actions
        size = self.board.size
        for idx, piece in enumerate(self.deal):
            if piece.placed:
                continue
            for row in range(size):
                for col in range(size):
                    if self.board.fits(piece.shape, row, col):
                        actions.append((idx, row, col))
        return actions

    def get_current_piece_kinds(self) -> List[int]:
        """Kind per deal slot, -1 for placed pieces."""
        if self.deal is None:
            return []
        return [-1 if p.placed else int(p.kind) for p in self.deal]

    def get_state(self) -> dict:
        return {
            "grid": self.board.cells.copy(),
            "current_pieces": self.get_current_piece_kinds(),
            "pieces_remaining": len(self.deal.remaining()) if self.deal is not None else 0,
            "score": self.state.score,
            "best": self.state.best,
            "multiplier": self.state.multiplier,
            "total_lines_cleared": self.total_lines_cleared,
            "total_pieces_placed": self.total_pieces_placed,
            "step_count": self.step_count,
            "game_over": self.game_over,
        }

    def get_game_stats(self) -> dict:
        return {
            "final_score": self.state.score,
            "best": self.state.best,
            "pieces_placed": self.total_pieces_placed,
            "lines_cleared": self.total_lines_cleared,
            "steps_taken": self.step_count,
            "final_filled_cells": self.board.filled_count,
            "avg_score_per_piece": self.state.score / max(1, self.total_pieces_placed),
        }
