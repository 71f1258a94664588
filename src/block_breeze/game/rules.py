from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Dict, FrozenSet, Optional, Tuple

from .board import Board


PRAISE: Dict[int, Tuple[str, ...]] = {
    1: ("Good", "Nice", "OK!", "Yes!", "Keep it up!"),
    2: ("Great", "Rippin' it!", "Cool", "YAY!"),
    3: ("WOW!", "UBAH!", "Awesome!", "Peak!", "Rocking it!", "WHOAH!"),
    4: ("Spectacular!", "Excellent!", "Perfect!", "Flawless!", "YO YO YO!", "WOOT!!1!"),
}


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def praise_tier(lines: int) -> int:
    if lines <= 0:
        return 0
    return max(1, min(4, lines))


def praise_for(lines: int, rng: Any) -> Optional[str]:
    tier = praise_tier(lines)
    if tier == 0:
        return None
    return rng.choice(PRAISE[tier])


@dataclass
class ScoringRules:
    cell_points: int = 10
    multi_line_bonus: int = 50
    base_multiplier: float = 1.0
    multiplier_step: float = 0.1

    def score_for_clear(self, cleared_cells: int, lines: int, multiplier: float) -> int:
        if lines <= 0:
            return 0
        base = cleared_cells * self.cell_points + (lines - 1) * self.multi_line_bonus
        return _round_half_up(base * multiplier)


@dataclass
class ScoreState:
    score: int = 0
    best: int = 0
    multiplier: float = 1.0


@dataclass(frozen=True)
class ClearResult:
    cleared_cells: int
    lines_cleared: int
    score_delta: int
    new_score: int
    new_best: int
    multiplier: float
    rows: FrozenSet[int] = frozenset()
    cols: FrozenSet[int] = frozenset()

    @property
    def praise_tier(self) -> int:
        return praise_tier(self.lines_cleared)


def resolve_clears(board: Board, state: ScoreState, rules: ScoringRules) -> Tuple[Board, ClearResult]:
    """Clear full rows and columns after a placement and update `state`.

    The multiplier in effect for this clear is the one before the update;
    it grows by one step on a clear and resets when nothing clears.
    """
    rows = board.full_rows()
    cols = board.full_cols()
    if not rows and not cols:
        state.multiplier = rules.base_multiplier
        return board, ClearResult(0, 0, 0, state.score, state.best, state.multiplier)

    lines = len(rows) + len(cols)
    cleared_board, cleared = board.clear_cells(rows, cols)
    delta = rules.score_for_clear(cleared, lines, state.multiplier)
    state.score += delta
    state.multiplier += rules.multiplier_step
    if state.score > state.best:
        state.best = state.score
    return cleared_board, ClearResult(
        cleared_cells=cleared,
        lines_cleared=lines,
        score_delta=delta,
        new_score=state.score,
        new_best=state.best,
        multiplier=state.multiplier,
        rows=rows,
        cols=cols,
    )
