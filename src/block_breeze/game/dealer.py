"""Fair dealing: batches of pieces that can all be placed on the current board.

A batch is fair when some order and some set of anchors places every shape
without overlap, each placement seeing the cells filled by the ones before
it. The dealer samples random batches and proves each one with an exact
backtracking search; if none of the sampled batches can be proven within the
attempt bound the board is declared exhausted, which ends the game.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from typing import Any, Iterator, List, NamedTuple, Optional, Sequence, Tuple

from .board import Board
from .pieces import PALETTE, SHAPES, Piece, Shape
from .placement import Placement, enumerate_placements, fits_anywhere


logger = logging.getLogger(__name__)

DEFAULT_DEAL_ATTEMPTS = 120
PIECES_PER_DEAL = 3

# Token written into search snapshots; only occupancy matters there.
_SEARCH_TOKEN = 1


class Assignment(NamedTuple):
    """One step of a joint placement: which shape of the batch goes where."""

    index: int
    placement: Placement


@dataclass
class Deal:
    """The batch of pieces currently offered to the player."""

    pieces: List[Piece] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.pieces)

    def __iter__(self) -> Iterator[Piece]:
        return iter(self.pieces)

    def __getitem__(self, idx: int) -> Piece:
        return self.pieces[idx]

    @property
    def shapes(self) -> Tuple[Shape, ...]:
        return tuple(p.shape for p in self.pieces)

    def remaining(self) -> List[Piece]:
        return [p for p in self.pieces if not p.placed]

    def all_placed(self) -> bool:
        return all(p.placed for p in self.pieces)


@dataclass
class DealOutcome:
    deal: Optional[Deal]
    assignment: List[Assignment]
    attempts: int

    @property
    def exhausted(self) -> bool:
        return self.deal is None


def find_joint_placement(board: Board, shapes: Sequence[Shape]) -> Optional[List[Assignment]]:
    """Search for anchors placing every shape in `shapes` together.

    Returns the assignment in placement order, or None when no order and no
    set of anchors works. The search is exact.
    """
    return _search(board, tuple(range(len(shapes))), shapes)


def _search(board: Board, remaining: Tuple[int, ...], shapes: Sequence[Shape]) -> Optional[List[Assignment]]:
    if not remaining:
        return []

    # Most constrained shape first; any shape with no spot kills the branch.
    best_idx = -1
    best_spots: Optional[List[Placement]] = None
    for idx in remaining:
        spots = enumerate_placements(board, shapes[idx])
        if not spots:
            return None
        if best_spots is None or len(spots) < len(best_spots):
            best_idx, best_spots = idx, spots

    assert best_spots is not None
    rest = tuple(i for i in remaining if i != best_idx)
    shape = shapes[best_idx]
    for spot in best_spots:
        next_board = board.apply(shape, spot.row, spot.col, _SEARCH_TOKEN)
        tail = _search(next_board, rest, shapes)
        if tail is not None:
            return [Assignment(best_idx, spot)] + tail
    return None


def can_place_all(board: Board, shapes: Sequence[Shape]) -> bool:
    return find_joint_placement(board, shapes) is not None


class FairDealer:
    """Deals batches of pieces that are jointly placeable on a given board.

    `rng` is any object with a `choice(seq)` method; pass a seeded
    `random.Random` or a scripted stand-in to control the draws.
    """

    def __init__(
        self,
        rng: Optional[Any] = None,
        catalog: Sequence[Shape] = SHAPES,
        palette: Sequence[int] = PALETTE,
        attempts: int = DEFAULT_DEAL_ATTEMPTS,
        pieces_per_deal: int = PIECES_PER_DEAL,
    ) -> None:
        if attempts < 1:
            raise ValueError("attempts must be at least 1")
        if not catalog:
            raise ValueError("catalog must not be empty")
        if not palette or any(c == 0 for c in palette):
            raise ValueError("palette must hold non-zero color tokens")
        self.rng = rng if rng is not None else random.Random()
        self.catalog = tuple(catalog)
        self.palette = tuple(palette)
        self.attempts = int(attempts)
        self.pieces_per_deal = int(pieces_per_deal)

    def sample_shapes(self) -> Tuple[Shape, ...]:
        return tuple(self.rng.choice(self.catalog) for _ in range(self.pieces_per_deal))

    def _color_pieces(self, shapes: Sequence[Shape]) -> Deal:
        return Deal([Piece(shape, self.rng.choice(self.palette)) for shape in shapes])

    def deal(self, board: Board) -> DealOutcome:
        for attempt in range(1, self.attempts + 1):
            shapes = self.sample_shapes()
            # Cheap rejection before the joint search.
            if not all(fits_anywhere(board, s) for s in shapes):
                continue
            assignment = find_joint_placement(board, shapes)
            if assignment is not None:
                logger.debug(
                    "fair deal %s after %d attempt(s)",
                    [s.kind.name for s in shapes],
                    attempt,
                )
                return DealOutcome(self._color_pieces(shapes), assignment, attempt)
        logger.info("no fair deal found in %d attempts (filled=%d)", self.attempts, board.filled_count)
        return DealOutcome(None, [], self.attempts)

    def deal_random(self) -> Deal:
        """Deal without the fairness check."""
        return self._color_pieces(self.sample_shapes())
