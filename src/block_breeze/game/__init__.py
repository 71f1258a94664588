"""Game module for Block Breeze.

Exports the core game engine and supporting classes:
- Board: Immutable 8x8 occupancy grid and line clearing
- Shape, ShapeKind, SHAPES: The fixed piece catalog
- enumerate_placements: Legal anchors of a shape on a board
- FairDealer: Batches of pieces that are jointly placeable
- ScoringRules: Clear scoring and streak multiplier
- BlockBreezeGame: Session orchestration and state management
"""

from .board import BOARD_SIZE, Board, PlacementError
from .pieces import PALETTE, SHAPES, Piece, Shape, ShapeKind, shape_for
from .placement import Placement, enumerate_placements, fits_anywhere
from .dealer import Assignment, Deal, DealOutcome, FairDealer, can_place_all, find_joint_placement
from .rules import ClearResult, ScoreState, ScoringRules, praise_for, resolve_clears
from .storage import BEST_SCORE_KEY, JsonBestScoreStore, MemoryBestScoreStore
from .core import BlockBreezeGame, GameConfig, PlacementOutcome

__all__ = [
    "BOARD_SIZE",
    "Board",
    "PlacementError",
    "PALETTE",
    "SHAPES",
    "Piece",
    "Shape",
    "ShapeKind",
    "shape_for",
    "Placement",
    "enumerate_placements",
    "fits_anywhere",
    "Assignment",
    "Deal",
    "DealOutcome",
    "FairDealer",
    "can_place_all",
    "find_joint_placement",
    "ClearResult",
    "ScoreState",
    "ScoringRules",
    "praise_for",
    "resolve_clears",
    "BEST_SCORE_KEY",
    "JsonBestScoreStore",
    "MemoryBestScoreStore",
    "BlockBreezeGame",
    "GameConfig",
    "PlacementOutcome",
]
