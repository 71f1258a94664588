from __future__ import annotations

from typing import List, NamedTuple

from .board import Board
from .pieces import Shape


class Placement(NamedTuple):
    """Top-left anchor of a shape on the board."""

    row: int
    col: int


def enumerate_placements(board: Board, shape: Shape) -> List[Placement]:
    """All anchors where `shape` fits, in row-major order."""
    spots: List[Placement] = []
    for row in range(board.size - shape.height + 1):
        for col in range(board.size - shape.width + 1):
            if board.fits(shape, row, col):
                spots.append(Placement(row, col))
    return spots


def fits_anywhere(board: Board, shape: Shape) -> bool:
    for row in range(board.size - shape.height + 1):
        for col in range(board.size - shape.width + 1):
            if board.fits(shape, row, col):
                return True
    return False
