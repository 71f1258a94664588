from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from functools import cached_property
from typing import Dict, Tuple

import numpy as np


MAX_SHAPE_SIDE = 4


class ShapeKind(IntEnum):
    DOT = 1
    DOMINO_H = 2
    DOMINO_V = 3
    TRIO_H = 4
    TRIO_V = 5
    SQUARE = 6
    L = 7
    J = 8
    Z = 9
    S = 10
    T = 11
    LINE_H = 12
    LINE_V = 13
    L_FLAT = 14
    J_FLAT = 15
    P = 16
    Q = 17


# Each orientation is its own entry; pieces never rotate.
BASE_SHAPES: Dict[ShapeKind, np.ndarray] = {
    ShapeKind.DOT: np.array([[1]], dtype=np.int8),
    ShapeKind.DOMINO_H: np.array([[1, 1]], dtype=np.int8),
    ShapeKind.DOMINO_V: np.array([[1], [1]], dtype=np.int8),
    ShapeKind.TRIO_H: np.array([[1, 1, 1]], dtype=np.int8),
    ShapeKind.TRIO_V: np.array([[1], [1], [1]], dtype=np.int8),
    ShapeKind.SQUARE: np.array([[1, 1], [1, 1]], dtype=np.int8),
    ShapeKind.L: np.array([[1, 0], [1, 0], [1, 1]], dtype=np.int8),
    ShapeKind.J: np.array([[0, 1], [0, 1], [1, 1]], dtype=np.int8),
    ShapeKind.Z: np.array([[1, 1, 0], [0, 1, 1]], dtype=np.int8),
    ShapeKind.S: np.array([[0, 1, 1], [1, 1, 0]], dtype=np.int8),
    ShapeKind.T: np.array([[1, 1, 1], [0, 1, 0]], dtype=np.int8),
    ShapeKind.LINE_H: np.array([[1, 1, 1, 1]], dtype=np.int8),
    ShapeKind.LINE_V: np.array([[1], [1], [1], [1]], dtype=np.int8),
    ShapeKind.L_FLAT: np.array([[1, 1, 1], [1, 0, 0]], dtype=np.int8),
    ShapeKind.J_FLAT: np.array([[1, 1, 1], [0, 0, 1]], dtype=np.int8),
    ShapeKind.P: np.array([[1, 1], [1, 1], [1, 0]], dtype=np.int8),
    ShapeKind.Q: np.array([[1, 1], [1, 1], [0, 1]], dtype=np.int8),
}

# Color tokens handed out with dealt pieces (0xRRGGBB, never 0).
PALETTE: Tuple[int, ...] = (
    0xF44336,
    0xFF9800,
    0xFDD835,
    0x4CAF50,
    0x00BCD4,
    0x3F51B5,
    0x9C27B0,
)


@dataclass(frozen=True)
class Shape:
    """Immutable polyomino anchored at its top-left bounding corner."""

    kind: ShapeKind
    rows: Tuple[Tuple[int, ...], ...]

    def __post_init__(self) -> None:
        if not self.rows or not self.rows[0]:
            raise ValueError("shape must have at least one row and column")
        width = len(self.rows[0])
        if any(len(r) != width for r in self.rows):
            raise ValueError(f"shape {self.kind.name} is not rectangular")
        if len(self.rows) > MAX_SHAPE_SIDE or width > MAX_SHAPE_SIDE:
            raise ValueError(f"shape {self.kind.name} exceeds {MAX_SHAPE_SIDE}x{MAX_SHAPE_SIDE}")
        grid = np.array(self.rows, dtype=np.int8)
        # Tight bounding box: the bounds check on the box equals the per-cell check.
        if not (grid[0].any() and grid[-1].any() and grid[:, 0].any() and grid[:, -1].any()):
            raise ValueError(f"shape {self.kind.name} has an empty border row or column")

    @classmethod
    def from_array(cls, kind: ShapeKind, grid: np.ndarray) -> "Shape":
        return cls(kind, tuple(tuple(int(v != 0) for v in row) for row in grid))

    @cached_property
    def mask(self) -> np.ndarray:
        m = np.array(self.rows, dtype=np.bool_)
        m.setflags(write=False)
        return m

    @property
    def height(self) -> int:
        return len(self.rows)

    @property
    def width(self) -> int:
        return len(self.rows[0])

    @property
    def area(self) -> int:
        return sum(sum(r) for r in self.rows)

    def offsets(self) -> Tuple[Tuple[int, int], ...]:
        """(row, col) offsets of the occupied cells, row-major."""
        return tuple(
            (dr, dc) for dr, row in enumerate(self.rows) for dc, v in enumerate(row) if v
        )

    def cells_at(self, row: int, col: int) -> Tuple[Tuple[int, int], ...]:
        return tuple((row + dr, col + dc) for dr, dc in self.offsets())


SHAPES: Tuple[Shape, ...] = tuple(Shape.from_array(kind, grid) for kind, grid in BASE_SHAPES.items())

_BY_KIND: Dict[ShapeKind, Shape] = {s.kind: s for s in SHAPES}


def shape_for(kind: ShapeKind) -> Shape:
    return _BY_KIND[ShapeKind(kind)]


@dataclass
class Piece:
    """A dealt shape with its color token."""

    shape: Shape
    color: int
    placed: bool = False

    @property
    def kind(self) -> ShapeKind:
        return self.shape.kind
