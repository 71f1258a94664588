from __future__ import annotations

from typing import FrozenSet, Iterable, Optional, Sequence, Tuple, TYPE_CHECKING

import numpy as np

if TYPE_CHECKING:
    from .pieces import Shape


BOARD_SIZE = 8
EMPTY = 0

Coordinate = Tuple[int, int]


class PlacementError(ValueError):
    """Raised when a piece is written where it does not fit."""


class Board:
    """Immutable square occupancy grid.

    The grid uses 0 for empty cells and non-zero integers for filled cells.
    Integer values are the color tokens of the pieces that filled them.
    Every operation that changes cells returns a new board.
    """

    def __init__(self, cells: Optional[np.ndarray] = None, size: int = BOARD_SIZE) -> None:
        if cells is None:
            grid = np.zeros((int(size), int(size)), dtype=np.int32)
        else:
            grid = np.array(cells, dtype=np.int32)
            if grid.ndim != 2 or grid.shape[0] != grid.shape[1]:
                raise ValueError(f"board must be a square 2D grid, got shape {grid.shape}")
        grid.setflags(write=False)
        self._cells = grid

    @classmethod
    def empty(cls, size: int = BOARD_SIZE) -> "Board":
        return cls(size=size)

    @classmethod
    def from_rows(cls, rows: Sequence[str], token: int = 1) -> "Board":
        """Build a board from strings where '.' is empty and anything else is filled."""
        grid = [[EMPTY if ch == "." else token for ch in row] for row in rows]
        return cls(np.array(grid, dtype=np.int32))

    @property
    def size(self) -> int:
        return int(self._cells.shape[0])

    @property
    def cells(self) -> np.ndarray:
        return self._cells

    @property
    def filled_count(self) -> int:
        return int(np.count_nonzero(self._cells))

    def __getitem__(self, pos: Coordinate) -> int:
        row, col = pos
        return int(self._cells[row, col])

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Board):
            return NotImplemented
        return bool(np.array_equal(self._cells, other._cells))

    def __hash__(self) -> int:
        return hash((self._cells.shape, self._cells.tobytes()))

    def __repr__(self) -> str:
        return f"Board(size={self.size}, filled={self.filled_count})"

    def __str__(self) -> str:
        return "\n".join("".join("█" if cell else "·" for cell in row) for row in self._cells)

    def fits(self, shape: "Shape", row: int, col: int) -> bool:
        """Check if `shape` anchored at (row, col) lands on empty in-bounds cells."""
        h, w = shape.height, shape.width
        if row < 0 or col < 0:
            return False
        if row + h > self.size or col + w > self.size:
            return False
        region = self._cells[row : row + h, col : col + w]
        return not bool(np.any(region[shape.mask]))

    def apply(self, shape: "Shape", row: int, col: int, token: int) -> "Board":
        """Return a copy with `token` written into every cell of `shape`.

        The caller must have checked `fits`; a violation raises PlacementError.
        """
        if token == EMPTY:
            raise PlacementError("cannot place a piece with the empty token")
        if not self.fits(shape, row, col):
            raise PlacementError(f"shape {shape.kind.name} does not fit at ({row}, {col})")
        grid = self._cells.copy()
        region = grid[row : row + shape.height, col : col + shape.width]
        region[shape.mask] = token
        return Board(grid)

    def full_rows(self) -> FrozenSet[int]:
        return frozenset(int(r) for r in np.flatnonzero(np.all(self._cells != EMPTY, axis=1)))

    def full_cols(self) -> FrozenSet[int]:
        return frozenset(int(c) for c in np.flatnonzero(np.all(self._cells != EMPTY, axis=0)))

    def clear_cells(self, rows: Iterable[int], cols: Iterable[int]) -> Tuple["Board", int]:
        """Empty the union of `rows` and `cols`; return the new board and cells emptied."""
        rows = sorted(set(rows))
        cols = sorted(set(cols))
        if not rows and not cols:
            return self, 0
        mask = np.zeros(self._cells.shape, dtype=np.bool_)
        if rows:
            mask[rows, :] = True
        if cols:
            mask[:, cols] = True
        mask &= self._cells != EMPTY
        cleared = int(np.count_nonzero(mask))
        if cleared == 0:
            return self, 0
        grid = self._cells.copy()
        grid[mask] = EMPTY
        return Board(grid), cleared
