# tests/helpers.py
from __future__ import annotations

import itertools
from typing import Any, List, Sequence

from block_breeze.game import Board, Shape


class ScriptedRandom:
    """Random source that deals shapes from a fixed cycle.

    Any other draw (colors, praise words) takes the first element.
    """

    def __init__(self, shapes: Sequence[Shape]) -> None:
        self._shapes = itertools.cycle(list(shapes))
        self.shape_draws = 0

    def choice(self, seq: Sequence[Any]) -> Any:
        if len(seq) and isinstance(seq[0], Shape):
            self.shape_draws += 1
            return next(self._shapes)
        return seq[0]


def replay(board: Board, shapes: Sequence[Shape], assignment: List[Any], token: int = 7) -> Board:
    """Apply an assignment step by step, checking each placement fits first."""
    for index, (row, col) in assignment:
        assert board.fits(shapes[index], row, col)
        board = board.apply(shapes[index], row, col, token)
    return board
