# tests/conftest.py
from __future__ import annotations

from typing import List, Type

import pytest

from helpers import ScriptedRandom


@pytest.fixture
def scripted() -> Type[ScriptedRandom]:
    return ScriptedRandom


@pytest.fixture
def diagonal_rows() -> List[str]:
    # Only one horizontal pair of empty cells, at (0, 0)-(0, 1); no full lines.
    return [
        "..###.##",
        "#.######",
        "##.#####",
        "###.####",
        ".###.###",
        "#####.##",
        "######.#",
        "#######.",
    ]
