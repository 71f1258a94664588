from __future__ import annotations

import json
import os
import tempfile
from typing import Dict


BEST_SCORE_KEY = "blockbreeze_best"


class MemoryBestScoreStore:
    def __init__(self, initial: Dict[str, int] | None = None) -> None:
        self._values: Dict[str, int] = dict(initial or {})

    def load(self, key: str = BEST_SCORE_KEY) -> int:
        return int(self._values.get(key, 0))

    def save(self, value: int, key: str = BEST_SCORE_KEY) -> None:
        self._values[key] = int(value)


class JsonBestScoreStore:
    """Best scores kept in a small JSON object on disk."""

    def __init__(self, path: str) -> None:
        self.path = str(path)

    def _read(self) -> Dict[str, int]:
        if not os.path.exists(self.path):
            return {}
        with open(self.path, "r", encoding="utf-8") as f:
            data = json.load(f)
        if not isinstance(data, dict):
            raise ValueError(f"{self.path}: expected a JSON object")
        return data

    def load(self, key: str = BEST_SCORE_KEY) -> int:
        return max(0, int(self._read().get(key, 0)))

    def save(self, value: int, key: str = BEST_SCORE_KEY) -> None:
        data = self._read()
        data[key] = int(value)
        parent = os.path.dirname(self.path)
        if parent:
            os.makedirs(parent, exist_ok=True)
        # Write beside the target and swap in, so a cut-off save leaves the old file.
        fd, tmp_path = tempfile.mkstemp(prefix=".best-", suffix=".json", dir=parent or ".")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f)
            os.replace(tmp_path, self.path)
        except BaseException:
            os.unlink(tmp_path)
            raise
