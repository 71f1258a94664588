from __future__ import annotations

import numpy as np
import gymnasium as gym
from gymnasium import spaces

from .block_breeze_env import _compute_action_mask


class FlattenDiscreteActionWrapper(gym.ActionWrapper):
    """Flattens MultiDiscrete (piece, row, col) -> Discrete(N).

    Also exposes `get_action_mask()` returning a 1D boolean mask of shape (N,).
    Order: piece, row, col (C-order flattening).
    """

    def __init__(self, env: gym.Env):
        super().__init__(env)
        assert isinstance(env.action_space, spaces.MultiDiscrete)
        k, rows, cols = map(int, env.action_space.nvec)
        assert rows == cols, "Expected square grid"
        self.k = k
        self.size = rows
        self.n = int(k * self.size * self.size)
        self.action_space = spaces.Discrete(self.n)

    def _unflatten(self, idx: int) -> tuple[int, int, int]:
        col = idx % self.size
        idx //= self.size
        row = idx % self.size
        piece = idx // self.size
        return int(piece), int(row), int(col)

    def action(self, action: int):  # type: ignore[override]
        return np.array(self._unflatten(int(action)), dtype=np.int64)

    def get_action_mask(self) -> np.ndarray:
        return _compute_action_mask(self.env.unwrapped.game).reshape(-1)


class ResampleInvalidActionWrapper(gym.Wrapper):
    """Swap an illegal flat action for a random legal placement.

    The mask marks (piece, row, col) triples where an unplaced piece of the
    current deal fits on the board. A masked-out action is replaced by one
    drawn uniformly from the marked triples using the env's `np_random`.
    With nothing marked (game over) the action passes through unchanged.
    `info["resampled"]` tells whether the swap happened.
    """

    def step(self, action):  # type: ignore[override]
        resampled = False
        if isinstance(self.action_space, spaces.Discrete) and hasattr(self.env, "get_action_mask"):
            mask = self.get_action_mask()
            if not (0 <= int(action) < mask.shape[0] and mask[int(action)]):
                legal = np.flatnonzero(mask)
                if legal.size > 0:
                    action = int(self.np_random.choice(legal))
                    resampled = True
        obs, reward, terminated, truncated, info = self.env.step(action)
        info["resampled"] = resampled
        return obs, reward, terminated, truncated, info

    def get_action_mask(self) -> np.ndarray:
        if hasattr(self.env, "get_action_mask"):
            return getattr(self.env, "get_action_mask")()
        raise AttributeError("Underlying env does not provide get_action_mask")
