from __future__ import annotations

from typing import Any, Dict, Optional, Tuple

import numpy as np
import gymnasium as gym
from gymnasium import spaces

from block_breeze.game import SHAPES, BlockBreezeGame, GameConfig


def _compute_action_mask(game: BlockBreezeGame) -> np.ndarray:
    size = game.board.size
    k = game.config.pieces_per_deal
    mask = np.zeros((k, size, size), dtype=np.bool_)
    for piece_idx, row, col in game.get_valid_actions():  # list of (piece_idx, row, col)
        mask[piece_idx, row, col] = True
    return mask


def _token_to_rgb(token: int) -> Tuple[int, int, int]:
    return (token >> 16) & 0xFF, (token >> 8) & 0xFF, token & 0xFF


class BlockBreezeEnv(gym.Env):
    metadata = {"render_modes": ["rgb_array"], "render_fps": 30}

    def __init__(self, config: Optional[GameConfig] = None, render_mode: Optional[str] = None,
                 reward_weights: Optional[Dict[str, float]] = None,
                 invalid_action_penalty: float = -0.1,
                 terminal_penalty: float = 0.0) -> None:
        super().__init__()
        self.game = BlockBreezeGame(config)
        self.render_mode = render_mode

        # Reward shaping parameters
        self.invalid_action_penalty = float(invalid_action_penalty)
        self.terminal_penalty = float(terminal_penalty)
        self.reward_weights: Dict[str, float] = {
            "score": 1.0,            # engine score delta
            "cells": 0.0,            # reward per cell placed
        }
        if reward_weights:
            self.reward_weights.update({k: float(v) for k, v in reward_weights.items()})

        size = self.game.config.board_size
        k = self.game.config.pieces_per_deal

        # Observation space: occupancy (0/1) and kinds of unplaced pieces (-1 once placed)
        self.observation_space = spaces.Dict(
            {
                "grid": spaces.Box(low=0, high=1, shape=(size, size), dtype=np.int8),
                "pieces": spaces.Box(low=-1, high=len(SHAPES), shape=(k,), dtype=np.int8),
                "pieces_remaining": spaces.Discrete(k + 1),
            }
        )

        # Action: (piece_idx, row, col)
        self.action_space = spaces.MultiDiscrete((k, size, size))

    def _get_obs(self) -> Dict[str, Any]:
        k = self.game.config.pieces_per_deal
        grid = (self.game.board.cells != 0).astype(np.int8)
        pieces = np.full((k,), -1, dtype=np.int8)
        for i, kind in enumerate(self.game.get_current_piece_kinds()[:k]):
            pieces[i] = int(kind)
        remaining = len(self.game.deal.remaining()) if self.game.deal is not None else 0
        return {
            "grid": grid,
            "pieces": pieces,
            "pieces_remaining": remaining,
        }

    def _get_info(self) -> Dict[str, Any]:
        return {
            "action_mask": _compute_action_mask(self.game),
            "valid_actions": self.game.get_valid_actions(),
            "score": self.game.score,
            "best": self.game.best,
            "multiplier": self.game.multiplier,
            "steps": self.game.step_count,
        }

    def get_action_mask(self) -> np.ndarray:
        return _compute_action_mask(self.game)

    def reset(self, *, seed: Optional[int] = None, options: Optional[dict] = None) -> Tuple[Dict[str, Any], Dict[str, Any]]:
        super().reset(seed=seed)
        self.game.reset(seed)
        obs = self._get_obs()
        info = self._get_info()
        return obs, info

    def step(self, action: np.ndarray | Tuple[int, int, int]):
        piece_idx, row, col = map(int, action)

        cells_in_piece = 0
        deal = self.game.deal
        if deal is not None and 0 <= piece_idx < len(deal):
            cells_in_piece = deal[piece_idx].shape.area

        outcome = self.game.place(piece_idx, row, col)

        reward_components: Dict[str, float] = {}
        lines = 0
        delta = 0
        if outcome.accepted and outcome.clear is not None:
            lines = outcome.clear.lines_cleared
            delta = outcome.clear.score_delta
            reward_components["score"] = self.reward_weights["score"] * float(delta)
            reward_components["cells"] = self.reward_weights["cells"] * float(cells_in_piece)
        else:
            reward_components["invalid"] = self.invalid_action_penalty

        terminated = bool(self.game.game_over)
        truncated = self.game.step_count >= self.game.config.max_episode_steps
        if terminated:
            reward_components["terminal"] = self.terminal_penalty

        reward = float(sum(reward_components.values()))

        obs = self._get_obs()
        info = self._get_info()
        info["reward_components"] = reward_components
        info["engine_score_delta"] = float(delta)
        info["lines_cleared"] = lines
        return obs, reward, terminated, truncated, info

    def render(self) -> Optional[np.ndarray]:
        if self.render_mode == "rgb_array":
            cells = self.game.board.cells
            cell = 12
            h, w = cells.shape
            img = np.zeros((h * cell, w * cell, 3), dtype=np.uint8)
            for y in range(h):
                for x in range(w):
                    token = int(cells[y, x])
                    color = _token_to_rgb(token) if token else (15, 30, 86)
                    img[y * cell : (y + 1) * cell, x * cell : (x + 1) * cell, :] = color
            return img
        return None

    def close(self) -> None:
        pass
