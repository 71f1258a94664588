"""Gymnasium environments for Block Breeze."""

from __future__ import annotations

from gymnasium.envs.registration import register

# Register default Block Breeze environment
register(
    id="BlockBreeze-8x8-v0",
    entry_point="block_breeze.env.block_breeze_env:BlockBreezeEnv",
)

__all__ = ["BlockBreeze-8x8-v0"]
