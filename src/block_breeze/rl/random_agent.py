from __future__ import annotations

import argparse
import random
from typing import Dict, List, Optional

import gymnasium as gym

import block_breeze.env  # noqa: F401
from block_breeze.utils.logging import setup_logger


def run_random(episodes: int = 10, seed: Optional[int] = None, max_steps: int = 10000) -> List[Dict[str, float]]:
    """Play `episodes` games picking uniformly among valid actions."""
    rng = random.Random(seed)
    env = gym.make("BlockBreeze-8x8-v0")
    results: List[Dict[str, float]] = []
    try:
        for ep in range(episodes):
            obs, info = env.reset(seed=None if seed is None else seed + ep)
            total_reward = 0.0
            steps = 0
            lines = 0
            terminated = truncated = False
            while not (terminated or truncated) and steps < max_steps:
                valid = info.get("valid_actions", [])
                action = rng.choice(valid) if valid else env.action_space.sample()
                obs, reward, terminated, truncated, info = env.step(action)
                total_reward += float(reward)
                lines += int(info.get("lines_cleared", 0))
                steps += 1
            results.append({
                "return": total_reward,
                "score": float(info["score"]),
                "steps": float(steps),
                "lines_cleared": float(lines),
            })
    finally:
        env.close()
    return results


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Roll out a uniform random agent on Block Breeze.")
    p.add_argument("--episodes", type=int, default=10)
    p.add_argument("--seed", type=int, default=None)
    p.add_argument("--log-level", type=str, default="info")
    p.add_argument("--no-rich", action="store_true")
    return p


def main() -> None:
    args = build_parser().parse_args()
    logger = setup_logger(name="block_breeze", use_rich=not args.no_rich, level=args.log_level)
    results = run_random(args.episodes, args.seed)
    for i, r in enumerate(results):
        logger.info(
            "episode %d/%d score=%d steps=%d lines=%d",
            i + 1, len(results), r["score"], r["steps"], r["lines_cleared"],
        )
    if results:
        mean_score = sum(r["score"] for r in results) / len(results)
        logger.info("mean score over %d episodes: %.1f", len(results), mean_score)


if __name__ == "__main__":  # pragma: no cover
    main()
