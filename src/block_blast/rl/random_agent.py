from __future__ import annotations

import argparse
import logging
from typing import List, Optional

import gymnasium as gym

import block_blast.env  # noqa: F401  ensure registration
from block_blast.env.wrappers import FlattenDiscreteActionWrapper, ResampleInvalidActionWrapper


logger = logging.getLogger(__name__)


def run_random(episodes: int = 5, seed: Optional[int] = None, max_steps: int = 10000) -> List[dict]:
    """Play random valid moves until each episode ends; return per-episode stats."""
    env = ResampleInvalidActionWrapper(FlattenDiscreteActionWrapper(gym.make("BlockBlast-8x8-v0")))
    env.action_space.seed(seed)
    results: List[dict] = []
    try:
        for episode in range(episodes):
            episode_seed = None if seed is None else seed + episode
            obs, info = env.reset(seed=episode_seed)
            total_reward = 0.0
            for _ in range(max_steps):
                obs, reward, terminated, truncated, info = env.step(env.action_space.sample())
                total_reward += float(reward)
                if terminated or truncated:
                    break
            stats = env.unwrapped.game.get_game_stats()
            stats["total_reward"] = total_reward
            logger.info("Episode %d: score %d, level %d, %d pieces",
                        episode, stats["final_score"], stats["level"], stats["pieces_placed"])
            results.append(stats)
    finally:
        env.close()
    return results


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Run random-agent Block Blast episodes")
    p.add_argument("--episodes", type=int, default=5)
    p.add_argument("--seed", type=int, default=None)
    p.add_argument("--max-steps", type=int, default=10000)
    p.add_argument("--log-level", default="INFO")
    return p


def main(argv: Optional[List[str]] = None) -> None:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=args.log_level.upper(), format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    results = run_random(args.episodes, args.seed, args.max_steps)
    scores = [r["final_score"] for r in results]
    print(f"Random agent over {len(scores)} episodes: mean score {sum(scores) / max(1, len(scores)):.1f}, best {max(scores, default=0)}")


if __name__ == "__main__":  # pragma: no cover
    main()
