from __future__ import annotations

from typing import Any, Dict, Optional, Tuple

import numpy as np
import gymnasium as gym
from gymnasium import spaces

from block_blast.game import PALETTE, BlockBlastGame, GameConfig


PIECE_BOX = 5


def _compute_action_mask(game: BlockBlastGame) -> np.ndarray:
    size = game.config.grid_size
    k = game.config.tray_size
    mask = np.zeros((k, size, size), dtype=np.bool_)
    for index, row, col in game.get_valid_actions():
        mask[index, row, col] = True
    return mask


def _encode_pieces(game: BlockBlastGame) -> np.ndarray:
    k = game.config.tray_size
    pieces = np.zeros((k, PIECE_BOX, PIECE_BOX), dtype=np.int8)
    for index, piece in game.tray.unused():
        cells = piece.shape.cells[:PIECE_BOX, :PIECE_BOX]
        pieces[index, : cells.shape[0], : cells.shape[1]] = cells
    return pieces


class BlockBlastEnv(gym.Env):
    metadata = {"render_modes": ["rgb_array"], "render_fps": 30}

    def __init__(self, config: Optional[GameConfig] = None, render_mode: Optional[str] = None,
                 reward_weights: Optional[Dict[str, float]] = None,
                 invalid_action_penalty: float = -0.1,
                 step_penalty: float = 0.0,
                 terminal_penalty: float = 0.0,
                 max_episode_steps: int = 10000) -> None:
        super().__init__()
        self.game = BlockBlastGame(config)
        self.render_mode = render_mode

        # Reward shaping parameters
        self.invalid_action_penalty = float(invalid_action_penalty)
        self.step_penalty = float(step_penalty)
        self.terminal_penalty = float(terminal_penalty)
        self.max_episode_steps = int(max_episode_steps)
        self.reward_weights: Dict[str, float] = {
            "cells": 0.05,   # reward per cell placed
            "lines": 1.0,    # reward per line cleared
            "points": 0.01,  # engine points (combo multiplier included)
        }
        if reward_weights:
            self.reward_weights.update({k: float(v) for k, v in reward_weights.items()})

        size = self.game.config.grid_size
        k = self.game.config.tray_size

        # Observation space: grid colour ids, tray piece masks (zeros for used slots)
        self.observation_space = spaces.Dict(
            {
                "grid": spaces.Box(low=0, high=len(PALETTE), shape=(size, size), dtype=np.int8),
                "pieces": spaces.Box(low=0, high=1, shape=(k, PIECE_BOX, PIECE_BOX), dtype=np.int8),
                "pieces_remaining": spaces.Discrete(k + 1),
            }
        )

        # Action: (tray_index, row, col)
        self.action_space = spaces.MultiDiscrete((k, size, size))

        self._last_obs: Optional[Dict[str, Any]] = None
        self._steps = 0

    def _get_obs(self) -> Dict[str, Any]:
        return {
            "grid": self.game.board.snapshot(),
            "pieces": _encode_pieces(self.game),
            "pieces_remaining": self.game.tray.remaining(),
        }

    def _get_info(self) -> Dict[str, Any]:
        return {
            "action_mask": _compute_action_mask(self.game),
            "valid_actions": self.game.get_valid_actions(),
            "score": self.game.score,
            "level": self.game.level,
            "steps": self._steps,
        }

    def reset(self, *, seed: Optional[int] = None, options: Optional[dict] = None) -> Tuple[Dict[str, Any], Dict[str, Any]]:
        super().reset(seed=seed)
        self.game.restart(seed)
        self._steps = 0
        obs = self._get_obs()
        self._last_obs = obs
        return obs, self._get_info()

    def step(self, action: np.ndarray | Tuple[int, int, int]):
        tray_index, row, col = map(int, action)

        piece = self.game.tray.get(tray_index)
        cells_in_piece = piece.shape.cell_count if piece is not None else 0

        result = self.game.attempt_placement(row, col, tray_index)

        reward_components: Dict[str, float] = {}
        if result.accepted:
            reward_components["cells"] = self.reward_weights["cells"] * float(cells_in_piece)
            reward_components["lines"] = self.reward_weights["lines"] * float(result.line_count)
            reward_components["points"] = self.reward_weights["points"] * float(result.points)
        else:
            reward_components["invalid"] = self.invalid_action_penalty

        reward_components["step"] = self.step_penalty
        terminated = bool(self.game.game_over)
        self._steps += 1
        truncated = self._steps >= self.max_episode_steps and not terminated
        if terminated:
            reward_components["terminal"] = self.terminal_penalty

        reward = float(sum(reward_components.values()))

        obs = self._get_obs()
        info = self._get_info()
        info["reward_components"] = reward_components
        info["outcome"] = result.outcome.value
        info["engine_score_delta"] = result.points
        self._last_obs = obs
        return obs, reward, terminated, truncated, info

    def render(self) -> Optional[np.ndarray]:
        if self.render_mode != "rgb_array":
            return None
        grid = self._last_obs["grid"] if self._last_obs is not None else self.game.board.grid
        cell = 12
        h, w = grid.shape
        img = np.zeros((h * cell, w * cell, 3), dtype=np.uint8)
        for y in range(h):
            for x in range(w):
                value = int(grid[y, x])
                color = _hex_to_rgb(PALETTE[value - 1]) if value else (30, 30, 36)
                img[y * cell : (y + 1) * cell, x * cell : (x + 1) * cell, :] = color
        return img

    def close(self) -> None:
        pass


def _hex_to_rgb(value: str) -> Tuple[int, int, int]:
    value = value.lstrip("#")
    return int(value[0:2], 16), int(value[2:4], 16), int(value[4:6], 16)
