from __future__ import annotations

from typing import Tuple

import numpy as np
import gymnasium as gym
from gymnasium import spaces

from .block_blast_env import _compute_action_mask


class FlattenDiscreteActionWrapper(gym.ActionWrapper):
    """Exposes the (tray slot, row, col) placement as a single Discrete index.

    Index ``slot * size * size + row * size + col`` maps back to the anchor
    of the piece's top-left cell in that slot. ``get_action_mask()`` lays the
    engine's legal placements out in the same order.
    """

    def __init__(self, env: gym.Env):
        super().__init__(env)
        assert isinstance(env.action_space, spaces.MultiDiscrete)
        k, rows, cols = map(int, env.action_space.nvec)
        assert rows == cols, "Expected square grid"
        self.k = k
        self.size = cols
        self.n = int(k * self.size * self.size)
        self.action_space = spaces.Discrete(self.n)

    def _unflatten(self, idx: int) -> Tuple[int, int, int]:
        slot, cell = divmod(idx, self.size * self.size)
        row, col = divmod(cell, self.size)
        return int(slot), int(row), int(col)

    def action(self, action: int):  # type: ignore[override]
        return np.array(self._unflatten(int(action)), dtype=np.int64)

    def get_action_mask(self) -> np.ndarray:
        """Flat bool mask, True where the engine would accept the placement."""
        return _compute_action_mask(self.env.unwrapped.game).reshape(-1)


class ResampleInvalidActionWrapper(gym.Wrapper):
    """Swaps a placement the engine would reject for a legal one.

    Sits on top of ``FlattenDiscreteActionWrapper``. The replacement is drawn
    uniformly from the flattened mask with the wrapper's seeded
    ``np_random``. Once no placement fits the action goes through unchanged
    and the engine reports the rejection.
    """

    def __init__(self, env: gym.Env):
        super().__init__(env)
        if not isinstance(env, FlattenDiscreteActionWrapper):
            raise TypeError("ResampleInvalidActionWrapper expects a FlattenDiscreteActionWrapper")

    def step(self, action):  # type: ignore[override]
        mask = self.get_action_mask()
        index = int(action)
        if not (0 <= index < mask.shape[0] and mask[index]):
            legal = np.flatnonzero(mask)
            if legal.size:
                action = int(self.np_random.choice(legal))
        return self.env.step(action)

    def get_action_mask(self) -> np.ndarray:
        return self.env.get_action_mask()
