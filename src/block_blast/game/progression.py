from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Optional


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProgressionUpdate:
    score: int
    level: int
    levels_gained: int = 0
    new_high_score: bool = False


class ProgressionTracker:
    """Score, level and high-score bookkeeping.

    The level goes up by one each time the score reaches ``level * threshold``.
    A single large award can cross several thresholds; the check loops until
    it no longer fires. ``on_new_high_score`` is called with the new score,
    once the level has settled, whenever it beats the best known score.
    """

    def __init__(self, level_threshold: int = 500, high_score: int = 0,
                 on_new_high_score: Optional[Callable[[int], None]] = None) -> None:
        if level_threshold <= 0:
            raise ValueError("level_threshold must be positive")
        self.level_threshold = int(level_threshold)
        self.high_score = max(0, int(high_score))
        self.on_new_high_score = on_new_high_score
        self.score = 0
        self.level = 1

    def reset(self) -> None:
        self.score = 0
        self.level = 1

    def next_level_score(self) -> int:
        return self.level * self.level_threshold

    def update_score(self, delta: int) -> ProgressionUpdate:
        if delta < 0:
            raise ValueError(f"score delta must be non-negative, got {delta}")
        self.score += int(delta)

        gained = 0
        while self.score >= self.next_level_score():
            self.level += 1
            gained += 1
        if gained:
            logger.info("Level up: %d (score %d)", self.level, self.score)

        new_high = self.score > self.high_score
        if new_high:
            self.high_score = self.score
            if self.on_new_high_score is not None:
                self.on_new_high_score(self.score)
        return ProgressionUpdate(self.score, self.level, gained, new_high)
