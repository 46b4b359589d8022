from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Optional, Union


logger = logging.getLogger(__name__)

HIGH_SCORE_KEY = "blockBlastHighScore"
DEFAULT_PATH = Path.home() / ".block_blast" / "highscore.json"


class HighScoreStore:
    """Single high-score integer kept in a small JSON file."""

    def __init__(self, path: Optional[Union[str, Path]] = None, key: str = HIGH_SCORE_KEY) -> None:
        self.path = Path(path) if path is not None else DEFAULT_PATH
        self.key = key

    def load(self) -> int:
        if not self.path.exists():
            return 0
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
            return max(0, int(data.get(self.key, 0)))
        except (ValueError, TypeError, AttributeError) as exc:
            logger.warning("Ignoring unreadable high score file %s: %s", self.path, exc)
            return 0

    def save(self, score: int) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps({self.key: int(score)}), encoding="utf-8")
        logger.debug("Saved high score %d to %s", score, self.path)
