from __future__ import annotations

import pytest

from block_blast.game import BlockBlastGame, GameConfig


@pytest.fixture
def game() -> BlockBlastGame:
    return BlockBlastGame(GameConfig(random_seed=1234))
