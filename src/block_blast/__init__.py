"""Block Blast: rules engine, gymnasium environment and pygame frontend."""

from .game import BlockBlastGame, GameConfig

__version__ = "0.1.0"

__all__ = ["BlockBlastGame", "GameConfig", "__version__"]
