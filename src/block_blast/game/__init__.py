"""Rules engine for an 8x8 block blast puzzle.

Exports the core game engine and supporting classes:
- Board: Cell grid with fill/clear and full-line queries
- Piece, Shape, PieceGenerator: Polyomino pieces, shape pools and generation
- is_valid_placement: Placement validator
- clear_lines, ScoringRules: Line clearing and combo scoring
- ProgressionTracker: Score, level and high score
- BlockBlastGame: Turn controller and game-over detection
"""

from .board import Board
from .clearing import LineClearResult, ScoringRules, clear_lines
from .core import BlockBlastGame, GameConfig, PlacementOutcome, PlacementResult, RotationResult, TurnState
from .errors import BlockBlastError, CellOccupiedError, InvalidShapeError, OutOfBoundsError
from .pieces import PALETTE, SHAPE_POOLS, Piece, PieceGenerator, Shape, ShapePool, choose_pool, rotate
from .progression import ProgressionTracker, ProgressionUpdate
from .tray import Tray
from .validation import can_place_anywhere, is_valid_placement, valid_anchors

__all__ = [
    "Board",
    "LineClearResult",
    "ScoringRules",
    "clear_lines",
    "BlockBlastGame",
    "GameConfig",
    "PlacementOutcome",
    "PlacementResult",
    "RotationResult",
    "TurnState",
    "BlockBlastError",
    "CellOccupiedError",
    "InvalidShapeError",
    "OutOfBoundsError",
    "PALETTE",
    "SHAPE_POOLS",
    "Piece",
    "PieceGenerator",
    "Shape",
    "ShapePool",
    "choose_pool",
    "rotate",
    "ProgressionTracker",
    "ProgressionUpdate",
    "Tray",
    "can_place_anywhere",
    "is_valid_placement",
    "valid_anchors",
]
