from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, List, Optional, Tuple

import numpy as np

from .board import Board
from .clearing import ScoringRules, clear_lines
from .events import (
    CellChanged,
    Event,
    EventEmitter,
    GameOver,
    LevelChanged,
    LinesCleared,
    Listener,
    NewHighScore,
    ScoreChanged,
    TrayRefilled,
)
from .pieces import Piece, PieceGenerator
from .progression import ProgressionTracker
from .tray import Tray
from .validation import can_place_anywhere, is_valid_placement, valid_anchors


logger = logging.getLogger(__name__)


@dataclass
class GameConfig:
    """Configuration for a block blast game"""
    grid_size: int = 8
    tray_size: int = 3
    level_threshold: int = 500
    random_seed: Optional[int] = None
    scoring: ScoringRules = field(default_factory=ScoringRules)

    def __post_init__(self) -> None:
        if self.grid_size < 1:
            raise ValueError(f"grid_size must be positive, got {self.grid_size}")
        if self.tray_size < 1:
            raise ValueError(f"tray_size must be positive, got {self.tray_size}")
        if self.level_threshold < 1:
            raise ValueError(f"level_threshold must be positive, got {self.level_threshold}")


class TurnState(Enum):
    AWAITING_INPUT = "awaiting_input"
    RESOLVING = "resolving"
    REFILLING = "refilling"
    GAME_OVER = "game_over"


class PlacementOutcome(Enum):
    ACCEPTED = "accepted"
    INVALID_POSITION = "invalid_position"
    INVALID_TRAY_SLOT = "invalid_tray_slot"
    GAME_OVER = "game_over"
    BUSY = "busy"


@dataclass(frozen=True)
class PlacementResult:
    outcome: PlacementOutcome
    tray_index: int
    anchor_row: int
    anchor_col: int
    rows: Tuple[int, ...] = ()
    cols: Tuple[int, ...] = ()
    points: int = 0
    game_over: bool = False
    events: Tuple[Event, ...] = ()

    @property
    def accepted(self) -> bool:
        return self.outcome is PlacementOutcome.ACCEPTED

    @property
    def line_count(self) -> int:
        return len(self.rows) + len(self.cols)


@dataclass(frozen=True)
class RotationResult:
    accepted: bool
    clockwise: bool
    pieces: Tuple[Optional[Piece], ...] = ()
    game_over: bool = False
    events: Tuple[Event, ...] = ()


class BlockBlastGame:
    """Turn controller: owns the board, the tray and the progression state.

    Every public operation resolves completely, including the game-over
    check, before it returns. Nothing here knows about rendering; callers
    either read the returned results or subscribe to events. Listeners run
    after the operation has resolved, so they always see a settled board.
    """

    def __init__(self, config: Optional[GameConfig] = None, high_score: int = 0,
                 on_new_high_score: Optional[Callable[[int], None]] = None,
                 generator: Optional[PieceGenerator] = None) -> None:
        self.config = config or GameConfig()
        self.board = Board(self.config.grid_size)
        self.tray = Tray(self.config.tray_size)
        self.generator = generator or PieceGenerator(np.random.default_rng(self.config.random_seed))
        self.progression = ProgressionTracker(
            level_threshold=self.config.level_threshold,
            high_score=high_score,
        )
        self.on_new_high_score = on_new_high_score
        self.state = TurnState.AWAITING_INPUT
        self._emitter = EventEmitter()
        self._pending: List[Event] = []

        self.total_pieces_placed = 0
        self.total_lines_cleared = 0
        self.turns = 0

        self.restart()

    # ------------------------------------------------------------------ events

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener; returns a callable that unsubscribes it."""
        return self._emitter.subscribe(listener)

    def _emit(self, event: Event) -> None:
        self._pending.append(event)

    def _drain(self) -> Tuple[Event, ...]:
        """Hand the queued events to listeners once the operation has resolved."""
        events = tuple(self._pending)
        self._pending = []
        for event in events:
            self._emitter.emit(event)
        return events

    # ------------------------------------------------------------------ state

    @property
    def score(self) -> int:
        return self.progression.score

    @property
    def level(self) -> int:
        return self.progression.level

    @property
    def high_score(self) -> int:
        return self.progression.high_score

    @property
    def game_over(self) -> bool:
        return self.state is TurnState.GAME_OVER

    @property
    def busy(self) -> bool:
        return self.state in (TurnState.RESOLVING, TurnState.REFILLING)

    @property
    def pieces(self) -> List[Optional[Piece]]:
        return list(self.tray.slots)

    def get_valid_actions(self) -> List[Tuple[int, int, int]]:
        """List of (tray_index, row, col) placements that would be accepted"""
        if self.game_over:
            return []
        return [
            (index, row, col)
            for index, piece in self.tray.unused()
            for row, col in valid_anchors(self.board, piece)
        ]

    def has_valid_move(self) -> bool:
        return any(can_place_anywhere(self.board, piece) for _, piece in self.tray.unused())

    def get_state(self) -> dict:
        return {
            "grid": self.board.snapshot(),
            "pieces": [piece.shape.to_rows() if piece else None for piece in self.tray],
            "colors": [piece.color if piece else None for piece in self.tray],
            "pieces_remaining": self.tray.remaining(),
            "score": self.score,
            "level": self.level,
            "high_score": self.high_score,
            "state": self.state.value,
            "game_over": self.game_over,
        }

    def get_game_stats(self) -> dict:
        return {
            "final_score": self.score,
            "level": self.level,
            "pieces_placed": self.total_pieces_placed,
            "lines_cleared": self.total_lines_cleared,
            "turns": self.turns,
            "final_fill_ratio": self.board.filled_ratio(),
            "avg_score_per_piece": self.score / max(1, self.total_pieces_placed),
        }

    # ------------------------------------------------------------------ turn flow

    def _refill(self) -> None:
        pieces = self.generator.generate_set(self.level, self.tray.size)
        self.tray.refill(pieces)
        logger.debug("Tray refilled at level %d", self.level)
        self._emit(TrayRefilled(tuple(pieces)))

    def _check_game_over(self) -> bool:
        """Enter GAME_OVER when no unused piece fits anywhere."""
        if self.game_over:
            return True
        if self.tray.is_empty() or self.has_valid_move():
            return False
        self.state = TurnState.GAME_OVER
        logger.info("Game over: score %d, level %d", self.score, self.level)
        self._emit(GameOver(self.score))
        return True

    def attempt_placement(self, anchor_row: int, anchor_col: int, tray_index: int) -> PlacementResult:
        """Place the piece in ``tray_index`` with its (0, 0) cell at the anchor.

        Rejections (game already over, a turn still resolving, empty or unknown
        slot, piece does not fit) leave the game untouched and come back as a
        result outcome. Events reach listeners only after the turn has fully
        resolved.
        """
        anchor_row, anchor_col, tray_index = int(anchor_row), int(anchor_col), int(tray_index)
        if self.busy:
            logger.warning("Placement of slot %d requested while %s", tray_index, self.state.value)
            return PlacementResult(PlacementOutcome.BUSY, tray_index, anchor_row, anchor_col)
        self._pending = []

        def rejected(outcome: PlacementOutcome) -> PlacementResult:
            logger.debug("Placement of slot %d at (%d, %d) rejected: %s",
                         tray_index, anchor_row, anchor_col, outcome.value)
            return PlacementResult(outcome, tray_index, anchor_row, anchor_col, game_over=self.game_over)

        if self.game_over:
            return rejected(PlacementOutcome.GAME_OVER)
        piece = self.tray.get(tray_index)
        if piece is None:
            return rejected(PlacementOutcome.INVALID_TRAY_SLOT)
        if not is_valid_placement(self.board, anchor_col, anchor_row, piece):
            return rejected(PlacementOutcome.INVALID_POSITION)

        self.state = TurnState.RESOLVING
        for row, col in piece.cells_at(anchor_row, anchor_col):
            self.board.fill(row, col, piece.color)
            self._emit(CellChanged(row, col, piece.color))

        cleared = clear_lines(self.board, self.config.scoring)
        if cleared:
            for row, col in cleared.cells:
                self._emit(CellChanged(row, col, None))
            self._emit(LinesCleared(cleared.rows, cleared.cols, cleared.points))
            update = self.progression.update_score(cleared.points)
            self._emit(ScoreChanged(update.score))
            if update.levels_gained:
                self._emit(LevelChanged(update.level))
            if update.new_high_score:
                self._emit(NewHighScore(update.score))
                if self.on_new_high_score is not None:
                    self.on_new_high_score(update.score)

        self.tray.take(tray_index)
        self.total_pieces_placed += 1
        self.total_lines_cleared += cleared.line_count
        self.turns += 1
        logger.debug("Placed slot %d at (%d, %d): %d lines, %d points",
                     tray_index, anchor_row, anchor_col, cleared.line_count, cleared.points)

        if self.tray.is_empty():
            self.state = TurnState.REFILLING
            self._refill()
        if not self.game_over:
            self.state = TurnState.AWAITING_INPUT
        self._check_game_over()

        return PlacementResult(
            PlacementOutcome.ACCEPTED,
            tray_index,
            anchor_row,
            anchor_col,
            rows=cleared.rows,
            cols=cleared.cols,
            points=cleared.points,
            game_over=self.game_over,
            events=self._drain(),
        )

    def rotate_tray(self, clockwise: bool = True) -> RotationResult:
        """Rotate every unused tray piece a quarter turn, then re-check game over."""
        if self.busy or self.game_over:
            return RotationResult(False, clockwise, tuple(self.tray.slots), game_over=self.game_over)
        self._pending = []
        for index, piece in self.tray.unused():
            self.tray.replace(index, piece.rotated(clockwise))
        self._check_game_over()
        return RotationResult(True, clockwise, tuple(self.tray.slots), self.game_over, self._drain())

    def restart(self, seed: Optional[int] = None) -> Tuple[Event, ...]:
        """Empty the board, reset score and level, and deal a fresh tray.

        The high score survives restarts. ``seed`` reseeds piece generation.
        Nothing happens while a turn is still resolving.
        """
        if self.busy:
            logger.warning("Restart requested while %s", self.state.value)
            return ()
        self._pending = []
        if seed is not None:
            self.generator.rng = np.random.default_rng(seed)
        for row, col in self.board.clear_cells(zip(*np.nonzero(self.board.grid))):
            self._emit(CellChanged(int(row), int(col), None))
        self.progression.reset()
        self.total_pieces_placed = 0
        self.total_lines_cleared = 0
        self.turns = 0
        self.state = TurnState.AWAITING_INPUT
        self._emit(ScoreChanged(self.score))
        self._emit(LevelChanged(self.level))
        self.tray.clear()
        self._refill()
        self._check_game_over()
        return self._drain()
