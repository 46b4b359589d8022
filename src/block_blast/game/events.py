"""Events emitted by the engine for renderers and other listeners."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple, Union

from .pieces import Piece


@dataclass(frozen=True)
class CellChanged:
    row: int
    col: int
    color: Optional[int]  # None when the cell became empty


@dataclass(frozen=True)
class LinesCleared:
    rows: Tuple[int, ...]
    cols: Tuple[int, ...]
    points: int

    @property
    def line_count(self) -> int:
        return len(self.rows) + len(self.cols)


@dataclass(frozen=True)
class ScoreChanged:
    score: int


@dataclass(frozen=True)
class LevelChanged:
    level: int


@dataclass(frozen=True)
class NewHighScore:
    score: int


@dataclass(frozen=True)
class GameOver:
    final_score: int


@dataclass(frozen=True)
class TrayRefilled:
    pieces: Tuple[Piece, ...]


Event = Union[CellChanged, LinesCleared, ScoreChanged, LevelChanged, NewHighScore, GameOver, TrayRefilled]
Listener = Callable[[Event], None]


class EventEmitter:
    """Synchronous fan-out to listeners, in subscription order."""

    def __init__(self) -> None:
        self._listeners: List[Listener] = []

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def emit(self, event: Event) -> None:
        for listener in list(self._listeners):
            listener(event)
