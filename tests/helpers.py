from __future__ import annotations

from typing import Iterable, Tuple

from block_blast.game import Board, Piece


H2 = Piece.from_rows([[1, 1]], color=1)
V2 = Piece.from_rows([[1], [1]], color=2)
I4 = Piece.from_rows([[1, 1, 1, 1]], color=3)
O4 = Piece.from_rows([[1, 1], [1, 1]], color=4)
DOT = Piece.from_rows([[1]], color=5)


def fill(board: Board, cells: Iterable[Tuple[int, int]], color: int = 1) -> None:
    for row, col in cells:
        board.fill(row, col, color)


def fill_all_except(board: Board, empty: Iterable[Tuple[int, int]], color: int = 1) -> None:
    skip = set(empty)
    fill(board, [(r, c) for r in range(board.size) for c in range(board.size) if (r, c) not in skip], color)


class ScriptedRng:
    """Stands in for numpy's Generator with fixed draws.

    ``random()`` always returns ``r``; ``integers`` returns its lower bound,
    or 0 when called with a single bound.
    """

    def __init__(self, r: float) -> None:
        self.r = r

    def random(self) -> float:
        return self.r

    def integers(self, low: int, high: int | None = None) -> int:
        return 0 if high is None else low
