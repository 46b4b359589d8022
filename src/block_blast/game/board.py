from __future__ import annotations

from typing import Iterable, List, Optional, Tuple

import numpy as np

from .errors import CellOccupiedError, OutOfBoundsError


Coordinate = Tuple[int, int]

EMPTY = 0


class Board:
    """Square grid of cells for block placement.

    The grid uses 0 for empty cells and positive integers for filled cells.
    Integer values are palette colour ids (see ``pieces.PALETTE``).
    Coordinates are always ``(row, col)``.
    """

    def __init__(self, size: int = 8) -> None:
        self.size = int(size)
        self.grid = np.zeros((self.size, self.size), dtype=np.int8)

    def reset(self) -> None:
        self.grid.fill(EMPTY)

    def is_inside(self, row: int, col: int) -> bool:
        return 0 <= row < self.size and 0 <= col < self.size

    def _check(self, row: int, col: int) -> None:
        if not self.is_inside(row, col):
            raise OutOfBoundsError(row, col, self.size)

    def is_occupied(self, row: int, col: int) -> bool:
        self._check(row, col)
        return bool(self.grid[row, col] != EMPTY)

    def color_at(self, row: int, col: int) -> Optional[int]:
        """Colour id of a cell, or None when empty."""
        self._check(row, col)
        value = int(self.grid[row, col])
        return value if value != EMPTY else None

    def fill(self, row: int, col: int, color: int) -> None:
        if color <= EMPTY:
            raise ValueError(f"colour id must be positive, got {color}")
        if self.is_occupied(row, col):
            raise CellOccupiedError(row, col)
        self.grid[row, col] = color

    def clear_cells(self, cells: Iterable[Coordinate]) -> List[Coordinate]:
        """Empty every listed cell and return the ones that were filled.

        Cells that are already empty are left alone, so clearing the same set
        twice has the same effect as clearing it once.
        """
        changed: List[Coordinate] = []
        for row, col in cells:
            if self.is_occupied(row, col):
                self.grid[row, col] = EMPTY
                changed.append((row, col))
        return changed

    def full_rows(self) -> List[int]:
        return [int(r) for r in np.where(np.all(self.grid != EMPTY, axis=1))[0]]

    def full_columns(self) -> List[int]:
        return [int(c) for c in np.where(np.all(self.grid != EMPTY, axis=0))[0]]

    def filled_count(self) -> int:
        return int(np.count_nonzero(self.grid))

    def filled_ratio(self) -> float:
        return self.filled_count() / float(self.size * self.size)

    def is_empty(self) -> bool:
        return self.filled_count() == 0

    def snapshot(self) -> np.ndarray:
        return self.grid.copy()

    def copy(self) -> "Board":
        new_board = Board(self.size)
        new_board.grid = self.grid.copy()
        return new_board

    def __repr__(self) -> str:
        rows = ["".join("█" if cell else "·" for cell in row) for row in self.grid]
        return "Board(\n  " + "\n  ".join(rows) + "\n)"
