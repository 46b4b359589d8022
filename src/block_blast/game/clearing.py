from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Dict, List, Tuple

from .board import Board, Coordinate


@dataclass
class ScoringRules:
    px_per_line: int = 100
    combo_multipliers: Dict[int, float] = field(default_factory=lambda: {1: 1.0, 2: 1.5, 3: 2.0})
    max_multiplier: float = 3.0

    def multiplier_for(self, line_count: int) -> float:
        if line_count <= 0:
            return 0.0
        return self.combo_multipliers.get(line_count, self.max_multiplier)

    def points_for(self, line_count: int) -> int:
        if line_count <= 0:
            return 0
        raw = line_count * self.px_per_line * self.multiplier_for(line_count)
        # half-up rounding, not Python's round-half-even
        return int(math.floor(raw + 0.5))


@dataclass(frozen=True)
class LineClearResult:
    rows: Tuple[int, ...] = ()
    cols: Tuple[int, ...] = ()
    cells: Tuple[Coordinate, ...] = ()
    multiplier: float = 0.0
    points: int = 0

    @property
    def line_count(self) -> int:
        return len(self.rows) + len(self.cols)

    def __bool__(self) -> bool:
        return self.line_count > 0


def cells_in_lines(size: int, rows: List[int], cols: List[int]) -> List[Coordinate]:
    """Union of the cells of the given rows and columns, each cell once."""
    cells = {(r, c) for r in rows for c in range(size)}
    cells.update((r, c) for c in cols for r in range(size))
    return sorted(cells)


def clear_lines(board: Board, rules: ScoringRules) -> LineClearResult:
    """Clear every full row and column of ``board`` and score the combo.

    Full lines are detected on the board as it stands, before anything is
    cleared, so a row and column sharing a cell are both counted while the
    shared cell is emptied once. Returns an empty result when nothing is full.
    """
    rows = board.full_rows()
    cols = board.full_columns()
    if not rows and not cols:
        return LineClearResult()
    cells = cells_in_lines(board.size, rows, cols)
    board.clear_cells(cells)
    line_count = len(rows) + len(cols)
    return LineClearResult(
        rows=tuple(rows),
        cols=tuple(cols),
        cells=tuple(cells),
        multiplier=rules.multiplier_for(line_count),
        points=rules.points_for(line_count),
    )
