from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np

from .errors import InvalidShapeError


PALETTE: Tuple[str, ...] = (
    "#FF5733",
    "#33FF57",
    "#3357FF",
    "#F333FF",
    "#33FFF5",
    "#FFD133",
)


def color_hex(color: int) -> str:
    """Hex string for a 1-based palette colour id."""
    if not 1 <= color <= len(PALETTE):
        raise ValueError(f"unknown colour id {color}")
    return PALETTE[color - 1]


class Shape:
    """Rectangular boolean occupancy matrix with explicit dimensions.

    Accepts nested sequences or arrays; anything truthy counts as occupied.
    Ragged rows, empty matrices and matrices with no occupied cell are
    rejected. The stored array is read-only, so shapes can be shared.
    """

    __slots__ = ("_cells",)

    def __init__(self, rows: Sequence[Sequence[int]] | np.ndarray) -> None:
        if isinstance(rows, np.ndarray):
            cells = rows
        else:
            rows = [list(row) for row in rows]
            if not rows or any(len(row) != len(rows[0]) for row in rows):
                raise InvalidShapeError(f"shape rows must be non-empty and equal length: {rows!r}")
            cells = np.array(rows)
        if cells.ndim != 2 or cells.size == 0:
            raise InvalidShapeError(f"shape must be a non-empty 2D matrix, got {cells.shape}")
        cells = cells.astype(bool)
        if not cells.any():
            raise InvalidShapeError("shape must have at least one occupied cell")
        cells.setflags(write=False)
        self._cells = cells

    @property
    def cells(self) -> np.ndarray:
        return self._cells

    @property
    def height(self) -> int:
        return int(self._cells.shape[0])

    @property
    def width(self) -> int:
        return int(self._cells.shape[1])

    @property
    def cell_count(self) -> int:
        return int(np.count_nonzero(self._cells))

    def offsets(self) -> List[Tuple[int, int]]:
        """Occupied ``(r, c)`` offsets in row-major order."""
        return [(int(r), int(c)) for r, c in zip(*np.nonzero(self._cells))]

    def rotated(self, clockwise: bool = True) -> "Shape":
        # axes=(1, 0) turns clockwise: (r, c) -> (c, R-1-r)
        # default axes turn counter-clockwise: (r, c) -> (C-1-c, r)
        if clockwise:
            return Shape(np.rot90(self._cells, 1, axes=(1, 0)))
        return Shape(np.rot90(self._cells, 1))

    def to_rows(self) -> List[List[int]]:
        return self._cells.astype(int).tolist()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Shape):
            return NotImplemented
        return np.array_equal(self._cells, other._cells)

    def __hash__(self) -> int:
        return hash((self._cells.shape, self._cells.tobytes()))

    def __repr__(self) -> str:
        return f"Shape({self.to_rows()!r})"


class ShapePool(IntEnum):
    SMALL = 0
    TETROMINO = 1
    COMPLEX = 2


# Order matters: generation indexes into these lists.
SHAPE_POOLS: Dict[ShapePool, List[Shape]] = {
    ShapePool.SMALL: [
        Shape([[1]]),
        Shape([[1, 1]]),
        Shape([[1], [1]]),
    ],
    ShapePool.TETROMINO: [
        Shape([[1, 1, 1, 1]]),  # I
        Shape([[1], [1], [1], [1]]),  # I vertical
        Shape([[1, 1], [1, 1]]),  # O
        Shape([[0, 1, 0], [1, 1, 1]]),  # T
        Shape([[1, 0], [1, 1], [1, 0]]),  # T vertical
        Shape([[0, 1, 1], [1, 1, 0]]),  # S
        Shape([[1, 1, 0], [0, 1, 1]]),  # Z
        Shape([[1, 0, 0], [1, 1, 1]]),  # J
        Shape([[0, 0, 1], [1, 1, 1]]),  # L
        Shape([[1, 1], [1, 0], [1, 0]]),  # L vertical
        Shape([[1, 1], [0, 1], [0, 1]]),  # J vertical
    ],
    ShapePool.COMPLEX: [
        Shape([[1, 1, 1], [1, 1, 1]]),  # 3x2 block
        Shape([[1, 1, 1], [1, 0, 1]]),  # U
        Shape([[1, 0, 0], [1, 0, 0], [1, 1, 1]]),  # large L
        Shape([[0, 0, 1], [0, 0, 1], [1, 1, 1]]),  # large J
    ],
}


@dataclass(frozen=True)
class Piece:
    shape: Shape
    color: int = 1

    @classmethod
    def from_rows(cls, rows: Sequence[Sequence[int]], color: int = 1) -> "Piece":
        return cls(Shape(rows), color)

    @property
    def height(self) -> int:
        return self.shape.height

    @property
    def width(self) -> int:
        return self.shape.width

    @property
    def hex_color(self) -> str:
        return color_hex(self.color)

    def rotated(self, clockwise: bool = True) -> "Piece":
        return Piece(self.shape.rotated(clockwise), self.color)

    def cells_at(self, anchor_row: int, anchor_col: int) -> List[Tuple[int, int]]:
        """Absolute ``(row, col)`` cells covered when anchored at the given cell."""
        return [(anchor_row + r, anchor_col + c) for r, c in self.shape.offsets()]


def rotate(piece: Piece, clockwise: bool = True) -> Piece:
    """Rotate a piece a quarter turn; R x C becomes C x R, colour kept."""
    return piece.rotated(clockwise)


def choose_pool(level: int, r: float) -> ShapePool:
    """Map one uniform draw in [0, 1) to a shape pool for ``level``."""
    if level < 3:
        return ShapePool.SMALL if r < 0.4 else ShapePool.TETROMINO
    if r < 0.2:
        return ShapePool.SMALL
    if r < 0.8:
        return ShapePool.TETROMINO
    return ShapePool.COMPLEX


class PieceGenerator:
    """Draws random pieces, harder pools unlocking at level 3."""

    def __init__(self, rng: Optional[np.random.Generator] = None,
                 pools: Optional[Dict[ShapePool, List[Shape]]] = None,
                 palette_size: int = len(PALETTE)) -> None:
        self.rng = rng if rng is not None else np.random.default_rng()
        self.pools = pools or SHAPE_POOLS
        self.palette_size = int(palette_size)

    def generate(self, level: int) -> Piece:
        pool = self.pools[choose_pool(level, float(self.rng.random()))]
        shape = pool[int(self.rng.integers(len(pool)))]
        color = int(self.rng.integers(1, self.palette_size + 1))
        return Piece(shape, color)

    def generate_set(self, level: int, count: int) -> List[Piece]:
        return [self.generate(level) for _ in range(count)]
