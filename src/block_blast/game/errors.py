from __future__ import annotations


class BlockBlastError(Exception):
    """Base class for engine errors."""


class OutOfBoundsError(BlockBlastError, IndexError):
    def __init__(self, row: int, col: int, size: int) -> None:
        super().__init__(f"cell ({row}, {col}) is outside a {size}x{size} board")
        self.row = row
        self.col = col
        self.size = size


class CellOccupiedError(BlockBlastError):
    def __init__(self, row: int, col: int) -> None:
        super().__init__(f"cell ({row}, {col}) is already filled")
        self.row = row
        self.col = col


class InvalidShapeError(BlockBlastError, ValueError):
    pass
