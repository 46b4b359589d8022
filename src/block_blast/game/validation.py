from __future__ import annotations

from typing import List, Optional, Tuple

from .board import Board
from .pieces import Piece


def is_valid_placement(board: Board, anchor_col: int, anchor_row: int, piece: Optional[Piece]) -> bool:
    """Check if ``piece`` fits with its (0, 0) cell at (anchor_row, anchor_col).

    Every occupied cell must land inside the board on an empty cell. Any
    integer anchor is accepted; anchors that push the piece off the board
    simply return False.
    """
    if piece is None:
        return False
    for r, c in piece.shape.offsets():
        row = int(anchor_row) + r
        col = int(anchor_col) + c
        if not board.is_inside(row, col):
            return False
        if board.is_occupied(row, col):
            return False
    return True


def valid_anchors(board: Board, piece: Optional[Piece]) -> List[Tuple[int, int]]:
    """All valid (row, col) anchors for a piece, row-major."""
    if piece is None:
        return []
    return [
        (row, col)
        for row in range(board.size)
        for col in range(board.size)
        if is_valid_placement(board, col, row, piece)
    ]


def can_place_anywhere(board: Board, piece: Optional[Piece]) -> bool:
    if piece is None:
        return False
    for row in range(board.size):
        for col in range(board.size):
            if is_valid_placement(board, col, row, piece):
                return True
    return False
