from __future__ import annotations

from typing import Iterator, List, Optional, Sequence, Tuple

from .pieces import Piece


class Tray:
    """Fixed row of piece slots; ``None`` marks a slot that has been used."""

    def __init__(self, size: int = 3) -> None:
        self.size = int(size)
        self.slots: List[Optional[Piece]] = [None] * self.size

    def refill(self, pieces: Sequence[Piece]) -> None:
        if len(pieces) != self.size:
            raise ValueError(f"expected {self.size} pieces, got {len(pieces)}")
        self.slots = list(pieces)

    def clear(self) -> None:
        self.slots = [None] * self.size

    def is_available(self, index: int) -> bool:
        return 0 <= index < self.size and self.slots[index] is not None

    def get(self, index: int) -> Optional[Piece]:
        if not 0 <= index < self.size:
            return None
        return self.slots[index]

    def take(self, index: int) -> Piece:
        piece = self.slots[index]
        if piece is None:
            raise ValueError(f"tray slot {index} is already used")
        self.slots[index] = None
        return piece

    def replace(self, index: int, piece: Piece) -> None:
        self.slots[index] = piece

    def unused(self) -> List[Tuple[int, Piece]]:
        return [(i, p) for i, p in enumerate(self.slots) if p is not None]

    def remaining(self) -> int:
        return sum(1 for p in self.slots if p is not None)

    def is_empty(self) -> bool:
        return self.remaining() == 0

    def __iter__(self) -> Iterator[Optional[Piece]]:
        return iter(self.slots)

    def __len__(self) -> int:
        return self.size
