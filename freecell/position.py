from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class PositionKind(Enum):
    CASCADE = "cascade"
    FOUNDATIONS = "foundations"
    FREECELLS = "freecells"


@dataclass(frozen=True, slots=True)
class Position:
    """Where a card sits: one cascade by index, the foundations or the free cells."""

    kind: PositionKind
    index: int = -1

    @staticmethod
    def cascade(index: int) -> Position:
        return Position(PositionKind.CASCADE, index)

    @property
    def is_cascade(self) -> bool:
        return self.kind is PositionKind.CASCADE

    def __str__(self):
        if self.kind is PositionKind.CASCADE:
            return f"Cascade {self.index}"
        if self.kind is PositionKind.FOUNDATIONS:
            return "the Foundations"
        return "the Freecells"


FOUNDATIONS = Position(PositionKind.FOUNDATIONS)
FREECELLS = Position(PositionKind.FREECELLS)
