"""
Space module for the minefield engine.

A space is a plain (x, y) coordinate. Whether it lies on the board is
decided by the board, not by the space itself.
"""
from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True)
class Space:
    """
    A coordinate on the board.

    Attributes:
        x: Column index, 0 is the left edge.
        y: Row index, 0 is the top edge.
    """

    x: int
    y: int

    def offset(self, dx: int, dy: int) -> "Space":
        """Get the space shifted by (dx, dy)."""
        return Space(self.x + dx, self.y + dy)

    def as_tuple(self) -> Tuple[int, int]:
        """Convert to an (x, y) tuple."""
        return (self.x, self.y)
