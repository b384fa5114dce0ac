"""
Piece module for the minefield engine.

A piece is what a space visibly shows: a revealed number, a shown mine,
a flag, or one of three colored marks. A blank (untouched) space holds
no piece at all, represented by ``None``.
"""
from enum import Enum
from typing import Optional


# ============================================================================
# Constants
# ============================================================================

# Observation code for a space without a piece
HIDDEN = -1


class Piece(Enum):
    """
    Visible state of a space.

    Each value doubles as the piece's observation code, so an observation
    array can be turned back into pieces with ``Piece(code)``.
    """

    N0 = 0
    N1 = 1
    N2 = 2
    N3 = 3
    N4 = 4
    N5 = 5
    N6 = 6
    N7 = 7
    N8 = 8
    MINE = 9
    MINE_RED = 10
    MINE_GREEN = 11
    FLAG = -2
    FLAG_NOT = -3
    MARK_RED = -4
    MARK_GREEN = -5
    MARK_BLUE = -6

    @classmethod
    def from_number(cls, count: int) -> "Piece":
        """Get the number piece for a neighbor mine count (0-8)."""
        if not 0 <= count <= 8:
            raise ValueError(f"No number piece for {count}")
        return cls(count)

    @property
    def is_number(self) -> bool:
        """Check if piece is a revealed number."""
        return 0 <= self.value <= 8

    @property
    def is_mark(self) -> bool:
        """Check if piece is one of the colored marks."""
        return self in _MARKS

    @property
    def is_mine(self) -> bool:
        """Check if piece shows a mine."""
        return self in _MINES

    @property
    def is_replaceable(self) -> bool:
        """Check if a reveal or flag may overwrite this piece."""
        return self.is_mark

    @property
    def is_enabled(self) -> bool:
        """Check if the space renders raised rather than pressed."""
        return not (self.is_number or self.is_mine)

    @property
    def number(self) -> Optional[int]:
        """Neighbor mine count for number pieces, None otherwise."""
        return self.value if self.is_number else None

    @property
    def symbol(self) -> str:
        """Single character used for text rendering."""
        return _SYMBOLS[self]


_MARKS = frozenset({Piece.MARK_RED, Piece.MARK_GREEN, Piece.MARK_BLUE})
_MINES = frozenset({Piece.MINE, Piece.MINE_RED, Piece.MINE_GREEN})

_SYMBOLS = {
    Piece.N0: " ",
    Piece.MINE: "*",
    Piece.MINE_RED: "X",
    Piece.MINE_GREEN: "@",
    Piece.FLAG: "F",
    Piece.FLAG_NOT: "!",
    Piece.MARK_RED: "r",
    Piece.MARK_GREEN: "g",
    Piece.MARK_BLUE: "b",
}
_SYMBOLS.update({Piece(n): str(n) for n in range(1, 9)})

# Order the MARK action cycles through
MARK_CYCLE = {
    Piece.MARK_RED: Piece.MARK_GREEN,
    Piece.MARK_GREEN: Piece.MARK_BLUE,
    Piece.MARK_BLUE: Piece.MARK_RED,
}


def observation_code(piece: Optional[Piece]) -> int:
    """Convert an optional piece to its observation code."""
    if piece is None:
        return HIDDEN
    return piece.value
