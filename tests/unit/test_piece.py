"""
Unit tests for Piece enum.

Tests number lookup, the static per-piece predicates, and observation
codes.
"""
import pytest
from minefield import Piece, HIDDEN
from minefield.piece import MARK_CYCLE, observation_code


NUMBERS = [Piece.from_number(n) for n in range(9)]
MINES = [Piece.MINE, Piece.MINE_RED, Piece.MINE_GREEN]
FLAGS = [Piece.FLAG, Piece.FLAG_NOT]
MARKS = [Piece.MARK_RED, Piece.MARK_GREEN, Piece.MARK_BLUE]


# ============================================================================
# Number Tests
# ============================================================================

class TestNumbers:
    """Test number pieces."""

    def test_from_number(self) -> None:
        """Counts 0-8 map to N0-N8."""
        assert Piece.from_number(0) is Piece.N0
        assert Piece.from_number(8) is Piece.N8

    def test_from_number_out_of_range(self) -> None:
        """No piece exists for counts outside 0-8."""
        with pytest.raises(ValueError):
            Piece.from_number(9)
        with pytest.raises(ValueError):
            Piece.from_number(-1)

    def test_number_value(self) -> None:
        """Numbers expose their count; other pieces do not."""
        assert Piece.N5.number == 5
        assert Piece.FLAG.number is None
        assert Piece.MINE.number is None


# ============================================================================
# Predicate Tests
# ============================================================================

class TestPredicates:
    """Test the static predicates of each piece kind."""

    def test_numbers(self) -> None:
        """Numbers are pressed and cannot be replaced."""
        for piece in NUMBERS:
            assert piece.is_number is True
            assert piece.is_mark is False
            assert piece.is_replaceable is False
            assert piece.is_enabled is False

    def test_mines(self) -> None:
        """Shown mines are pressed and cannot be replaced."""
        for piece in MINES:
            assert piece.is_mine is True
            assert piece.is_number is False
            assert piece.is_replaceable is False
            assert piece.is_enabled is False

    def test_flags(self) -> None:
        """Flags stay raised but protect their space."""
        for piece in FLAGS:
            assert piece.is_number is False
            assert piece.is_mark is False
            assert piece.is_replaceable is False
            assert piece.is_enabled is True

    def test_marks(self) -> None:
        """Marks are raised and replaceable."""
        for piece in MARKS:
            assert piece.is_mark is True
            assert piece.is_replaceable is True
            assert piece.is_enabled is True

    def test_every_piece_has_distinct_symbol(self) -> None:
        """Text rendering can tell every piece apart."""
        symbols = [piece.symbol for piece in Piece]
        assert len(set(symbols)) == len(symbols)
        assert "." not in symbols

    def test_mark_cycle(self) -> None:
        """Mark cycle visits all three colors."""
        piece = Piece.MARK_RED
        seen = []
        for _ in range(3):
            piece = MARK_CYCLE[piece]
            seen.append(piece)
        assert seen == [Piece.MARK_GREEN, Piece.MARK_BLUE, Piece.MARK_RED]


# ============================================================================
# Observation Code Tests
# ============================================================================

class TestObservationCodes:
    """Test conversion to observation codes."""

    def test_blank_code(self) -> None:
        """A blank space has the hidden code."""
        assert observation_code(None) == HIDDEN == -1

    def test_codes_identify_pieces(self) -> None:
        """Codes are unique and convert back to pieces."""
        codes = [observation_code(piece) for piece in Piece]
        assert len(set(codes)) == len(codes)
        assert HIDDEN not in codes
        assert Piece(observation_code(Piece.MINE_RED)) is Piece.MINE_RED
