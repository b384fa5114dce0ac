"""
Pytest configuration and shared fixtures.
"""
import pytest
import sys
from pathlib import Path
from typing import Callable, Iterable

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from minefield import Board, BoardConfig, ClickAction, Space


# ============================================================================
# Board Fixtures
# ============================================================================

@pytest.fixture
def default_board() -> Board:
    """Create a default 9x9 board with 10 mines."""
    return Board()


@pytest.fixture
def seeded_board() -> Board:
    """Create a 5x5 board with 1 mine and a fixed seed."""
    return Board(5, 5, 1, 1, seed=42)


@pytest.fixture
def empty_board() -> Board:
    """Create a board with no mines for cascade testing."""
    return Board(5, 5, 0)


@pytest.fixture
def board_factory() -> Callable[..., Board]:
    """
    Build boards with a hand-placed mine layout.

    The returned board behaves as if the first click already happened.
    """
    def make(
        width: int,
        height: int,
        mines: Iterable[Space],
        cheats: int = 1,
    ) -> Board:
        mines = list(mines)
        board = Board(width, height, len(mines), cheats)
        board.set_mines(mines)
        return board

    return make


@pytest.fixture
def two_mine_board(board_factory) -> Board:
    """
    5x5 board with mines at (0, 0) and (2, 0), opened from (4, 4).

    After the opening click only (1, 0) is left to reveal:

        . . . 1 0
        1 2 1 1 0
        0 0 0 0 0
        0 0 0 0 0
        0 0 0 0 0
    """
    board = board_factory(5, 5, [Space(0, 0), Space(2, 0)])
    board.handle_click(Space(4, 4), ClickAction.DEFAULT)
    board.drain_updates()
    return board


# ============================================================================
# Configuration Fixtures
# ============================================================================

@pytest.fixture
def valid_config() -> BoardConfig:
    """Create a valid board configuration."""
    return BoardConfig(9, 9, 10)


@pytest.fixture
def small_config() -> BoardConfig:
    """5x5 configuration with 2 mines."""
    return BoardConfig(5, 5, 2)
