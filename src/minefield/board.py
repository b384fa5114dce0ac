"""
Board module for the minefield engine.

Implements the board state machine: lazy mine generation with a safe
first click, flood-fill reveal, chording, flags and marks, the limited
cheat click, and win/loss detection. All gameplay goes through
``Board.handle_click``; everything else is a read accessor.
"""
import logging
import random
from dataclasses import dataclass
from enum import Enum, auto
from typing import Any, Dict, Iterable, Iterator, List, Optional, Set

import numpy as np

from .generator import generate_mines, random_seed
from .piece import MARK_CYCLE, Piece, observation_code
from .space import Space

logger = logging.getLogger(__name__)


# ============================================================================
# Constants
# ============================================================================

# Spaces that must stay free for the first-click safe zone
SAFE_ZONE_SIZE = 9


class GameState(Enum):
    """Possible states of the game."""

    PLAYING = auto()
    WON = auto()
    LOST = auto()


class ClickAction(Enum):
    """Kinds of click a player can make on a space."""

    DEFAULT = auto()
    FLAG = auto()
    MARK = auto()
    CHEAT = auto()


@dataclass
class BoardConfig:
    """
    Configuration for a minefield board.

    Out of range values are clamped rather than rejected, so any config
    produces a playable board.

    Attributes:
        width: Number of columns.
        height: Number of rows.
        num_mines: Total mines to place, at most width * height - 9.
        cheats: Cheat clicks allowed per game.
    """

    width: int = 9
    height: int = 9
    num_mines: int = 10
    cheats: int = 1

    def __post_init__(self) -> None:
        """Clamp configuration after initialization."""
        self._clamp()

    def _clamp(self) -> None:
        """Bring every value into its valid range."""
        width = max(1, self.width)
        height = max(1, self.height)
        max_mines = max(0, width * height - SAFE_ZONE_SIZE)
        num_mines = min(max(0, self.num_mines), max_mines)
        cheats = max(0, self.cheats)

        clamped = (width, height, num_mines, cheats)
        if clamped != (self.width, self.height, self.num_mines, self.cheats):
            logger.debug(
                "Clamped board config %dx%d/%d mines/%d cheats to "
                "%dx%d/%d mines/%d cheats",
                self.width, self.height, self.num_mines, self.cheats,
                *clamped,
            )
        self.width, self.height, self.num_mines, self.cheats = clamped

    @property
    def max_mines(self) -> int:
        """Largest mine count this board size allows."""
        return max(0, self.width * self.height - SAFE_ZONE_SIZE)


# Preset difficulty levels
BEGINNER = BoardConfig(9, 9, 10)
INTERMEDIATE = BoardConfig(16, 16, 40)
EXPERT = BoardConfig(30, 16, 99)

PRESETS = {
    "beginner": BEGINNER,
    "intermediate": INTERMEDIATE,
    "expert": EXPERT,
}


# ============================================================================
# Board Class
# ============================================================================

class Board:
    """
    Minesweeper board engine.

    Owns the mine grid, the grid of visible pieces and the game counters.
    Invalid spaces, clicks after the game ended and ineligible cheat
    targets are all silently ignored.
    """

    def __init__(
        self,
        width: int = 9,
        height: int = 9,
        mine_count: int = 10,
        cheats_allowed: int = 1,
        seed: Optional[int] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        """
        Create an empty board; mines are generated on the first click.

        Args:
            width: Number of columns.
            height: Number of rows.
            mine_count: Total mines, clamped to width * height - 9.
            cheats_allowed: Cheat clicks available each game.
            seed: Seed for the first mine layout, random if omitted.
            rng: Source of seeds when none is given.
        """
        self.config = BoardConfig(width, height, mine_count, cheats_allowed)
        self._rng = rng or random.Random()
        self._next_seed = seed
        self._seed: Optional[int] = None
        self._origin: Optional[Space] = None
        self._mines = self._empty_mines()
        self._updates: Set[Space] = set()
        self._reset_data()

    @classmethod
    def from_config(
        cls,
        config: BoardConfig,
        seed: Optional[int] = None,
        rng: Optional[random.Random] = None,
    ) -> "Board":
        """Create a board from a configuration."""
        return cls(
            config.width,
            config.height,
            config.num_mines,
            config.cheats,
            seed=seed,
            rng=rng,
        )

    # ========================================================================
    # Grid Initialization (Low-level)
    # ========================================================================

    def _empty_mines(self) -> np.ndarray:
        return np.zeros((self.config.height, self.config.width), dtype=bool)

    def _reset_data(self) -> None:
        """Clear pieces and per-game counters, keeping the mines."""
        self._pieces: List[List[Optional[Piece]]] = [
            [None] * self.config.width for _ in range(self.config.height)
        ]
        self._game_over = False
        self._victory = False
        self._first_click_done = False
        self._cheats = self.config.cheats
        self._flag_count = 0

    def generate_mines(
        self, seed: Optional[int] = None, origin: Optional[Space] = None
    ) -> None:
        """
        Populate the board with mines.

        Two boards of the same size and mine count given the same seed
        and origin get identical layouts.

        Args:
            seed: Generator seed. Defaults to the seed the board was
                created with, or a fresh random one.
            origin: Space whose neighborhood stays mine-free, if any.
        """
        if seed is None:
            seed = self._next_seed
        if seed is None:
            seed = random_seed(self._rng)
        self._next_seed = None

        self._mines = generate_mines(
            self.config.width,
            self.config.height,
            self.config.num_mines,
            seed,
            origin,
        )
        self._seed = seed
        self._origin = origin

    def set_mines(self, spaces: Iterable[Space]) -> None:
        """
        Install an explicit mine layout, as if the first click happened.

        Invalid spaces are skipped. The configured mine count is left
        as it is.
        """
        mines = self._empty_mines()
        for space in spaces:
            if self.is_valid(space):
                mines[space.y, space.x] = True
        self._mines = mines
        self._seed = None
        self._origin = None
        self._first_click_done = True

    def count_adjacent_mines(self, space: Space) -> int:
        """Count mines among the neighbors of a space."""
        if not self.is_valid(space):
            return 0
        x, y = space.x, space.y
        window = self._mines[max(0, y - 1):y + 2, max(0, x - 1):x + 2]
        return int(window.sum()) - int(self._mines[y, x])

    # ========================================================================
    # Neighbor Utilities (Low-level)
    # ========================================================================

    def is_valid(self, space: Optional[Space]) -> bool:
        """Check if space is within board bounds."""
        if space is None:
            return False
        return 0 <= space.x < self.config.width and 0 <= space.y < self.config.height

    def neighbors(self, space: Space) -> List[Space]:
        """
        Get valid neighboring spaces.

        Args:
            space: Center space.

        Returns:
            Up to 8 in-bounds neighbors, none for an invalid space.
        """
        if not self.is_valid(space):
            return []
        result = []
        for dy in (-1, 0, 1):
            for dx in (-1, 0, 1):
                if dx == 0 and dy == 0:
                    continue
                neighbor = space.offset(dx, dy)
                if self.is_valid(neighbor):
                    result.append(neighbor)
        return result

    def all_spaces(self) -> Iterator[Space]:
        """Iterate over every space in row-major order."""
        for y in range(self.config.height):
            for x in range(self.config.width):
                yield Space(x, y)

    # ========================================================================
    # Piece Helpers (Low-level)
    # ========================================================================

    def _set_piece(self, space: Space, piece: Optional[Piece]) -> None:
        self._pieces[space.y][space.x] = piece
        self._updates.add(space)

    def _is_replaceable(self, space: Space) -> bool:
        """Check if a reveal or flag may overwrite the space."""
        if not self.is_valid(space):
            return False
        piece = self._pieces[space.y][space.x]
        return piece is None or piece.is_replaceable

    def _mark_all_updated(self) -> None:
        self._updates.update(self.all_spaces())

    # ========================================================================
    # Game Actions (Mid-level)
    # ========================================================================

    def handle_click(self, space: Space, action: ClickAction) -> None:
        """
        Apply a click to a space.

        Does nothing once the game is over or if the space is off the
        board.

        Args:
            space: Space clicked.
            action: Kind of click.
        """
        if self._game_over or not self.is_valid(space):
            return

        if action is ClickAction.DEFAULT:
            self._handle_default_click(space)
        elif action is ClickAction.FLAG:
            self._handle_flag_click(space)
        elif action is ClickAction.MARK:
            self._handle_mark_click(space)
        elif action is ClickAction.CHEAT:
            self._handle_cheat_click(space)

    def _first_click(self, origin: Optional[Space]) -> None:
        """Generate the minefield for the first action of a game."""
        self.generate_mines(origin=origin)
        self._first_click_done = True

    def _handle_default_click(self, space: Space) -> None:
        """Reveal a space, or chord a revealed number."""
        if not self._first_click_done:
            self._first_click(space)

        piece = self.piece_at(space)
        if piece is not None and piece.is_number:
            self._chord(space, piece.number)
        else:
            self._reveal(space)

        # Checked once per click, not once per cascaded space
        if not self._game_over:
            self.check_victory()

    def _chord(self, space: Space, number: int) -> None:
        """Reveal all neighbors when the flags around a number match it."""
        neighbors = self.neighbors(space)
        flags = sum(1 for n in neighbors if self.piece_at(n) is Piece.FLAG)
        if flags != number:
            return

        # A wrong flag makes this lose the game
        for neighbor in neighbors:
            self._reveal(neighbor)
            if self._game_over:
                return

    def _reveal(self, space: Space) -> None:
        """
        Reveal a space, cascading through zero-count regions.

        Flags, numbers and shown mines are never replaceable, so every
        space is revealed at most once per click.
        """
        pending = [space]
        while pending:
            current = pending.pop()
            if not self._is_replaceable(current):
                continue

            if self.is_mine(current):
                self.lose_game(current)
                return

            count = self.count_adjacent_mines(current)
            self._set_piece(current, Piece.from_number(count))
            if count == 0:
                pending.extend(self.neighbors(current))

    def _handle_flag_click(self, space: Space) -> None:
        """Cycle blank -> flag -> red mark -> blank."""
        piece = self.piece_at(space)
        if piece is Piece.FLAG:
            self._set_piece(space, Piece.MARK_RED)
            self._flag_count -= 1
        elif piece is not None and piece.is_mark:
            self._set_piece(space, None)
        elif piece is None:
            self._set_piece(space, Piece.FLAG)
            self._flag_count += 1

    def _handle_mark_click(self, space: Space) -> None:
        """Cycle mark colors; flags and blanks become red marks."""
        piece = self.piece_at(space)
        if piece in MARK_CYCLE:
            self._set_piece(space, MARK_CYCLE[piece])
        elif piece is Piece.FLAG:
            self._set_piece(space, Piece.MARK_RED)
            self._flag_count -= 1
        elif piece is None:
            self._set_piece(space, Piece.MARK_RED)

    def _handle_cheat_click(self, space: Space) -> None:
        """Safely reveal a space, showing a mine in green if there is one."""
        if self._cheats <= 0:
            return

        # No safe zone when the game opens with a cheat
        if not self._first_click_done:
            self._first_click(None)

        piece = self.piece_at(space)
        if piece is not None and not piece.is_mark:
            return

        if self.is_mine(space):
            self._set_piece(space, Piece.MINE_GREEN)
        else:
            self._reveal(space)
        self._cheats -= 1

        if not self._game_over:
            self.check_victory()

    # ========================================================================
    # Game End (Mid-level)
    # ========================================================================

    def check_victory(self) -> bool:
        """
        Check if every non-mine space shows a number, ending the game if so.

        Flags and marks on mine spaces do not matter.

        Returns:
            True if the game is won.
        """
        if self._game_over:
            return self._victory

        for space in self.all_spaces():
            if self.is_mine(space):
                continue
            piece = self.piece_at(space)
            if piece is None or not piece.is_number:
                return False

        self._victory = True
        self._game_over = True
        logger.info("Game won on %dx%d board", self.width, self.height)
        self._show_mines(None, victory=True)
        return True

    def lose_game(self, space: Space) -> None:
        """
        End the game as a loss.

        Args:
            space: Mine whose reveal caused the loss.
        """
        self._game_over = True
        logger.info("Game lost at (%d, %d)", space.x, space.y)
        self._show_mines(space, victory=False)

    def _show_mines(self, clicked: Optional[Space], victory: bool) -> None:
        """
        Show every mine at the end of a game.

        Mines are only drawn over blank or marked spaces, so a flag on a
        mine stays a flag. Flags without a mine become FLAG_NOT and no
        longer count as flags.
        """
        shown = Piece.MINE_GREEN if victory else Piece.MINE

        if clicked is not None and self.is_mine(clicked):
            self._set_piece(clicked, Piece.MINE_RED)

        for space in self.all_spaces():
            if space == clicked:
                continue
            piece = self.piece_at(space)
            if self.is_mine(space):
                if piece is None or piece.is_mark:
                    self._set_piece(space, shown)
            elif piece is Piece.FLAG:
                self._set_piece(space, Piece.FLAG_NOT)
                self._flag_count -= 1

    # ========================================================================
    # New Game / Restart
    # ========================================================================

    def new_game(self, seed: Optional[int] = None) -> None:
        """
        Start a new game of the same size.

        Mines are cleared and regenerated on the next click.

        Args:
            seed: Seed for the next layout, random if omitted.
        """
        self._mines = self._empty_mines()
        self._seed = None
        self._origin = None
        self._next_seed = seed
        self._reset_data()
        self._mark_all_updated()

    def restart(self) -> None:
        """
        Replay the current layout from the beginning.

        Does nothing before the first click, since there is no layout
        yet. The next click will not move the mines.
        """
        if not self._first_click_done:
            return

        self._reset_data()
        self._first_click_done = True
        self._mark_all_updated()

    # ========================================================================
    # State Accessors (High-level)
    # ========================================================================

    @property
    def width(self) -> int:
        """Number of columns."""
        return self.config.width

    @property
    def height(self) -> int:
        """Number of rows."""
        return self.config.height

    @property
    def mine_count(self) -> int:
        """Configured number of mines."""
        return self.config.num_mines

    @property
    def cheats_allowed(self) -> int:
        """Cheat clicks available each game."""
        return self.config.cheats

    @property
    def flag_count(self) -> int:
        """Number of spaces holding a flag."""
        return self._flag_count

    @property
    def seed(self) -> Optional[int]:
        """Seed of the current mine layout, None before generation."""
        return self._seed

    @property
    def origin(self) -> Optional[Space]:
        """Space protected by the current layout's safe zone."""
        return self._origin

    @property
    def first_click_done(self) -> bool:
        """Check if mines exist for the current game."""
        return self._first_click_done

    @property
    def game_state(self) -> GameState:
        """Get current game state."""
        if not self._game_over:
            return GameState.PLAYING
        return GameState.WON if self._victory else GameState.LOST

    @property
    def is_playing(self) -> bool:
        """Check if game is still in progress."""
        return not self._game_over

    def is_game_over(self) -> bool:
        """Check if the game ended."""
        return self._game_over

    def has_won(self) -> bool:
        """Check if the game was won."""
        return self._victory

    def remaining_mines(self) -> int:
        """Mines minus flags placed; negative when over-flagged."""
        return self.config.num_mines - self._flag_count

    def cheats_remaining(self) -> int:
        """Cheat clicks left this game."""
        return self._cheats

    def piece_at(self, space: Space) -> Optional[Piece]:
        """Get the piece on a space, None if blank or invalid."""
        if not self.is_valid(space):
            return None
        return self._pieces[space.y][space.x]

    def is_mine(self, space: Space) -> bool:
        """Check if a space holds a mine."""
        if not self.is_valid(space):
            return False
        return bool(self._mines[space.y, space.x])

    def is_enabled(self, space: Space) -> bool:
        """Check if a space renders raised; False for numbers and shown mines."""
        if not self.is_valid(space):
            return False
        piece = self._pieces[space.y][space.x]
        return piece is None or piece.is_enabled

    def drain_updates(self) -> Set[Space]:
        """Return spaces changed since the last call and forget them."""
        updates = self._updates
        self._updates = set()
        return updates

    def mine_grid(self) -> np.ndarray:
        """Copy of the mine grid, shape (height, width)."""
        return self._mines.copy()

    def get_observation(self) -> np.ndarray:
        """
        Get board state as numpy array.

        Returns:
            2D int8 array of piece codes, -1 for blank spaces.
        """
        obs = np.full((self.height, self.width), -1, dtype=np.int8)
        for y, row in enumerate(self._pieces):
            for x, piece in enumerate(row):
                obs[y, x] = observation_code(piece)
        return obs

    def get_valid_actions(self) -> List[Space]:
        """Get spaces a reveal could still change (blank or marked)."""
        return [space for space in self.all_spaces() if self._is_replaceable(space)]

    # ========================================================================
    # Persistence
    # ========================================================================

    def to_dict(self) -> Dict[str, Any]:
        """Convert the full board state to plain data."""
        origin = self._origin.as_tuple() if self._origin is not None else None
        return {
            "width": self.width,
            "height": self.height,
            "mine_count": self.mine_count,
            "cheats_allowed": self.cheats_allowed,
            "cheats_remaining": self._cheats,
            "flag_count": self._flag_count,
            "game_over": self._game_over,
            "victory": self._victory,
            "first_click_done": self._first_click_done,
            "seed": self._seed,
            "next_seed": self._next_seed,
            "origin": list(origin) if origin is not None else None,
            "mines": self._mines.tolist(),
            "pieces": [
                [piece.name if piece is not None else None for piece in row]
                for row in self._pieces
            ],
            "updates": sorted(list(space.as_tuple()) for space in self._updates),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Board":
        """
        Rebuild a board from ``to_dict`` output.

        Raises:
            KeyError: If a field is missing or a piece name is unknown.
            ValueError: If a grid does not match the board size, the flag
                count disagrees with the pieces, or the cheat count is out
                of range.
        """
        board = cls(
            data["width"],
            data["height"],
            data["mine_count"],
            data["cheats_allowed"],
            seed=data.get("next_seed"),
        )

        mines = np.array(data["mines"], dtype=bool)
        if mines.shape != (board.height, board.width):
            raise ValueError(
                f"Mine grid shape {mines.shape} does not match "
                f"{board.width}x{board.height} board"
            )
        pieces = [
            [Piece[name] if name is not None else None for name in row]
            for row in data["pieces"]
        ]
        if len(pieces) != board.height or any(
            len(row) != board.width for row in pieces
        ):
            raise ValueError("Piece grid does not match board size")

        flags = sum(row.count(Piece.FLAG) for row in pieces)
        if data["flag_count"] != flags:
            raise ValueError(
                f"flag_count {data['flag_count']} does not match "
                f"{flags} flags on the board"
            )
        cheats = data["cheats_remaining"]
        if not 0 <= cheats <= board.cheats_allowed:
            raise ValueError(
                f"cheats_remaining {cheats} outside 0..{board.cheats_allowed}"
            )

        origin = data.get("origin")
        board._mines = mines
        board._pieces = pieces
        board._cheats = cheats
        board._flag_count = flags
        board._game_over = data["game_over"]
        board._victory = data["victory"]
        board._first_click_done = data["first_click_done"]
        board._seed = data["seed"]
        board._origin = Space(*origin) if origin is not None else None
        board._updates = {Space(x, y) for x, y in data.get("updates", [])}
        return board
