"""
Gymnasium environment wrapper for the minefield engine.

Provides a standard RL interface over ``Board.handle_click``.
"""
from typing import Any, Dict, Optional, Tuple, SupportsFloat

import gymnasium as gym
import numpy as np
from gymnasium import spaces

from .board import Board, BoardConfig, ClickAction, GameState
from .piece import Piece
from .space import Space


# ============================================================================
# Constants
# ============================================================================

ACTIONS = tuple(ClickAction)

OBSERVATION_LOW = min(piece.value for piece in Piece)
OBSERVATION_HIGH = max(piece.value for piece in Piece)

INVALID_REWARD = -0.1
LOSS_REWARD = -10.0
WIN_REWARD = 10.0
REVEAL_REWARD = 1.0


def decode_action(action: int, width: int, height: int) -> Tuple[ClickAction, Space]:
    """Convert a flat action index to (click kind, space)."""
    kind, index = divmod(int(action), width * height)
    return ACTIONS[kind], Space(index % width, index // width)


def encode_action(click: ClickAction, space: Space, width: int, height: int) -> int:
    """Convert (click kind, space) to a flat action index."""
    return ACTIONS.index(click) * width * height + space.y * width + space.x


def render_ansi(board: Board) -> str:
    """
    Render a board as text, one row per line.

    Blank spaces show as ``.``; pieces use ``Piece.symbol``.
    """
    lines = []
    for y in range(board.height):
        row = []
        for x in range(board.width):
            piece = board.piece_at(Space(x, y))
            row.append("." if piece is None else piece.symbol)
        lines.append(" ".join(row))
    return "\n".join(lines)


# ============================================================================
# Minefield Environment
# ============================================================================

class MinefieldEnv(gym.Env):
    """
    Gymnasium environment for the minefield engine.

    Observation:
        2D int8 array of piece codes (see ``Piece``), -1 for blank.

    Actions:
        Discrete action space of size 4 * width * height.
        ``action // (width * height)`` picks the click kind in
        ``ClickAction`` order (DEFAULT, FLAG, MARK, CHEAT); the
        remainder is the row-major space index.

    Rewards:
        - +1 for a reveal or cheat that changed the board
        - 0 for a flag or mark that changed the board
        - +10 for winning the game
        - -10 for hitting a mine
        - -0.1 for an action that changed nothing
    """

    metadata = {"render_modes": ["human", "ansi"], "render_fps": 4}

    def __init__(
        self,
        config: Optional[BoardConfig] = None,
        render_mode: Optional[str] = None,
        max_steps: Optional[int] = None,
    ) -> None:
        """
        Initialize the environment.

        Args:
            config: Board configuration (default: 9x9 with 10 mines).
            render_mode: How to render the environment.
            max_steps: Truncate episodes after this many steps.
        """
        super().__init__()

        self.config = config or BoardConfig()
        self.board = Board.from_config(self.config)
        self.render_mode = render_mode
        self.max_steps = max_steps

        self.observation_space = spaces.Box(
            low=OBSERVATION_LOW,
            high=OBSERVATION_HIGH,
            shape=(self.config.height, self.config.width),
            dtype=np.int8,
        )

        self._cells = self.config.width * self.config.height
        self.action_space = spaces.Discrete(len(ACTIONS) * self._cells)

        self._steps = 0

    def reset(
        self,
        *,
        seed: Optional[int] = None,
        options: Optional[Dict[str, Any]] = None,
    ) -> Tuple[np.ndarray, Dict[str, Any]]:
        """
        Start a new game.

        The mine seed is drawn from the environment's seeded generator,
        so the same reset seed gives the same minefield.

        Args:
            seed: Random seed for reproducibility.
            options: Additional options (unused).

        Returns:
            Tuple of (observation, info dict).
        """
        super().reset(seed=seed)
        mine_seed = int(self.np_random.integers(0, 2**63))
        self.board.new_game(seed=mine_seed)
        self.board.drain_updates()
        self._steps = 0

        return self.board.get_observation(), self._get_info()

    def step(
        self, action: int
    ) -> Tuple[np.ndarray, SupportsFloat, bool, bool, Dict[str, Any]]:
        """
        Execute one click.

        Args:
            action: Encoded click (see class docstring).

        Returns:
            Tuple of (observation, reward, terminated, truncated, info).
        """
        click, space = self.decode_action(action)
        self._steps += 1

        reward = self._calculate_reward(space, click)
        observation = self.board.get_observation()

        terminated = self.board.is_game_over()
        truncated = (
            not terminated
            and self.max_steps is not None
            and self._steps >= self.max_steps
        )

        return observation, reward, terminated, truncated, self._get_info()

    def decode_action(self, action: int) -> Tuple[ClickAction, Space]:
        """Convert flat action index to (click kind, space)."""
        return decode_action(action, self.config.width, self.config.height)

    def encode_action(self, click: ClickAction, space: Space) -> int:
        """Convert (click kind, space) to a flat action index."""
        return encode_action(click, space, self.config.width, self.config.height)

    def _calculate_reward(self, space: Space, click: ClickAction) -> float:
        """Apply a click and score its effect."""
        self.board.handle_click(space, click)
        changed = self.board.drain_updates()

        if not changed:
            return INVALID_REWARD
        if self.board.game_state is GameState.LOST:
            return LOSS_REWARD
        if self.board.game_state is GameState.WON:
            return WIN_REWARD
        if click in (ClickAction.DEFAULT, ClickAction.CHEAT):
            return REVEAL_REWARD
        return 0.0

    def _get_info(self) -> Dict[str, Any]:
        """Get info dictionary for current state."""
        obs = self.board.get_observation()
        revealed = int(np.count_nonzero((obs >= 0) & (obs <= 8)))

        return {
            "steps": self._steps,
            "revealed": revealed,
            "total_safe": self._cells - self.config.num_mines,
            "remaining_mines": self.board.remaining_mines(),
            "cheats_remaining": self.board.cheats_remaining(),
            "game_state": self.board.game_state.name,
            "valid_actions": len(self.board.get_valid_actions()),
        }

    def render(self) -> Optional[str]:
        """Render the current board state."""
        if self.render_mode == "ansi":
            return render_ansi(self.board)
        if self.render_mode == "human":
            print(render_ansi(self.board))
        return None

    def get_action_mask(self) -> np.ndarray:
        """
        Get mask of actions that can change the board.

        Chording on revealed numbers is left out of the mask.

        Returns:
            Boolean array where True = valid action.
        """
        mask = np.zeros(self.action_space.n, dtype=bool)
        if self.board.is_game_over():
            return mask

        can_cheat = self.board.cheats_remaining() > 0
        for space in self.board.all_spaces():
            piece = self.board.piece_at(space)
            open_space = piece is None or piece.is_mark
            if open_space:
                mask[self.encode_action(ClickAction.DEFAULT, space)] = True
                if can_cheat:
                    mask[self.encode_action(ClickAction.CHEAT, space)] = True
            if open_space or piece is Piece.FLAG:
                mask[self.encode_action(ClickAction.FLAG, space)] = True
                mask[self.encode_action(ClickAction.MARK, space)] = True
        return mask


# ============================================================================
# Vectorized Environment Factory
# ============================================================================

def make_vec_env(
    n_envs: int = 4,
    config: Optional[BoardConfig] = None,
) -> gym.vector.VectorEnv:
    """
    Create vectorized environment for parallel rollouts.

    Args:
        n_envs: Number of parallel environments.
        config: Board configuration.

    Returns:
        Vectorized environment.
    """
    def make_env() -> MinefieldEnv:
        return MinefieldEnv(config=config)

    return gym.vector.SyncVectorEnv([make_env for _ in range(n_envs)])
