"""
Random agent for the minefield environment.

Serves as a baseline by selecting random valid clicks.
"""
from typing import Iterable, Optional

import numpy as np

from ..board import ClickAction
from ..environment import ACTIONS
from .base_agent import BaseAgent


# ============================================================================
# Random Agent
# ============================================================================

class RandomAgent(BaseAgent):
    """
    Agent that selects actions uniformly at random.

    Only the click kinds in ``actions`` are ever chosen. The default of
    plain reveals keeps episodes finite, since flag and mark clicks can
    cycle forever.
    """

    def __init__(
        self,
        board_height: int = 9,
        board_width: int = 9,
        seed: Optional[int] = None,
        actions: Iterable[ClickAction] = (ClickAction.DEFAULT,),
    ) -> None:
        """
        Initialize the random agent.

        Args:
            board_height: Number of rows in the board.
            board_width: Number of columns in the board.
            seed: Random seed for reproducibility.
            actions: Click kinds the agent may use.
        """
        super().__init__(board_height, board_width)
        self.rng = np.random.default_rng(seed)
        self.actions = tuple(actions)

        self._allowed = np.zeros(len(ACTIONS) * self.total_cells, dtype=bool)
        for click in self.actions:
            start = ACTIONS.index(click) * self.total_cells
            self._allowed[start:start + self.total_cells] = True

    def select_action(
        self,
        observation: np.ndarray,
        valid_actions: Optional[np.ndarray] = None,
    ) -> int:
        """
        Select a random valid action.

        Args:
            observation: 2D array of piece codes.
            valid_actions: Optional mask of valid actions.

        Returns:
            Random action index from valid actions.
        """
        if valid_actions is None:
            valid_actions = self.get_valid_actions_from_obs(observation)

        valid_indices = np.where(valid_actions & self._allowed)[0]

        if len(valid_indices) == 0:
            # No valid actions, return any action (will be invalid)
            return 0

        return int(self.rng.choice(valid_indices))
