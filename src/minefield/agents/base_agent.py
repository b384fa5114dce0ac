"""
Base agent interface for the minefield environment.

Defines the abstract interface that all agents must implement.
"""
from abc import ABC, abstractmethod
from typing import Optional, Tuple

import numpy as np

from ..board import ClickAction
from ..environment import ACTIONS, decode_action, encode_action
from ..piece import HIDDEN, Piece
from ..space import Space


# ============================================================================
# Base Agent Interface
# ============================================================================

class BaseAgent(ABC):
    """
    Abstract base class for minefield agents.

    All agents must implement the select_action method to choose a click
    based on the current observation.
    """

    def __init__(self, board_height: int, board_width: int) -> None:
        """
        Initialize the agent.

        Args:
            board_height: Number of rows in the board.
            board_width: Number of columns in the board.
        """
        self.board_height = board_height
        self.board_width = board_width
        self.total_cells = board_height * board_width

    @abstractmethod
    def select_action(
        self,
        observation: np.ndarray,
        valid_actions: Optional[np.ndarray] = None,
    ) -> int:
        """
        Select an action based on the current observation.

        Args:
            observation: 2D array of piece codes.
            valid_actions: Optional mask of valid actions.

        Returns:
            Encoded action index.
        """
        pass

    def action_to_click(self, action: int) -> Tuple[ClickAction, Space]:
        """Convert flat action index to (click kind, space)."""
        return decode_action(action, self.board_width, self.board_height)

    def click_to_action(self, click: ClickAction, space: Space) -> int:
        """Convert (click kind, space) to flat action index."""
        return encode_action(click, space, self.board_width, self.board_height)

    def get_valid_actions_from_obs(self, observation: np.ndarray) -> np.ndarray:
        """
        Get a reveal-only action mask from an observation.

        Args:
            observation: 2D array of piece codes.

        Returns:
            Boolean mask where True = valid action. Only DEFAULT clicks
            on blank or marked spaces are marked valid.
        """
        flat_obs = observation.flatten()
        marks = [piece.value for piece in Piece if piece.is_mark]
        open_spaces = (flat_obs == HIDDEN) | np.isin(flat_obs, marks)

        mask = np.zeros(len(ACTIONS) * self.total_cells, dtype=bool)
        mask[: self.total_cells] = open_spaces
        return mask

    def reset(self) -> None:
        """Reset agent state for new episode."""
        pass

    def update(
        self,
        observation: np.ndarray,
        action: int,
        reward: float,
        next_observation: np.ndarray,
        done: bool,
    ) -> None:
        """
        Update agent with experience (for learning agents).

        Args:
            observation: State before action.
            action: Action taken.
            reward: Reward received.
            next_observation: State after action.
            done: Whether episode ended.
        """
        pass
