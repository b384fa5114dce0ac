"""
Minefield game module.

Provides the minesweeper board engine, piece and space types, JSON
save/load, and a Gymnasium environment over the engine.
"""
from .piece import Piece, HIDDEN
from .space import Space
from .generator import generate_mines, exclusion_zone
from .board import (
    Board,
    BoardConfig,
    ClickAction,
    GameState,
    BEGINNER,
    INTERMEDIATE,
    EXPERT,
    PRESETS,
)
from .storage import StorageError, save_game, load_game
from .environment import MinefieldEnv, make_vec_env, render_ansi

__all__ = [
    "Piece",
    "HIDDEN",
    "Space",
    "generate_mines",
    "exclusion_zone",
    "Board",
    "BoardConfig",
    "ClickAction",
    "GameState",
    "BEGINNER",
    "INTERMEDIATE",
    "EXPERT",
    "PRESETS",
    "StorageError",
    "save_game",
    "load_game",
    "MinefieldEnv",
    "make_vec_env",
    "render_ansi",
]
