"""
Agents that play the minefield through ``MinefieldEnv``.

- RandomAgent: Baseline random selection among allowed clicks
"""
from .base_agent import BaseAgent
from .random_agent import RandomAgent

__all__ = [
    "BaseAgent",
    "RandomAgent",
]
