"""
Domain entities for the snake engine.

This module contains the core game entities that are independent of
infrastructure concerns (timers, storage, HTTP, etc.).
"""

from .constants import (
    UP, DOWN, LEFT, RIGHT, VALID_MOVES, OPPOSITES,
    START, RUNNING, PAUSED, GAME_OVER,
    GRID_SIZE,
)
from .snake import Snake
from .game_state import GameState

__all__ = [
    'UP', 'DOWN', 'LEFT', 'RIGHT', 'VALID_MOVES', 'OPPOSITES',
    'START', 'RUNNING', 'PAUSED', 'GAME_OVER',
    'GRID_SIZE',
    'Snake',
    'GameState',
]
