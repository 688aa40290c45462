"""
Data access layer for the snake game.

Currently this is only the persisted high score, stored in SQLite.
"""

from .repositories import HighScoreRepository

__all__ = [
    'HighScoreRepository',
]
