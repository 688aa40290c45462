"""
Player implementations and input translation for the snake game.

Players decide which direction to request on the next tick; the input
mapping turns keyboard, touch and button events into directions.
"""

from .base import Player
from .random_player import RandomPlayer
from .input_mapping import direction_for_key, direction_for_swipe, direction_for_button

__all__ = [
    'Player',
    'RandomPlayer',
    'direction_for_key',
    'direction_for_swipe',
    'direction_for_button',
]
