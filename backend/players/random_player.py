"""
Random player implementation - picks random safe moves.
"""

import random
from typing import List, Optional

from domain.constants import DIRECTION_OFFSETS, OPPOSITES, VALID_MOVES
from domain.game_state import GameState
from .base import Player


class RandomPlayer(Player):
    """
    A random autopilot that picks a direction avoiding reverse turns and
    self-collisions. The board wraps, so there are no walls to avoid.
    """

    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng or random.Random()

    def get_move(self, game_state: GameState) -> str:
        snake_positions = list(game_state.snake)
        head_x, head_y = snake_positions[0]
        size = game_state.grid_size

        # Never ask for a reverse turn; the engine would ignore it anyway
        candidates = sorted(VALID_MOVES - {OPPOSITES[game_state.direction]})

        valid_moves: List[str] = []
        for move in candidates:
            dx, dy = DIRECTION_OFFSETS[move]
            new_cell = ((head_x + dx) % size, (head_y + dy) % size)

            # The tail vacates its cell unless this move eats the food
            body = snake_positions if new_cell == game_state.food else snake_positions[:-1]
            if new_cell in body:
                continue

            valid_moves.append(move)

        # If no valid moves, just return a random move (we'll die anyway)
        if not valid_moves:
            return self.rng.choice(candidates)

        return self.rng.choice(valid_moves)
