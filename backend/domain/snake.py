"""
Snake entity for the game engine.
"""

from collections import deque
from typing import Iterable, Tuple

from .constants import DIRECTION_OFFSETS


class Snake:
    """
    Represents the snake on the board.

    Attributes:
        positions: deque of (x, y) from head at index 0 to tail at the end
    """

    def __init__(self, positions: Iterable[Tuple[int, int]]):
        self.positions = deque(positions)
        if not self.positions:
            raise ValueError("A snake needs at least one segment.")

    @property
    def head(self) -> Tuple[int, int]:
        """Return the head position (first element)."""
        return self.positions[0]

    def next_head(self, direction: str, grid_size: int) -> Tuple[int, int]:
        """
        Return the cell the head moves into for the given direction.

        Both axes wrap modulo grid_size, so leaving one edge re-enters
        the opposite edge.

        Raises:
            ValueError: If direction is not one of UP, DOWN, LEFT, RIGHT.
        """
        if direction not in DIRECTION_OFFSETS:
            raise ValueError(f"Unexpected direction: {direction!r}")

        dx, dy = DIRECTION_OFFSETS[direction]
        head_x, head_y = self.head
        return ((head_x + dx) % grid_size, (head_y + dy) % grid_size)

    def __len__(self) -> int:
        return len(self.positions)

    def __repr__(self):
        return f"<Snake head={self.head}, length={len(self.positions)}>"
