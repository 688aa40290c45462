"""
GameState entity - a read-only snapshot of the game at a point in time.
"""

from typing import Any, Dict, List, Tuple


class GameState:
    """
    A snapshot of the game at a specific point in time.

    Attributes:
        snake: tuple of (x, y) from head to tail
        food: (x, y) position of the food
        score: food eaten this session
        speed: current tick interval in milliseconds
        lifecycle_state: one of START, RUNNING, PAUSED, GAME_OVER
        direction: direction applied on the most recent tick
        grid_size: board dimension (the board is grid_size x grid_size)
    """

    __slots__ = ("snake", "food", "score", "speed", "lifecycle_state", "direction", "grid_size")

    def __init__(
        self,
        snake: List[Tuple[int, int]],
        food: Tuple[int, int],
        score: int,
        speed: int,
        lifecycle_state: str,
        direction: str,
        grid_size: int
    ):
        self.snake = tuple(snake)
        self.food = food
        self.score = score
        self.speed = speed
        self.lifecycle_state = lifecycle_state
        self.direction = direction
        self.grid_size = grid_size

    @property
    def head(self) -> Tuple[int, int]:
        return self.snake[0]

    def print_board(self) -> str:
        """
        Returns a string representation of the board with:
        . = empty space
        F = food
        S = snake body
        H = snake head
        Row 0 is printed on top, matching the screen coordinates used for movement.
        """
        board = [['.' for _ in range(self.grid_size)] for _ in range(self.grid_size)]

        fx, fy = self.food
        board[fy][fx] = 'F'

        for pos_idx, (x, y) in enumerate(self.snake):
            board[y][x] = 'H' if pos_idx == 0 else 'S'

        result = [f"{y:2d} {' '.join(board[y])}" for y in range(self.grid_size)]
        result.append("   " + " ".join(str(i % 10) for i in range(self.grid_size)))

        return "\n".join(result)

    def to_dict(self) -> Dict[str, Any]:
        """JSON-friendly form consumed by the HTTP driver."""
        return {
            "snake": [list(cell) for cell in self.snake],
            "food": list(self.food),
            "score": self.score,
            "speed": self.speed,
            "lifecycleState": self.lifecycle_state,
            "direction": self.direction,
            "gridSize": self.grid_size,
        }

    def __eq__(self, other):
        if not isinstance(other, GameState):
            return NotImplemented
        return all(getattr(self, name) == getattr(other, name) for name in self.__slots__)

    def __repr__(self):
        return (
            f"<GameState state={self.lifecycle_state}, head={self.head}, food={self.food}, "
            f"length={len(self.snake)}, score={self.score}, speed={self.speed}>"
        )
