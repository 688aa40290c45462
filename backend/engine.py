"""
Simulation engine for the snake game.

The engine owns the snake, food, direction, score, speed and lifecycle state
of one session and advances them one tick at a time. It never schedules
anything itself: a driver calls tick() at the cadence given by the current
speed, and subscribes to engine events for presentation side effects.
"""

import logging
import random
import threading
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Tuple

from domain.constants import (
    VALID_MOVES, OPPOSITES,
    START, RUNNING, PAUSED, GAME_OVER,
    STARTED, RESUMED, PAUSED_EVENT, RESET, FOOD_EATEN, MILESTONE, GAME_OVER_EVENT,
    ENGINE_EVENTS,
    GRID_SIZE, INITIAL_SNAKE, INITIAL_FOOD, INITIAL_DIRECTION,
    BASE_SPEED, SPEED_DECREMENT, MIN_SPEED, MILESTONE_INTERVAL,
)
from domain.game_state import GameState
from domain.snake import Snake

logger = logging.getLogger(__name__)

Listener = Callable[[GameState], None]


@dataclass
class EngineConfig:
    grid_size: int = GRID_SIZE
    initial_snake: List[Tuple[int, int]] = field(default_factory=lambda: list(INITIAL_SNAKE))
    initial_food: Tuple[int, int] = INITIAL_FOOD
    initial_direction: str = INITIAL_DIRECTION
    base_speed: int = BASE_SPEED
    speed_decrement: int = SPEED_DECREMENT
    min_speed: int = MIN_SPEED
    milestone_interval: int = MILESTONE_INTERVAL
    # Sample food only from cells the snake does not cover
    avoid_snake_on_food: bool = True

    def validate(self) -> None:
        """Raise ValueError if the configuration cannot describe a playable board."""
        if self.grid_size < 2:
            raise ValueError(f"grid_size must be at least 2, got {self.grid_size}")
        if not self.initial_snake:
            raise ValueError("initial_snake needs at least one segment")
        cells = list(self.initial_snake) + [self.initial_food]
        for (x, y) in cells:
            if not (0 <= x < self.grid_size and 0 <= y < self.grid_size):
                raise ValueError(f"Cell out of bounds at {(x, y)}.")
        if len(set(self.initial_snake)) != len(self.initial_snake):
            raise ValueError("initial_snake segments must be distinct")
        if self.initial_food in self.initial_snake:
            raise ValueError(f"initial_food {self.initial_food} lies on the snake")
        if self.initial_direction not in VALID_MOVES:
            raise ValueError(f"Unexpected direction: {self.initial_direction!r}")
        if self.min_speed <= 0 or self.base_speed < self.min_speed:
            raise ValueError(
                f"Need 0 < min_speed <= base_speed, got min={self.min_speed}, base={self.base_speed}"
            )
        if self.speed_decrement < 0:
            raise ValueError("speed_decrement must not be negative")
        if self.milestone_interval <= 0:
            raise ValueError("milestone_interval must be positive")


class SnakeEngine:
    """
    Manages:
      - Snake body and food position
      - Current and pending direction
      - Score and tick interval (speed)
      - Lifecycle state (START, RUNNING, PAUSED, GAME_OVER)
      - Event listeners (started, resumed, paused, reset, food_eaten, milestone, game_over)

    Every public operation holds the engine lock, so a direction change is
    either fully applied before a tick or fully deferred after it. Listeners
    run after the lock is released.
    """

    def __init__(self, config: Optional[EngineConfig] = None, rng: Optional[random.Random] = None):
        self.config = config or EngineConfig()
        self.config.validate()
        self.rng = rng or random.Random()

        self._lock = threading.RLock()
        self._listeners: Dict[str, List[Listener]] = defaultdict(list)

        self.lifecycle_state = START
        self._load_start_configuration()

    # -------------------------------------------------------------------------
    # Observers
    # -------------------------------------------------------------------------

    def subscribe(self, event: str, callback: Listener) -> None:
        if event not in ENGINE_EVENTS:
            raise ValueError(f"Unknown engine event: {event!r}")
        with self._lock:
            self._listeners[event].append(callback)

    def unsubscribe(self, event: str, callback: Listener) -> None:
        with self._lock:
            if callback in self._listeners.get(event, []):
                self._listeners[event].remove(callback)

    def _emit(self, events: List[str], state: GameState) -> None:
        """
        Call listeners with the snapshot taken when the operation committed.

        A failing listener is logged and does not stop the others.
        """
        for event in events:
            with self._lock:
                listeners = list(self._listeners.get(event, []))
            for callback in listeners:
                try:
                    callback(state)
                except Exception:
                    logger.exception("Listener %r failed on %s", callback, event)

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    def _load_start_configuration(self) -> None:
        self.snake = Snake(self.config.initial_snake)
        self.food: Tuple[int, int] = self.config.initial_food
        self.score = 0
        self.speed = self.config.base_speed
        self.direction = self.config.initial_direction
        self.pending_direction = self.config.initial_direction

    def start(self) -> None:
        """
        Start a fresh session from START or GAME_OVER, or resume from PAUSED.
        Calling start() while RUNNING is a no-op.
        """
        with self._lock:
            if self.lifecycle_state in (START, GAME_OVER):
                self._load_start_configuration()
                self.lifecycle_state = RUNNING
                event = STARTED
                logger.info("Game started (speed=%sms)", self.speed)
            elif self.lifecycle_state == PAUSED:
                self.lifecycle_state = RUNNING
                event = RESUMED
                logger.info("Game resumed at score %s", self.score)
            else:
                logger.debug("start() ignored: game already running")
                return
            state = self.get_current_state()

        self._emit([event], state)

    def pause(self) -> None:
        """Pause a running session. No-op in any other state."""
        with self._lock:
            if self.lifecycle_state != RUNNING:
                logger.debug("pause() ignored in state %s", self.lifecycle_state)
                return
            self.lifecycle_state = PAUSED
            logger.info("Game paused at score %s", self.score)
            state = self.get_current_state()

        self._emit([PAUSED_EVENT], state)

    def reset(self) -> None:
        """Return to the START configuration from any state without running."""
        with self._lock:
            self._load_start_configuration()
            self.lifecycle_state = START
            logger.info("Game reset")
            state = self.get_current_state()

        self._emit([RESET], state)

    # -------------------------------------------------------------------------
    # Direction intake
    # -------------------------------------------------------------------------

    def request_direction_change(self, new_direction: str) -> bool:
        """
        Record a direction for the next tick.

        The request is ignored when it reverses the direction the snake last
        moved in. Between two ticks only the most recent accepted request
        counts.

        Returns:
            True if the request was recorded, False if it was rejected.

        Raises:
            ValueError: If new_direction is not a valid direction.
        """
        if new_direction not in VALID_MOVES:
            raise ValueError(f"Unexpected direction: {new_direction!r}")

        with self._lock:
            if new_direction == OPPOSITES[self.direction]:
                logger.debug("Rejected reverse turn %s while moving %s", new_direction, self.direction)
                return False
            self.pending_direction = new_direction
            return True

    # -------------------------------------------------------------------------
    # Simulation
    # -------------------------------------------------------------------------

    def tick(self) -> bool:
        """
        Advance the snake by one cell.

        1) If the game is not running, do nothing
        2) Apply the pending direction and compute the new head (wrapping)
        3) On food: keep the tail, otherwise drop it before checking collision
        4) On self-collision: GAME_OVER, leave the snake where it was
        5) Otherwise commit the move; on food relocate it, score, maybe speed up

        Returns:
            True if the snake moved, False otherwise.
        """
        events: List[str] = []
        with self._lock:
            if self.lifecycle_state != RUNNING:
                logger.debug("tick() ignored in state %s", self.lifecycle_state)
                return False

            direction = self.pending_direction
            new_head = self.snake.next_head(direction, self.config.grid_size)
            growing = new_head == self.food

            body = list(self.snake.positions)
            if not growing:
                body.pop()

            if new_head in body[1:]:
                self.lifecycle_state = GAME_OVER
                logger.info(
                    "Game over: head would hit its own body at %s (score=%s, length=%s)",
                    new_head, self.score, len(self.snake)
                )
                events.append(GAME_OVER_EVENT)
            else:
                self.direction = direction
                self.snake.positions.appendleft(new_head)
                if not growing:
                    self.snake.positions.pop()
                else:
                    events.extend(self._eat_food())
                logger.debug("Tick: head=%s length=%s", new_head, len(self.snake))
            state = self.get_current_state()

        self._emit(events, state)
        return GAME_OVER_EVENT not in events

    def _eat_food(self) -> List[str]:
        events = [FOOD_EATEN]
        self.score += 1
        self.food = self._random_free_cell()

        if self.score % self.config.milestone_interval == 0:
            self.speed = max(self.speed - self.config.speed_decrement, self.config.min_speed)
            events.append(MILESTONE)
            logger.info("Milestone reached at score %s, speed now %sms", self.score, self.speed)
        return events

    def _random_free_cell(self) -> Tuple[int, int]:
        """
        Return a random cell for the food.

        With avoid_snake_on_food, cells covered by the snake are excluded. If
        the snake covers the whole board any cell may be drawn.
        """
        size = self.config.grid_size
        if self.config.avoid_snake_on_food:
            occupied = set(self.snake.positions)
            free = [(x, y) for y in range(size) for x in range(size) if (x, y) not in occupied]
            if free:
                return self.rng.choice(free)
            logger.warning("No free cell left for food; sampling the whole board")

        return (self.rng.randrange(size), self.rng.randrange(size))

    def get_current_state(self) -> GameState:
        """
        Return a snapshot of the current board as a GameState.
        """
        with self._lock:
            return GameState(
                snake=list(self.snake.positions),
                food=self.food,
                score=self.score,
                speed=self.speed,
                lifecycle_state=self.lifecycle_state,
                direction=self.direction,
                grid_size=self.config.grid_size
            )
