"""
Game session: the driver around one SnakeEngine.

Wires together the engine, the tick loop, presentation feedback and the
persisted high score, and translates raw input (keys, swipes, on-screen
buttons) into direction requests.
"""

import logging
from typing import Any, Callable, Dict, Optional

from domain.constants import FOOD_EATEN, RUNNING, HIGH_SCORE_KEY
from domain.game_state import GameState
from engine import SnakeEngine
from players.input_mapping import direction_for_key, direction_for_swipe, direction_for_button
from services.feedback import FeedbackService
from services.game_loop import GameLoop

logger = logging.getLogger(__name__)


class GameSession:
    """
    Owns the driver-side state: timer, feedback, and the high score.

    The high score store is any object with get_high_score(key) and
    record_score(score, key), normally HighScoreRepository.
    """

    def __init__(
        self,
        engine: Optional[SnakeEngine] = None,
        high_scores=None,
        feedback: Optional[FeedbackService] = None,
        loop: Optional[GameLoop] = None,
        high_score_key: str = HIGH_SCORE_KEY,
    ):
        self.engine = engine or SnakeEngine()
        self.high_scores = high_scores
        self.high_score_key = high_score_key
        self.feedback = feedback or FeedbackService()
        self.loop = loop or GameLoop(self.engine)

        self.high_score = 0
        if self.high_scores is not None:
            self.high_score = self.high_scores.get_high_score(self.high_score_key)
            logger.info("Loaded high score %s", self.high_score)

        self.feedback.attach(self.engine)
        self.engine.subscribe(FOOD_EATEN, self._on_food_eaten)

    def _on_food_eaten(self, state: GameState) -> None:
        if state.score <= self.high_score:
            return
        self.high_score = state.score
        if self.high_scores is not None:
            self.high_score = self.high_scores.record_score(state.score, self.high_score_key)

    # -------------------------------------------------------------------------
    # Timer
    # -------------------------------------------------------------------------

    def open(self) -> None:
        """Start the background tick loop."""
        self.loop.start()

    def close(self) -> None:
        self.loop.stop()

    # -------------------------------------------------------------------------
    # Controls
    # -------------------------------------------------------------------------

    def start(self) -> GameState:
        self.engine.start()
        self.loop.wake()
        return self.engine.get_current_state()

    def pause(self) -> GameState:
        self.engine.pause()
        return self.engine.get_current_state()

    def reset(self) -> GameState:
        self.engine.reset()
        self.loop.wake()
        return self.engine.get_current_state()

    def toggle(self) -> GameState:
        """Play/pause button: pause while running, otherwise start or resume."""
        if self.engine.get_current_state().lifecycle_state == RUNNING:
            return self.pause()
        return self.start()

    def toggle_mute(self) -> bool:
        return self.feedback.toggle_mute()

    # -------------------------------------------------------------------------
    # Input
    # -------------------------------------------------------------------------

    def _request(self, direction: Optional[str], source: str) -> bool:
        if direction is None:
            logger.debug("Ignoring unmapped %s input", source)
            return False
        return self.engine.request_direction_change(direction)

    def request_direction(self, direction: str) -> bool:
        return self._request(direction, "direction")

    def press_key(self, key: str) -> bool:
        return self._request(direction_for_key(key), "key")

    def swipe(self, dx: float, dy: float) -> bool:
        return self._request(direction_for_swipe(dx, dy), "swipe")

    def press_button(self, button: str) -> bool:
        return self._request(direction_for_button(button), "button")

    # -------------------------------------------------------------------------
    # Rendering
    # -------------------------------------------------------------------------

    def snapshot(self) -> Dict[str, Any]:
        data = self.engine.get_current_state().to_dict()
        data["highScore"] = self.high_score
        data["muted"] = self.feedback.muted
        return data

    def subscribe(self, event: str, callback: Callable[[GameState], None]) -> None:
        self.engine.subscribe(event, callback)
