"""
Presentation feedback bound to engine events.

Sounds and the milestone celebration are not part of the simulation; this
service listens to engine events and turns them into cues for whatever
front end plays them. The default sink only logs the cue.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional

from domain.constants import (
    STARTED, RESUMED, PAUSED_EVENT, RESET, FOOD_EATEN, MILESTONE, GAME_OVER_EVENT,
)
from domain.game_state import GameState

logger = logging.getLogger(__name__)

SOUND = "sound"
CELEBRATION = "celebration"

# Sound file names served at /sounds/<name>.mp3 by the front end
EVENT_SOUNDS = {
    STARTED: "start",
    RESUMED: "click",
    PAUSED_EVENT: "click",
    RESET: "reset",
    FOOD_EATEN: "eat",
    MILESTONE: "levelUp",
    GAME_OVER_EVENT: "gameOver",
}

CELEBRATION_OPTIONS = {
    "particleCount": 100,
    "spread": 70,
    "origin": {"y": 0.6},
}


@dataclass
class Cue:
    kind: str
    name: str
    score: int
    options: Dict[str, Any] = field(default_factory=dict)


def log_cue(cue: Cue) -> None:
    logger.info("Feedback cue: %s %s (score=%s)", cue.kind, cue.name, cue.score)


class FeedbackService:
    """
    Subscribes to engine events and forwards cues to a sink.

    Muting silences sounds only; the milestone celebration is visual and
    still fires.
    """

    def __init__(self, sink: Optional[Callable[[Cue], None]] = None, muted: bool = False):
        self.sink = sink or log_cue
        self.muted = muted
        self._handlers: Dict[str, Callable[[GameState], None]] = {}

    def toggle_mute(self) -> bool:
        self.muted = not self.muted
        logger.info("Sound %s", "muted" if self.muted else "unmuted")
        return self.muted

    def play_sound(self, name: str, state: GameState) -> None:
        if self.muted:
            return
        self.sink(Cue(kind=SOUND, name=name, score=state.score))

    def celebrate(self, state: GameState) -> None:
        self.sink(Cue(kind=CELEBRATION, name="confetti", score=state.score,
                      options=dict(CELEBRATION_OPTIONS)))

    def _handler_for(self, event: str) -> Callable[[GameState], None]:
        sound = EVENT_SOUNDS[event]

        def handle(state: GameState) -> None:
            self.play_sound(sound, state)
            if event == MILESTONE:
                self.celebrate(state)

        return handle

    def attach(self, engine) -> None:
        """Subscribe to every event that has a cue."""
        for event in EVENT_SOUNDS:
            handler = self._handler_for(event)
            self._handlers[event] = handler
            engine.subscribe(event, handler)

    def detach(self, engine) -> None:
        for event, handler in self._handlers.items():
            engine.unsubscribe(event, handler)
        self._handlers = {}
