"""
Translate raw input events into direction requests.

Keyboard keys use the browser KeyboardEvent.key names. Swipes are given as
the (dx, dy) vector between touch start and touch end in screen pixels,
with y growing downwards.
"""

import math
from typing import Optional

from domain.constants import UP, DOWN, LEFT, RIGHT

KEY_DIRECTIONS = {
    "ArrowUp": UP,
    "ArrowDown": DOWN,
    "ArrowLeft": LEFT,
    "ArrowRight": RIGHT,
    "w": UP,
    "s": DOWN,
    "a": LEFT,
    "d": RIGHT,
}

BUTTON_DIRECTIONS = {
    "up": UP,
    "down": DOWN,
    "left": LEFT,
    "right": RIGHT,
}


def direction_for_key(key: str) -> Optional[str]:
    """Return the direction bound to a key, or None for unbound keys."""
    if key in KEY_DIRECTIONS:
        return KEY_DIRECTIONS[key]
    return KEY_DIRECTIONS.get(key.lower()) if len(key) == 1 else None


def direction_for_swipe(dx: float, dy: float) -> Optional[str]:
    """
    Return the direction of a swipe along its dominant axis.

    Ties go to the vertical axis. A swipe with no movement, or with a
    non-finite component, maps to None.
    """
    if not (math.isfinite(dx) and math.isfinite(dy)):
        return None
    if dx == 0 and dy == 0:
        return None
    if abs(dx) > abs(dy):
        return RIGHT if dx > 0 else LEFT
    return DOWN if dy > 0 else UP


def direction_for_button(button: str) -> Optional[str]:
    """Return the direction for an on-screen arrow button name."""
    return BUTTON_DIRECTIONS.get(button.strip().lower())
