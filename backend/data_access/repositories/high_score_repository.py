"""
High score repository backed by the kv_store table.
"""

import logging
from typing import Optional

from domain.constants import HIGH_SCORE_KEY
from .base import BaseRepository

logger = logging.getLogger(__name__)


def _parse_score(value: Optional[str], key: str) -> int:
    if value is None:
        return 0
    try:
        return max(int(value), 0)
    except (TypeError, ValueError):
        logger.warning("Ignoring unparsable high score %r under key %s", value, key)
        return 0


class HighScoreRepository(BaseRepository):
    """
    Repository for the persisted high score.

    The score is stored as text under a fixed key so the table can hold
    other settings later.
    """

    def get_high_score(self, key: str = HIGH_SCORE_KEY) -> int:
        """Return the stored high score, or 0 when nothing usable is stored."""
        with self.transaction(write=False) as cursor:
            return _parse_score(self._read_value(cursor, key), key)

    def record_score(self, score: int, key: str = HIGH_SCORE_KEY) -> int:
        """
        Store score if it beats the current high score.

        Returns:
            The high score after this call.
        """
        if score < 0:
            raise ValueError(f"score must be non-negative, got {score}")

        with self.transaction() as cursor:
            current = _parse_score(self._read_value(cursor, key), key)
            if score <= current:
                return current
            self._write_value(cursor, key, str(score))

        logger.info("New high score: %s", score)
        return score
