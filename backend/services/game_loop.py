"""
Timer that drives the simulation engine.

The loop runs on a background thread and calls engine.tick() once per
interval while the engine is RUNNING. The interval is read from the engine
before every wait, so a speed change applies to the next scheduled tick.
"""

import logging
import threading
from typing import Optional

from domain.constants import RUNNING

logger = logging.getLogger(__name__)

# How often (seconds) an idle loop re-checks the lifecycle state
IDLE_POLL_SECONDS = 0.05


class GameLoop:
    """
    Background tick scheduler for one SnakeEngine.

    Only this loop calls tick(), so ticks never overlap. Calls from other
    threads (direction changes, pause, reset) are serialized by the engine
    lock.
    """

    def __init__(self, engine, idle_poll_seconds: float = IDLE_POLL_SECONDS):
        self.engine = engine
        self.idle_poll_seconds = idle_poll_seconds
        self._stop = threading.Event()
        self._wake = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def next_interval(self) -> float:
        """Seconds to wait before the next scheduling decision."""
        state = self.engine.get_current_state()
        if state.lifecycle_state == RUNNING:
            return state.speed / 1000.0
        return self.idle_poll_seconds

    def step(self) -> float:
        """
        Make one scheduling decision: tick if the engine is running.

        Returns:
            Seconds until the next step.
        """
        if self.engine.get_current_state().lifecycle_state == RUNNING:
            self.engine.tick()
        return self.next_interval()

    def wake(self) -> None:
        """
        Restart the current wait, so a session that just started or resumed
        waits one full interval before its first tick.
        """
        self._wake.set()

    def _run(self) -> None:
        logger.info("Game loop started")
        interval = self.next_interval()
        while not self._stop.is_set():
            if self._wake.wait(interval):
                self._wake.clear()
                interval = self.next_interval()
                continue
            if self._stop.is_set():
                break
            try:
                interval = self.step()
            except Exception:
                logger.exception("Tick failed; retrying on the next interval")
                interval = self.next_interval()
        logger.info("Game loop stopped")

    def start(self) -> None:
        if self.running:
            return
        self._stop.clear()
        self._wake.clear()
        self._thread = threading.Thread(target=self._run, name="snake-game-loop", daemon=True)
        self._thread.start()

    def stop(self, timeout: Optional[float] = 1.0) -> None:
        self._stop.set()
        self._wake.set()
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None
