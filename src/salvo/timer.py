"""Countdown: the pausable per-turn shot clock.

The countdown is driven by wall-clock time elapsed between calls to
:meth:`Countdown.update`, so it only advances as fast as the frame loop ticks
it. The clock function is injectable so tests can step time by hand.
"""

from __future__ import annotations

import logging
import math
import time
from typing import Callable

from .config import TURN_SECONDS

logger = logging.getLogger(__name__)


class Countdown:
    def __init__(self, seconds: float = TURN_SECONDS, clock: Callable[[], float] = time.monotonic):
        self.initial = seconds
        self.remaining = seconds
        self.running = False
        self._clock = clock
        self._last = clock()

    def start(self, seconds: float | None = None) -> None:
        """Restart from *seconds* (default: the configured duration) and run."""
        if seconds is not None:
            self.initial = seconds
        self.remaining = self.initial
        self.running = True
        self._last = self._clock()

    def update(self) -> float:
        """Advance by the time elapsed since the previous update; returns what remains."""
        if not self.running:
            return self.remaining
        now = self._clock()
        self.remaining = max(0.0, self.remaining - (now - self._last))
        self._last = now
        return self.remaining

    def pause(self) -> None:
        self.update()
        self.running = False

    def resume(self) -> None:
        """Continue counting from the current remaining time (no-op once expired)."""
        if self.remaining <= 0:
            return
        self.running = True
        self._last = self._clock()

    def reset(self, seconds: float | None = None) -> None:
        """Set the remaining time without starting the countdown."""
        self.remaining = self.initial if seconds is None else seconds
        self._last = self._clock()
        logger.debug("Countdown reset to %.1fs", self.remaining)

    def is_finished(self) -> bool:
        return self.remaining <= 0

    def seconds_left(self) -> int:
        """Whole seconds left, rounded up as shown to players."""
        return math.ceil(self.remaining)
