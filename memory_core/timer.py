from __future__ import annotations

import time
from typing import Callable, Optional


class Stopwatch:
    """Elapsed-time accumulator. The clock is injectable so tests can drive time by hand."""

    def __init__(self, clock: Optional[Callable[[], float]] = None) -> None:
        self._clock = clock or time.monotonic
        self._started_at: Optional[float] = None
        self._accumulated = 0.0

    def restart(self) -> None:
        self._accumulated = 0.0
        self._started_at = self._clock()

    def stop(self) -> None:
        if self._started_at is None:
            return
        self._accumulated += self._clock() - self._started_at
        self._started_at = None

    def elapsed(self) -> float:
        """Seconds accumulated so far; frozen once stopped."""
        if self._started_at is None:
            return self._accumulated
        return self._accumulated + (self._clock() - self._started_at)
