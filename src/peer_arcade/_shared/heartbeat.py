# Area: Shared
"""
peer_arcade._shared.heartbeat — Interval tracking
=================================================

Tracks when periodic work (registry heartbeats, registry cleanup) is
next due, using a monotonic clock.
"""

from __future__ import annotations

import logging
import time
from typing import Callable, Optional

logger = logging.getLogger("peer_arcade.heartbeat")


class IntervalTracker:
    """
    Fires at most once per ``interval_seconds``.

    The first call to ``due()`` is always True so the room registers
    itself as soon as it connects.
    """

    def __init__(
        self,
        interval_seconds: float,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.interval_seconds = interval_seconds
        self._clock = clock
        self._last: Optional[float] = None

    def due(self) -> bool:
        if self._last is None:
            return True
        return self._clock() - self._last >= self.interval_seconds

    def mark(self) -> None:
        self._last = self._clock()
        logger.debug("Interval marked (next in %.1fs)", self.interval_seconds)

    def seconds_until_due(self) -> float:
        if self._last is None:
            return 0.0
        return max(0.0, self.interval_seconds - (self._clock() - self._last))

    def reset(self) -> None:
        self._last = None
