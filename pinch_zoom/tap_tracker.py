"""Double-tap detection over cumulative press durations."""
from __future__ import annotations

import logging

logger = logging.getLogger(__name__)

MAX_DOUBLE_TAP_DURATION_MS = 200


class TapTracker:
    """Counts press/release cycles and reports a completed double tap.

    The window is the sum of the two down-to-up hold times, not the gap
    between taps. A slow first hold can exhaust the window on its own.
    Timestamps are host-supplied milliseconds.
    """

    def __init__(self, max_duration_ms: float = MAX_DOUBLE_TAP_DURATION_MS) -> None:
        self._max_duration_ms = max_duration_ms
        self._pending_count = 0
        self._window_start: float | None = None
        self._accumulated_duration = 0.0

    @property
    def max_duration_ms(self) -> float:
        return self._max_duration_ms

    @property
    def pending_count(self) -> int:
        return self._pending_count

    @property
    def accumulated_duration(self) -> float:
        return self._accumulated_duration

    def reset(self) -> None:
        self._pending_count = 0
        self._window_start = None
        self._accumulated_duration = 0.0

    def register_pointer_down(self, timestamp: float) -> None:
        self._window_start = timestamp
        self._pending_count += 1

    def register_pointer_up(self, timestamp: float) -> bool:
        if self._window_start is not None:
            self._accumulated_duration += timestamp - self._window_start
        if self._pending_count < 2:
            return False

        complete = self._accumulated_duration <= self._max_duration_ms
        logger.debug(
            "Tap pair evaluated: duration=%.1fms complete=%s",
            self._accumulated_duration,
            complete,
        )
        self.reset()
        return complete
