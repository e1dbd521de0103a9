"""Millisecond clocks used to stamp cache entries.

SystemClock follows the wall clock but never steps backwards; ManualClock is
driven by hand so entry ages can be controlled exactly.
"""

from __future__ import annotations

import threading
import time


class SystemClock:
    def __init__(self) -> None:
        self._last = 0
        self._lock = threading.Lock()

    def now_ms(self) -> int:
        now = time.time_ns() // 1_000_000
        # Clamp so a wall-clock step back cannot reorder timestamps
        with self._lock:
            if now < self._last:
                return self._last
            self._last = now
            return now


class ManualClock:
    def __init__(self, start_ms: int = 0) -> None:
        self._now = int(start_ms)

    def now_ms(self) -> int:
        return self._now

    def advance(self, ms: int) -> int:
        if ms < 0:
            raise ValueError("ManualClock cannot move backwards")
        self._now += int(ms)
        return self._now

    def set(self, now_ms: int) -> None:
        if now_ms < self._now:
            raise ValueError("ManualClock cannot move backwards")
        self._now = int(now_ms)
