"""
Time sources for unlock gating
"""

import threading
import time
from typing import Protocol

DAY_SECONDS = 86400


class Clock(Protocol):
    def now(self) -> int: ...


class SystemClock:
    """Wall clock in epoch seconds that never reports an earlier value than before"""

    def __init__(self):
        self._last = 0
        self._lock = threading.Lock()

    def now(self) -> int:
        with self._lock:
            self._last = max(self._last, int(time.time()))
            return self._last


class ManualClock:
    """Clock advanced explicitly, for simulations and tests"""

    def __init__(self, start: int = 1_700_000_000):
        if start < 0:
            raise ValueError("Clock start must be non-negative")
        self._now = start

    def now(self) -> int:
        return self._now

    def advance(self, seconds: int) -> int:
        """Move time forward; rewinding is rejected"""
        if seconds < 0:
            raise ValueError("Clock cannot move backwards")
        self._now += seconds
        return self._now

    def advance_days(self, days: int, day_seconds: int = DAY_SECONDS) -> int:
        return self.advance(days * day_seconds)
