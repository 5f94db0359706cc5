from __future__ import annotations

import time
from typing import Callable, Optional


class BatchThrottle:
    """Keeps at least ``min_interval`` seconds between consecutive writes.

    Used by sequential batch loops; ordering comes from the loop, not from timers.
    """

    def __init__(
        self,
        min_interval: float = 0.0,
        *,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._min_interval = max(float(min_interval), 0.0)
        self._sleep = sleep
        self._clock = clock
        self._last: Optional[float] = None

    def wait(self) -> None:
        if self._min_interval <= 0:
            return
        now = self._clock()
        if self._last is not None:
            remaining = self._min_interval - (now - self._last)
            if remaining > 0:
                self._sleep(remaining)
                now = self._clock()
        self._last = now
