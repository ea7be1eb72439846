"""Monotonic clock and delayed callbacks backed by threading timers."""

from __future__ import annotations

import threading
import time
from typing import Callable


class SystemClock:
    def monotonic_ms(self) -> float:
        return time.monotonic() * 1000.0

    def call_later(self, delay_ms: float, callback: Callable[[], None]) -> threading.Timer:
        timer = threading.Timer(max(delay_ms, 0.0) / 1000.0, callback)
        timer.daemon = True
        timer.start()
        return timer


def now_ms() -> int:
    return int(time.time() * 1000)
