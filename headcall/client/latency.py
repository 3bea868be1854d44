# Role: Consumer-side latency telemetry (rolling average over recent calls). Lives with the caller, not in
# the processing core, which keeps no state between requests.

from __future__ import annotations

import threading
from collections import deque
from typing import Deque, Optional


class LatencyTracker:
    def __init__(self, window: int = 20) -> None:
        if window <= 0:
            raise ValueError("window must be > 0")
        self._samples: Deque[float] = deque(maxlen=window)
        self._lock = threading.Lock()

    def record(self, ms: Optional[float]) -> None:
        if ms is None:
            return
        with self._lock:
            self._samples.append(float(ms))

    @property
    def count(self) -> int:
        with self._lock:
            return len(self._samples)

    @property
    def average_ms(self) -> Optional[float]:
        with self._lock:
            if not self._samples:
                return None
            return sum(self._samples) / len(self._samples)
