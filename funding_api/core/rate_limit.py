import threading
import time
from collections import deque


class SlidingWindowRateLimiter:
    """Per-client request budget over a sliding time window.

    One instance serves every request in the process. Clients that have been
    quiet for a full window are dropped on the next sweep, so the table only
    holds addresses seen within roughly the last two windows.
    """

    def __init__(self, max_requests: int, window_sec: float) -> None:
        self.max_requests = max_requests
        self.window_sec = window_sec
        self._hits: dict[str, deque[float]] = {}
        self._next_sweep = 0.0
        self._lock = threading.Lock()

    def allow(self, key: str) -> bool:
        now = time.monotonic()
        cutoff = now - self.window_sec
        with self._lock:
            if now >= self._next_sweep:
                self._evict_idle(cutoff)
                self._next_sweep = now + self.window_sec

            hits = self._hits.get(key)
            if hits is None:
                hits = self._hits[key] = deque()
            while hits and hits[0] <= cutoff:
                hits.popleft()

            if len(hits) >= self.max_requests:
                return False
            hits.append(now)
            return True

    def _evict_idle(self, cutoff: float) -> None:
        idle = [key for key, hits in self._hits.items() if not hits or hits[-1] <= cutoff]
        for key in idle:
            del self._hits[key]

    @property
    def tracked_clients(self) -> int:
        with self._lock:
            return len(self._hits)

    def reset(self) -> None:
        with self._lock:
            self._hits.clear()
            self._next_sweep = 0.0
