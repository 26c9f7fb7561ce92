import threading
import time
from collections import defaultdict, deque
from typing import Deque, Dict

from ...application.ports.rate_limiter import RateLimiter


class InMemoryRateLimiter(RateLimiter):
    """Sliding window per key. Process-local, so each worker counts separately."""

    def __init__(self) -> None:
        self._store: Dict[str, Deque[float]] = defaultdict(deque)
        self._lock = threading.Lock()

    def allow(self, key: str, max_requests: int, window_seconds: int) -> bool:
        now = time.time()
        window_start = now - window_seconds
        with self._lock:
            times = self._store[key]
            # prune
            while times and times[0] <= window_start:
                times.popleft()
            if len(times) >= max_requests:
                return False
            times.append(now)
            return True
