import threading
import time
from typing import Callable, Dict, Tuple


class RateLimiter:
    """Fixed-window request counter per client key, held in process memory.

    Counts are per worker process; they reset on restart.
    """

    def __init__(self, max_requests: int, window_seconds: float, clock: Callable[[], float] = time.monotonic):
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._clock = clock
        self._windows: Dict[str, Tuple[float, int]] = {}
        self._lock = threading.Lock()

    def allow(self, key: str) -> bool:
        now = self._clock()
        with self._lock:
            self._windows = {k: w for k, w in self._windows.items() if w[0] > now}
            reset_at, count = self._windows.get(key, (0.0, 0))
            if reset_at <= now:
                self._windows[key] = (now + self.window_seconds, 1)
                return True
            if count >= self.max_requests:
                return False
            self._windows[key] = (reset_at, count + 1)
            return True
