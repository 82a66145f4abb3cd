# api/ratelimit.py
"""
Per-caller admission counter.

Every admitted request counts against its caller for `window_seconds` and
then expires on its own. This approximates an hourly quota (it is not a
fixed calendar window); expiry is tracked as timestamps instead of deferred
callbacks, so a burst never leaves timers behind.
"""

import threading
import time
from collections import deque
from typing import Callable, Deque, Dict

MAX_REQUESTS_PER_WINDOW = 100
WINDOW_SECONDS = 3600


class RateLimiter:
    def __init__(
        self,
        limit: int = MAX_REQUESTS_PER_WINDOW,
        window_seconds: float = WINDOW_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.limit = limit
        self.window_seconds = window_seconds
        self._clock = clock
        self._expiries: Dict[str, Deque[float]] = {}
        self._next_sweep = 0.0
        # Flask serves requests on worker threads
        self._lock = threading.Lock()

    def _prune(self, caller_id: str, now: float) -> Deque[float]:
        expiries = self._expiries.get(caller_id)
        if expiries is None:
            return deque()
        while expiries and expiries[0] <= now:
            expiries.popleft()
        if not expiries:
            del self._expiries[caller_id]
        return expiries

    def _sweep(self, now: float) -> None:
        # drop callers whose admissions all expired; runs at most once per window
        for caller_id in [c for c, e in self._expiries.items() if e[-1] <= now]:
            del self._expiries[caller_id]
        self._next_sweep = now + self.window_seconds

    def hit(self, caller_id: str) -> bool:
        """
        Admit one request for `caller_id`. Returns False, without counting the
        request, when the caller already used up the window.
        """
        with self._lock:
            now = self._clock()
            if now >= self._next_sweep:
                self._sweep(now)
            active = self._prune(caller_id, now)
            if len(active) >= self.limit:
                return False
            self._expiries.setdefault(caller_id, active).append(now + self.window_seconds)
            return True

    def count(self, caller_id: str) -> int:
        with self._lock:
            return len(self._prune(caller_id, self._clock()))

    def reset(self) -> None:
        with self._lock:
            self._expiries.clear()

    def __len__(self) -> int:
        """Number of callers currently tracked."""
        with self._lock:
            return len(self._expiries)
