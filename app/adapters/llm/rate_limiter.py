"""Rate limiting for LLM API calls.

Sliding window rate limiter shared by all calls made through one adapter.
"""

import asyncio
import time
from typing import List


class RateLimiter:
    """Sliding window rate limiter for API calls.

    Tracks request timestamps in a window and delays new requests when the
    limit is reached.
    """

    def __init__(self, requests_per_minute: int = 50, window_seconds: float = 60.0):
        """Initialize rate limiter.

        Args:
            requests_per_minute: Maximum requests allowed per window
            window_seconds: Length of the sliding window
        """
        if requests_per_minute < 1:
            raise ValueError("requests_per_minute must be at least 1")
        self.requests_per_minute = requests_per_minute
        self.window_seconds = window_seconds
        self._requests: List[float] = []
        self._lock = asyncio.Lock()

    def _prune(self, now: float) -> None:
        window_start = now - self.window_seconds
        self._requests = [r for r in self._requests if r > window_start]

    async def acquire(self) -> None:
        """Wait until a request slot is free, then take it."""
        async with self._lock:
            now = time.monotonic()
            self._prune(now)

            if len(self._requests) >= self.requests_per_minute:
                sleep_time = self._requests[0] + self.window_seconds - now
                if sleep_time > 0:
                    await asyncio.sleep(sleep_time)
                self._prune(time.monotonic())

            self._requests.append(time.monotonic())
