# app/middleware/rate_limit.py
import threading
import time
from collections import defaultdict, deque
from typing import Callable, Deque, Dict

from fastapi import Request, status

from app.core.config import settings
from app.core.logging import logger
from app.core.responses import ApiError


class RateLimiter:
    """Sliding-window request counter keyed by client address."""

    def __init__(self, name: str, max_requests: int, window_seconds: int, clock: Callable[[], float] = time.monotonic):
        self.name = name
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self.clock = clock
        self._hits: Dict[str, Deque[float]] = defaultdict(deque)
        self._lock = threading.Lock()
        self._last_sweep = clock()

    def hit(self, key: str) -> bool:
        """Record a request; returns False when the key is over its limit."""
        now = self.clock()
        cutoff = now - self.window_seconds
        with self._lock:
            hits = self._hits[key]
            while hits and hits[0] <= cutoff:
                hits.popleft()
            if len(hits) >= self.max_requests:
                return False
            hits.append(now)
            if now - self._last_sweep >= self.window_seconds:
                self._sweep(cutoff)
                self._last_sweep = now
            return True

    def _sweep(self, cutoff: float) -> None:
        # Forget clients whose whole window has expired
        stale = [key for key, hits in self._hits.items() if not hits or hits[-1] <= cutoff]
        for key in stale:
            del self._hits[key]

    def retry_after(self, key: str) -> int:
        with self._lock:
            hits = self._hits.get(key)
            if not hits:
                return 0
            return max(int(hits[0] + self.window_seconds - self.clock()) + 1, 1)

    def reset(self) -> None:
        with self._lock:
            self._hits.clear()

    async def __call__(self, request: Request) -> None:
        if not settings.RATE_LIMIT_ENABLED:
            return
        key = request.client.host if request.client else "unknown"
        if not self.hit(key):
            logger.warning(f"Rate limit '{self.name}' exceeded for {key}")
            raise ApiError(
                status_code=status.HTTP_429_TOO_MANY_REQUESTS,
                detail="Too many requests, please try again later",
                error="RATE_LIMIT_EXCEEDED",
                headers={"Retry-After": str(self.retry_after(key))},
            )


api_rate_limit = RateLimiter(
    "api", settings.RATE_LIMIT_MAX_REQUESTS, settings.RATE_LIMIT_WINDOW_SECONDS
)
auth_rate_limit = RateLimiter(
    "auth", settings.AUTH_RATE_LIMIT_MAX_REQUESTS, settings.RATE_LIMIT_WINDOW_SECONDS
)
