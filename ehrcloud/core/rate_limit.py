"""
In-process fixed-window rate limiting per client address.

State lives on a FixedWindowRateLimiter instance owned by the AppContext,
so each application (and each test app) gets its own counters.
"""

import time
from dataclasses import dataclass
from threading import Lock
from typing import Callable, Dict, Optional, Tuple

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from ehrcloud.core.exceptions import RateLimitedError, error_response

CLEANUP_INTERVAL_SECONDS = 60

# Probes and docs are never throttled
EXEMPT_PATHS = ("/health", "/api/v1/health", "/api/docs", "/api/redoc", "/api/openapi.json")


@dataclass
class Window:
    started_at: float
    count: int


class FixedWindowRateLimiter:
    """
    Allow at most max_requests per key inside each window of window_seconds.

    Usage:
        limiter = FixedWindowRateLimiter(window_seconds=900, max_requests=100)
        allowed, retry_after = limiter.hit("203.0.113.7")
    """

    def __init__(self, window_seconds: float, max_requests: int, clock: Callable[[], float] = time.monotonic):
        if window_seconds <= 0 or max_requests <= 0:
            raise ValueError("window_seconds and max_requests must be positive")
        self.window_seconds = window_seconds
        self.max_requests = max_requests
        self._clock = clock
        self._windows: Dict[str, Window] = {}
        self._last_cleanup = 0.0
        self._lock = Lock()

    def _cleanup(self, now: float) -> None:
        if now - self._last_cleanup < CLEANUP_INTERVAL_SECONDS:
            return
        self._last_cleanup = now
        expired = [key for key, w in self._windows.items() if now - w.started_at >= self.window_seconds]
        for key in expired:
            self._windows.pop(key, None)

    def hit(self, key: str) -> Tuple[bool, int]:
        """
        Count one request for key.

        Returns:
            (allowed, retry_after_seconds); retry_after is 0 when allowed
        """
        now = self._clock()
        with self._lock:
            self._cleanup(now)
            window = self._windows.get(key)
            if window is None or now - window.started_at >= self.window_seconds:
                window = Window(started_at=now, count=0)
                self._windows[key] = window

            if window.count < self.max_requests:
                window.count += 1
                return True, 0

            retry_after = max(1, int(window.started_at + self.window_seconds - now))
            return False, retry_after

    def remaining(self, key: str) -> int:
        with self._lock:
            window = self._windows.get(key)
            if window is None or self._clock() - window.started_at >= self.window_seconds:
                return self.max_requests
            return max(0, self.max_requests - window.count)

    def reset(self) -> None:
        with self._lock:
            self._windows.clear()


def client_key(request: Request) -> str:
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Answers 429 in the JSON envelope once a client exhausts its window."""

    async def dispatch(self, request: Request, call_next) -> Response:
        limiter: Optional[FixedWindowRateLimiter] = getattr(
            getattr(request.app.state, "context", None), "rate_limiter", None
        )
        if limiter is None or request.url.path in EXEMPT_PATHS:
            return await call_next(request)

        allowed, retry_after = limiter.hit(client_key(request))
        if not allowed:
            error = RateLimitedError()
            return error_response(
                error.status_code,
                error.message,
                headers={"Retry-After": str(retry_after)},
            )
        return await call_next(request)
