import logging
import math
import time
from threading import Lock
from typing import Callable, Dict, Optional, Tuple

from fastapi import Request

from signup_auth_svc.errors import AuthFailure, AuthHTTPException, FailureKind

logger = logging.getLogger(__name__)

GENERAL_MESSAGE = "Too many requests from this IP, please try again later"
AUTH_MESSAGE = "Too many authentication attempts, please try again later"
SIGNUP_MESSAGE = "Too many signup attempts, please try again later"


class RateLimiter:
    """
    Fixed-window request counter keyed by client IP, kept in process memory.
    """

    def __init__(
        self,
        max_requests: int,
        window_seconds: int,
        message: str,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.max_requests = max(1, int(max_requests))
        self.window_seconds = max(1, int(window_seconds))
        self.message = message
        self._clock = clock
        self._lock = Lock()
        self._windows: Dict[str, Tuple[float, int]] = {}
        self._last_sweep = clock()

    def hit(self, key: str) -> Optional[int]:
        """
        Count one request for key. Returns the seconds until the window resets when the
        request is over the limit, otherwise None.
        """
        now = self._clock()
        with self._lock:
            if now - self._last_sweep >= self.window_seconds:
                self._sweep(now)
            started, count = self._windows.get(key, (now, 0))
            if now - started >= self.window_seconds:
                started, count = now, 0
            count += 1
            self._windows[key] = (started, count)
        if count > self.max_requests:
            return max(1, math.ceil(started + self.window_seconds - now))
        return None

    def _sweep(self, now: float) -> None:
        # Caller holds the lock. Runs at most once per window.
        expired = [key for key, (started, _) in self._windows.items() if now - started >= self.window_seconds]
        for key in expired:
            del self._windows[key]
        self._last_sweep = now

    def __len__(self) -> int:
        with self._lock:
            return len(self._windows)

    async def __call__(self, request: Request) -> None:
        key = request.client.host if request.client else "unknown"
        retry_after = self.hit(key)
        if retry_after is not None:
            logger.warning("Rate limit exceeded for %s on %s", key, request.url.path)
            raise AuthHTTPException(
                AuthFailure(FailureKind.RATE_LIMITED, self.message),
                headers={"Retry-After": str(retry_after)},
            )


def default_limiters() -> Dict[str, RateLimiter]:
    return {
        "general": RateLimiter(100, 15 * 60, GENERAL_MESSAGE),
        "auth": RateLimiter(5, 15 * 60, AUTH_MESSAGE),
        "signup": RateLimiter(3, 60 * 60, SIGNUP_MESSAGE),
    }


def rate_limit(name: str):
    """
    Build a FastAPI dependency applying the app's limiter registered under name.

    Does nothing when the app has no limiter of that name (rate limiting disabled).
    """

    async def dependency(request: Request) -> None:
        limiter = getattr(request.app.state, "rate_limiters", {}).get(name)
        if limiter is not None:
            await limiter(request)

    return dependency
