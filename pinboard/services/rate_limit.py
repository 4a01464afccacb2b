"""In-memory sliding-window throttling for the login and register forms."""
from __future__ import annotations

import threading
import time
from collections import deque
from typing import Callable

from fastapi import HTTPException, Request, status

from ..config import get_settings

AUTH_RATE_LIMIT_MESSAGE = "Too many login/register attempts. Please try again later."


class SlidingWindowRateLimiter:
    """Allow at most ``max_requests`` hits per key inside a rolling ``window`` (seconds)."""

    def __init__(self, max_requests: int, window: float, *, clock: Callable[[], float] = time.monotonic) -> None:
        self.max_requests = max_requests
        self.window = window
        self._clock = clock
        self._hits: dict[str, deque[float]] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._hits)

    def _evict_expired(self, now: float) -> None:
        # Every deque is non-empty; its newest hit decides whether the key is still live.
        stale = [key for key, hits in self._hits.items() if now - hits[-1] > self.window]
        for key in stale:
            del self._hits[key]

    def hit(self, key: str) -> int | None:
        """Record a hit for ``key``; return seconds to wait when the limit is exceeded."""

        now = self._clock()
        with self._lock:
            self._evict_expired(now)
            hits = self._hits.setdefault(key, deque())
            while hits and now - hits[0] > self.window:
                hits.popleft()
            if len(hits) >= self.max_requests:
                return max(1, int(self.window - (now - hits[0])))
            hits.append(now)
            return None

    def reset(self) -> None:
        with self._lock:
            self._hits.clear()


_settings = get_settings()
auth_rate_limiter = SlidingWindowRateLimiter(
    _settings.auth_rate_limit_attempts,
    _settings.auth_rate_limit_window_seconds,
)


def client_key(request: Request) -> str:
    """Address the throttle counts against.

    ``X-Forwarded-For`` is only read when ``TRUST_PROXY_HEADERS`` is enabled,
    i.e. when the app sits behind a proxy that overwrites the header.
    """

    if get_settings().trust_proxy_headers:
        forwarded = request.headers.get("x-forwarded-for", "").split(",")[0].strip()
        if forwarded:
            return forwarded
    return request.client.host if request.client else "unknown"


async def enforce_auth_rate_limit(request: Request) -> None:
    """FastAPI dependency rejecting callers that exceed the auth attempt limit."""

    retry_after = auth_rate_limiter.hit(client_key(request))
    if retry_after is not None:
        raise HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail=AUTH_RATE_LIMIT_MESSAGE,
            headers={"Retry-After": str(retry_after)},
        )


__all__ = [
    "SlidingWindowRateLimiter",
    "auth_rate_limiter",
    "client_key",
    "enforce_auth_rate_limit",
    "AUTH_RATE_LIMIT_MESSAGE",
]
