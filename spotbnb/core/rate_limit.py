from __future__ import annotations

import logging
import time
from collections import deque
from threading import Lock

from fastapi import Depends, Request

from spotbnb.core.config import settings
from spotbnb.core.errors import TooManyRequests

logger = logging.getLogger(__name__)


class MemoryRateLimiter:
    """Sliding-window attempt counter kept in process memory.

    Counts are per worker, so a multi-process deployment allows ``limit``
    attempts per worker rather than per client.
    """

    def __init__(self, *, max_keys: int = 20_000) -> None:
        self._max_keys = max_keys
        self._lock = Lock()
        self._attempts: dict[str, deque[float]] = {}

    def hit(self, key: str, *, limit: int, window_seconds: int) -> int:
        """Record an attempt; return 0 if allowed, else seconds until the next slot."""
        now = time.monotonic()
        with self._lock:
            attempts = self._attempts.setdefault(key, deque())
            while attempts and attempts[0] <= now - window_seconds:
                attempts.popleft()

            if len(attempts) >= limit:
                return max(1, int(window_seconds - (now - attempts[0])) + 1)

            attempts.append(now)
            if len(self._attempts) > self._max_keys:
                self._drop_expired(now, window_seconds)
            return 0

    def clear(self, key: str) -> None:
        with self._lock:
            self._attempts.pop(key, None)

    def reset(self) -> None:
        with self._lock:
            self._attempts.clear()

    def _drop_expired(self, now: float, window_seconds: int) -> None:
        cutoff = now - window_seconds
        for key in [k for k, a in self._attempts.items() if not a or a[-1] <= cutoff]:
            del self._attempts[key]


limiter = MemoryRateLimiter()


def client_ip(request: Request) -> str:
    xff = request.headers.get("x-forwarded-for")
    if xff:
        return xff.split(",")[0].strip() or "unknown"
    if request.client:
        return request.client.host
    return "unknown"


def rate_limit(scope: str):
    """Dependency throttling ``scope`` per client address.

    Limits are read from settings on every request. The dependency value is the
    bucket key, so a handler can ``limiter.clear()`` it once an attempt succeeds.
    """

    def _dep(request: Request) -> str:
        key = f"{scope}:{client_ip(request)}"
        retry_after = limiter.hit(
            key,
            limit=settings.login_rate_limit,
            window_seconds=settings.login_rate_window_seconds,
        )
        if retry_after:
            logger.warning("Throttled %s for %s (retry in %ss)", scope, key.partition(":")[2], retry_after)
            raise TooManyRequests(retry_after)
        return key

    return Depends(_dep)
