from __future__ import annotations

import threading
import time
from typing import Dict, Tuple

from fastapi import Request


class RateLimitExceeded(Exception):
    """Raised when a key goes over its allowance inside the current window."""

    def __init__(self, key: str, retry_after: float):
        super().__init__(f"rate limit exceeded for {key}")
        self.key = key
        self.retry_after = retry_after


class RateLimiter:
    """Fixed-window counter per key."""

    def __init__(self) -> None:
        self._hits: Dict[str, Tuple[int, float]] = {}
        self._lock = threading.Lock()

    def check(self, key: str, limit: int, window_seconds: int) -> None:
        now = time.time()
        with self._lock:
            count, reset = self._hits.get(key, (0, now + window_seconds))
            if now > reset:
                count = 0
                reset = now + window_seconds
            count += 1
            self._hits[key] = (count, reset)
            if limit > 0 and count > limit:
                raise RateLimitExceeded(key, reset - now)


def client_ip(request: Request) -> str:
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    if request.client and request.client.host:
        return request.client.host
    return "unknown"
