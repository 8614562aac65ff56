"""Per-IP throttling for the login and register endpoints (fixed window, in memory)."""
from __future__ import annotations

import threading
import time
from typing import Dict, Tuple

from fastapi import HTTPException, Request


class _AttemptCounter:
    def __init__(self) -> None:
        self._attempts: Dict[str, Tuple[int, float]] = {}
        self._lock = threading.Lock()

    def check(self, key: str, limit: int, window_seconds: int) -> None:
        now = time.time()
        with self._lock:
            count, reset = self._attempts.get(key, (0, now + window_seconds))
            if now > reset:
                count = 0
                reset = now + window_seconds
            count += 1
            self._attempts[key] = (count, reset)
            if count > limit:
                raise HTTPException(429, "Too many attempts. Please try again in a moment.")

    def reset(self) -> None:
        with self._lock:
            self._attempts.clear()


_counter = _AttemptCounter()


def _client_ip(request: Request) -> str:
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    if request.client and request.client.host:
        return request.client.host
    return "unknown"


def rate_limit_ip(request: Request, scope: str, *, limit: int, window_seconds: int) -> None:
    key = f"{scope}:{_client_ip(request)}"
    _counter.check(key, limit, window_seconds)


def reset_limits() -> None:
    _counter.reset()
