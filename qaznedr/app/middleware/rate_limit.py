"""Per-client sliding-window rate limiting for the auth endpoints."""

from __future__ import annotations

import time
from collections import defaultdict, deque

from fastapi import HTTPException, Request, status


class InMemoryRateLimiter:
    """Sliding-window limiter keyed by an arbitrary string.

    Instances are also FastAPI dependencies keyed by client IP::

        _limiter = InMemoryRateLimiter(window_seconds=60, max_attempts=5)

        @router.post("/register", dependencies=[Depends(_limiter)])

    Process-local; replicas do not share counters.
    """

    def __init__(self, window_seconds: int = 60, max_attempts: int = 5) -> None:
        self._window = window_seconds
        self._max = max_attempts
        self._hits: dict[str, deque[float]] = defaultdict(deque)

    def check(self, key: str) -> None:
        """Raise HTTP 429 once *key* has used up its attempts in the window."""
        now = time.monotonic()
        hits = self._hits[key]
        while hits and now - hits[0] >= self._window:
            hits.popleft()
        if len(hits) >= self._max:
            retry_after = int(self._window - (now - hits[0])) + 1
            raise HTTPException(
                status_code=status.HTTP_429_TOO_MANY_REQUESTS,
                detail=f"Too many attempts. Try again in {retry_after} seconds.",
                headers={"Retry-After": str(retry_after)},
            )
        hits.append(now)

    def reset(self) -> None:
        self._hits.clear()

    def __call__(self, request: Request) -> None:
        self.check(request.client.host if request.client else "unknown")
