"""Rate limiting middleware for the RLC Lab API."""

import math
import time
from collections import deque
from typing import Callable, Deque, Dict

from fastapi import Request, Response
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware


class RateLimitMiddleware(BaseHTTPMiddleware):
    """In-memory sliding-window limiter keyed by client address.

    Each client keeps a deque of the monotonic times of its accepted requests
    inside the last window. Sweeps recompute on every slider move in the UI,
    so the budget is per minute rather than per second.
    """

    WINDOW_SECONDS = 60.0
    # Idle clients are forgotten at most this often
    SWEEP_SECONDS = 300.0

    def __init__(self, app, requests_per_minute: int = 60, exempt_paths: tuple = ("/api/health",)):
        super().__init__(app)
        self.requests_per_minute = requests_per_minute
        self.exempt_paths = exempt_paths
        self._hits: Dict[str, Deque[float]] = {}
        self._next_sweep = time.monotonic() + self.SWEEP_SECONDS

    @staticmethod
    def client_key(request: Request) -> str:
        # First hop of X-Forwarded-For when running behind a proxy
        forwarded = request.headers.get("x-forwarded-for", "")
        first_hop = forwarded.split(",", 1)[0].strip()
        if first_hop:
            return first_hop
        return request.client.host if request.client else "unknown"

    def _sweep(self, now: float) -> None:
        self._next_sweep = now + self.SWEEP_SECONDS
        horizon = now - self.WINDOW_SECONDS
        for key in [k for k, hits in self._hits.items() if not hits or hits[-1] <= horizon]:
            del self._hits[key]

    def _retry_after(self, key: str, now: float) -> int:
        """Seconds until the oldest hit of a client leaves the window, or 0 if under budget."""
        hits = self._hits.setdefault(key, deque())
        horizon = now - self.WINDOW_SECONDS
        while hits and hits[0] <= horizon:
            hits.popleft()

        if len(hits) < self.requests_per_minute:
            hits.append(now)
            return 0
        return max(1, math.ceil(hits[0] + self.WINDOW_SECONDS - now))

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        if request.url.path in self.exempt_paths:
            return await call_next(request)

        now = time.monotonic()
        if now >= self._next_sweep:
            self._sweep(now)

        wait = self._retry_after(self.client_key(request), now)
        if wait:
            # Exceptions raised here bypass FastAPI's handlers, so respond directly
            return JSONResponse(
                status_code=429,
                content={"detail": f"Rate limit of {self.requests_per_minute} requests per minute exceeded."},
                headers={"Retry-After": str(wait)},
            )

        return await call_next(request)
