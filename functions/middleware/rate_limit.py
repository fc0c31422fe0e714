"""Per-client sliding-window rate limiting."""

import logging
import time
from collections import deque
from typing import Deque, Dict

from fastapi import Request
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger(__name__)


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Reject a client once it exceeds ``max_requests`` within ``window_seconds``."""

    def __init__(self, app, max_requests: int = 60, window_seconds: int = 60):
        super().__init__(app)
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self.hits: Dict[str, Deque[float]] = {}
        self._last_sweep = time.monotonic()

    def _sweep(self, now: float) -> None:
        """Forget clients whose most recent hit has left the window."""
        idle = [ip for ip, window in self.hits.items() if not window or now - window[-1] >= self.window_seconds]
        for ip in idle:
            del self.hits[ip]
        self._last_sweep = now

    def admit(self, client_ip: str, now: float) -> bool:
        """Record a hit for ``client_ip`` at ``now``; False if over the limit."""
        if now - self._last_sweep >= self.window_seconds:
            self._sweep(now)

        window = self.hits.setdefault(client_ip, deque())
        while window and now - window[0] >= self.window_seconds:
            window.popleft()

        if len(window) >= self.max_requests:
            return False

        window.append(now)
        return True

    async def dispatch(self, request: Request, call_next):
        client_ip = request.client.host if request.client else "unknown"

        if not self.admit(client_ip, time.monotonic()):
            logger.warning("Rate limit exceeded for %s on %s", client_ip, request.url.path)
            return JSONResponse(
                {"error": {"status": "RESOURCE_EXHAUSTED", "message": "Rate limit exceeded"}},
                status_code=429,
                headers={"Retry-After": str(self.window_seconds)},
            )

        return await call_next(request)
