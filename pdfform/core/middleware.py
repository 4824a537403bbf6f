## pdfform/core/middleware.py

import threading
import time
from typing import Callable, Optional, Tuple

from cachetools import TTLCache
from fastapi import Request
from fastapi.responses import PlainTextResponse
from starlette.middleware.base import BaseHTTPMiddleware

from pdfform.utils.logger import get_logger

logger = get_logger(__name__)

RATE_LIMIT_MESSAGE = "Too many requests from this IP, please try again later."

SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "SAMEORIGIN",
    "Referrer-Policy": "no-referrer",
    "X-DNS-Prefetch-Control": "off",
    "Cross-Origin-Resource-Policy": "same-origin",
}


class FixedWindowRateLimiter:
    """
    Counts requests per client in fixed windows of `window_seconds`.
    Counters expire with their window.
    """

    def __init__(
        self,
        max_requests: int = 100,
        window_seconds: int = 900,
        max_clients: int = 10000,
        clock: Callable[[], float] = time.time,
    ):
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self.clock = clock
        self._counters: TTLCache = TTLCache(maxsize=max_clients, ttl=window_seconds)
        self._lock = threading.Lock()

    def hit(self, client_key: str) -> Tuple[bool, int, int]:
        """
        Record one request.

        Returns:
            (allowed, remaining requests in the window, seconds until the window resets)
        """
        now = self.clock()
        window = int(now // self.window_seconds)
        reset_in = int((window + 1) * self.window_seconds - now)

        with self._lock:
            count = self._counters.get((client_key, window), 0) + 1
            self._counters[(client_key, window)] = count

        return count <= self.max_requests, max(self.max_requests - count, 0), reset_in

    def reset(self) -> None:
        with self._lock:
            self._counters.clear()


class RateLimitMiddleware(BaseHTTPMiddleware):
    """
    Rejects clients over the request limit with a plain-text 429
    """

    def __init__(self, app, limiter: FixedWindowRateLimiter, enabled: Optional[Callable[[], bool]] = None):
        super().__init__(app)
        self.limiter = limiter
        self.enabled = enabled or (lambda: True)

    async def dispatch(self, request: Request, call_next):
        if not self.enabled():
            return await call_next(request)

        client_key = request.client.host if request.client else "anonymous"
        allowed, remaining, reset_in = self.limiter.hit(client_key)
        headers = {
            "RateLimit-Limit": str(self.limiter.max_requests),
            "RateLimit-Remaining": str(remaining),
            "RateLimit-Reset": str(reset_in),
        }

        if not allowed:
            logger.warning("Rate limit exceeded", client_host=client_key, path=request.url.path)
            return PlainTextResponse(RATE_LIMIT_MESSAGE, status_code=429, headers=headers)

        response = await call_next(request)
        response.headers.update(headers)
        return response


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """
    Adds conservative security headers to every response
    """

    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)
        for header, value in SECURITY_HEADERS.items():
            response.headers.setdefault(header, value)
        return response
