# app/shared/middleware/rate_limiting_middleware.py (async version)

"""
Middleware and helpers for request rate limiting.

All limits are kept in process memory with a sliding window; nothing is
shared between processes.
"""

import time
import logging
from typing import Callable, Dict, List, Optional, Tuple
from fastapi import Request, status
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

# Configure logger
logger = logging.getLogger(__name__)


class AsyncRateLimiter:
    """
    In-memory sliding window rate limiter.

    Keys are arbitrary strings (caller IP, client id); the limit is given
    per call so one instance can serve keys with different limits.
    """

    def __init__(self, window_time: float = 1.0, clock: Callable[[], float] = time.monotonic):
        # Structure: {key: [timestamp1, timestamp2, ...]}
        self.requests: Dict[str, List[float]] = {}
        self.window_time = window_time
        self._clock = clock

    def _clean_old_requests(self, key: str, now: float):
        """Remove requests outside the time window."""
        cutoff_time = now - self.window_time
        kept = [ts for ts in self.requests.get(key, []) if ts > cutoff_time]
        if kept:
            self.requests[key] = kept
        else:
            self.requests.pop(key, None)

    async def is_rate_limited(self, key: str, limit: int) -> Tuple[bool, Optional[int]]:
        """
        Register a hit for ``key`` unless it already reached ``limit``.

        Returns:
            Tuple (is_limited, remaining_requests)
        """
        now = self._clock()
        self._clean_old_requests(key, now)

        count = len(self.requests.get(key, []))
        if count >= limit:
            return True, 0

        self.requests.setdefault(key, []).append(now)
        return False, limit - count - 1


class AsyncRateLimitingMiddleware(BaseHTTPMiddleware):
    """
    Middleware that limits the number of requests per second by caller IP.
    """

    def __init__(self, app, requests_per_second: int = 100, limiter: Optional[AsyncRateLimiter] = None):
        super().__init__(app)
        self.requests_per_second = requests_per_second
        self.limiter = limiter or AsyncRateLimiter(window_time=1.0)

    async def dispatch(self, request: Request, call_next):
        client_ip = request.client.host if request.client else "unknown"
        path = request.url.path

        # Ignore documentation and health routes
        if path in ["/", "/docs", "/redoc", "/openapi.json", "/health"]:
            return await call_next(request)

        is_limited, remaining = await self.limiter.is_rate_limited(client_ip, self.requests_per_second)

        if is_limited:
            logger.warning(f"Rate limit exceeded for IP: {client_ip} on path: {path}")
            return JSONResponse(
                status_code=status.HTTP_429_TOO_MANY_REQUESTS,
                content={
                    "success": False,
                    "message": "Too many requests. Try again later.",
                    "error": "RATE_LIMIT_EXCEEDED",
                },
                headers={"Retry-After": "1"},
            )

        response = await call_next(request)

        if remaining is not None:
            response.headers["X-RateLimit-Remaining"] = str(remaining)

        return response
