"""
Bloglist — Rate Limiting Middleware
====================================

What:  Per-IP sliding window rate limiter.
How:   SlidingWindowLimiter keeps the request timestamps of each client in
       memory; a client with `limit` requests inside the last `window`
       seconds is answered with 429 and a Retry-After header.

The state lives in the process, so the limit is per worker.
"""

import logging
import time
from collections import defaultdict
from typing import Callable, Dict, List, Optional

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from bloglist.config import settings
from bloglist.exceptions import RateLimitExceededError
from bloglist.middleware.request_id import request_id_var

logger = logging.getLogger(__name__)


class SlidingWindowLimiter:
    """
    Counts hits per key over a sliding window.

    hit() records a request and raises RateLimitExceededError when the key is
    already at the limit (the rejected request is not recorded).
    """

    CLEANUP_EVERY = 1000

    def __init__(
        self,
        limit: int,
        window: int,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.limit = limit
        self.window = window
        self._clock = clock
        self._hits: Dict[str, List[float]] = defaultdict(list)
        self._since_cleanup = 0

    def hit(self, key: str) -> None:
        now = self._clock()
        window_start = now - self.window
        recent = [ts for ts in self._hits[key] if ts > window_start]

        if len(recent) >= self.limit:
            self._hits[key] = recent
            retry_after = int(recent[0] + self.window - now) + 1
            raise RateLimitExceededError(retry_after=retry_after, context={"client": key})

        recent.append(now)
        self._hits[key] = recent

        self._since_cleanup += 1
        if self._since_cleanup >= self.CLEANUP_EVERY:
            self._since_cleanup = 0
            self._cleanup(window_start)

    def _cleanup(self, window_start: float) -> None:
        """Drop keys with no hits inside the window."""
        inactive = [
            key for key, stamps in self._hits.items()
            if not stamps or stamps[-1] <= window_start
        ]
        for key in inactive:
            del self._hits[key]
        if inactive:
            logger.debug("Cleaned up %d inactive rate-limit entries", len(inactive))


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Apply a SlidingWindowLimiter keyed on client IP to every request."""

    EXCLUDED_PATHS = {"/health", "/docs", "/openapi.json", "/redoc"}

    def __init__(self, app, limiter: Optional[SlidingWindowLimiter] = None, **kwargs):
        super().__init__(app, **kwargs)
        self.limiter = limiter or SlidingWindowLimiter(
            limit=settings.rate_limit_requests,
            window=settings.rate_limit_window,
        )

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.url.path in self.EXCLUDED_PATHS:
            return await call_next(request)

        client_ip = request.client.host if request.client else "unknown"
        try:
            self.limiter.hit(client_ip)
        except RateLimitExceededError as exc:
            logger.warning(
                "Rate limit exceeded for IP %s: %d requests in %ds window",
                client_ip, self.limiter.limit, self.limiter.window,
            )
            # Raised outside the routing layer, so the app's exception
            # handlers do not see it; answer directly
            return JSONResponse(
                status_code=429,
                content={
                    "error": "rate_limit_exceeded",
                    "message": exc.message,
                    "details": {"retry_after": exc.retry_after},
                    "request_id": request_id_var.get(""),
                },
                headers={"Retry-After": str(exc.retry_after)},
            )

        return await call_next(request)
