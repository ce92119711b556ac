"""
Roster Backend — Rate Limiting Middleware
==========================================

What:  Per-IP sliding window rate limiter with two buckets.
How:   Each (bucket, IP) keeps the timestamps of its requests inside the
       window; once the count reaches the limit the request is answered
       with 429 and a Retry-After header.

Buckets:
    auth     POST /api/auth/login, /register, /password-reset
             (auth_rate_limit_requests per auth_rate_limit_window)
             Slows down password guessing and reset-token guessing.
    general  every other API path
             (rate_limit_requests per rate_limit_window)

State is in process memory: correct for a single worker. Multi-worker
deployments need a shared store.
"""

import logging
import time
from collections import defaultdict
from typing import Dict, List, Optional, Tuple

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from roster.config import settings
from roster.exceptions import RateLimitExceededError

logger = logging.getLogger(__name__)

AUTH_PATHS = {"/api/auth/login", "/api/auth/register", "/api/auth/password-reset"}
EXCLUDED_PATHS = {"/health", "/docs", "/openapi.json", "/redoc"}

CLEANUP_EVERY = 1000


def bucket_for(path: str) -> Optional[Tuple[str, int, int]]:
    """(bucket name, limit, window seconds) for a path, or None if not limited."""
    if path in EXCLUDED_PATHS:
        return None
    if path in AUTH_PATHS:
        return "auth", settings.auth_rate_limit_requests, settings.auth_rate_limit_window
    return "general", settings.rate_limit_requests, settings.rate_limit_window


class RateLimitMiddleware(BaseHTTPMiddleware):

    def __init__(self, app, **kwargs):
        super().__init__(app, **kwargs)
        self._requests: Dict[Tuple[str, str], List[float]] = defaultdict(list)
        self._seen = 0

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        bucket = bucket_for(request.url.path)
        if bucket is None:
            return await call_next(request)

        name, limit, window = bucket
        client_ip = request.client.host if request.client else "unknown"
        key = (name, client_ip)

        now = time.time()
        window_start = now - window
        self._requests[key] = [ts for ts in self._requests[key] if ts > window_start]

        if len(self._requests[key]) >= limit:
            oldest = self._requests[key][0]
            exc = RateLimitExceededError(retry_after=int(oldest + window - now) + 1)
            logger.warning(
                "Rate limit exceeded for IP %s on %s bucket: %d requests in %ds window",
                client_ip, name, len(self._requests[key]), window,
            )
            return JSONResponse(
                status_code=429,
                content={
                    "error": "rate_limit_exceeded",
                    "message": exc.message,
                    "details": exc.context,
                },
                headers={"Retry-After": str(exc.retry_after)},
            )

        self._requests[key].append(now)

        self._seen += 1
        if self._seen % CLEANUP_EVERY == 0:
            self._cleanup_inactive(now)

        return await call_next(request)

    def _cleanup_inactive(self, now: float) -> None:
        """Drop keys whose newest timestamp has left the longest window."""
        horizon = now - max(settings.rate_limit_window, settings.auth_rate_limit_window)
        inactive = [
            key for key, timestamps in self._requests.items()
            if not timestamps or timestamps[-1] < horizon
        ]
        for key in inactive:
            del self._requests[key]

        if inactive:
            logger.debug("Cleaned up %d inactive rate-limit entries", len(inactive))
