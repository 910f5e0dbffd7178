"""
Custom middleware for rate limiting, request logging and response headers
"""

import logging
import time
from collections import defaultdict, deque

from fastapi import Request
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger(__name__)

# Image requests come in bursts of one per search hit and are not counted
RATE_LIMIT_EXEMPT_PATHS = ("/", "/health", "/image", "/docs", "/openapi.json")


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Sliding-window in-memory rate limit per client IP

    Clients with no request inside the window are dropped from the map, at
    most once per period.
    """

    def __init__(self, app, calls: int = 120, period: int = 60):
        super().__init__(app)
        self.calls = calls
        self.period = period
        self.clients = defaultdict(deque)
        self._last_prune = time.time()

    async def dispatch(self, request: Request, call_next):
        if request.url.path in RATE_LIMIT_EXEMPT_PATHS:
            return await call_next(request)

        client_ip = request.client.host if request.client is not None else "unknown"
        now = time.time()
        if now - self._last_prune >= self.period:
            self.prune(now)
        window = self.clients[client_ip]

        while window and window[0] <= now - self.period:
            window.popleft()

        if len(window) >= self.calls:
            logger.warning("Rate limit exceeded for IP: %s", client_ip)
            return JSONResponse(
                status_code=429,
                content={
                    "detail": {
                        "error": "Rate limit exceeded",
                        "details": f"Maximum {self.calls} requests per {self.period} seconds",
                    }
                },
            )

        window.append(now)
        return await call_next(request)

    def prune(self, now: float) -> None:
        cutoff = now - self.period
        for client_ip in [ip for ip, w in self.clients.items() if not w or w[-1] <= cutoff]:
            del self.clients[client_ip]
        self._last_prune = now


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Add security headers to responses"""

    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)

        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        # Proxied image hosts must not learn which page embedded them
        response.headers["Referrer-Policy"] = "no-referrer"

        return response


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log method, path and timing for each request (never the query string)"""

    async def dispatch(self, request: Request, call_next):
        start_time = time.time()

        client_host = request.client.host if request.client is not None else "unknown"
        logger.info(
            "Request: %s %s from %s", request.method, request.url.path, client_host
        )

        response = await call_next(request)

        process_time = time.time() - start_time
        logger.info(
            "Response: %s %d in %.3fs",
            request.url.path,
            response.status_code,
            process_time,
        )

        return response
