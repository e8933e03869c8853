"""Security and rate limiting middleware."""

from __future__ import annotations

import time
from collections import defaultdict
from typing import Any, Callable

from fastapi import Request, status
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Rate limiting middleware.

    Limits requests per IP address; interactive collision sessions send one
    request per drag step, so the per-minute budget is the one that matters.
    """

    def __init__(
        self,
        app: Any,
        *,
        requests_per_minute: int = 600,
        requests_per_hour: int = 10000,
    ) -> None:
        """Initialize rate limiter.

        Args:
            app: FastAPI application.
            requests_per_minute: Maximum requests per minute per IP.
            requests_per_hour: Maximum requests per hour per IP.
        """
        super().__init__(app)
        self.requests_per_minute = requests_per_minute
        self.requests_per_hour = requests_per_hour
        self.minute_requests: dict[str, list[float]] = defaultdict(list)
        self.hour_requests: dict[str, list[float]] = defaultdict(list)

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        """Process request with rate limiting."""
        client_ip = request.client.host if request.client else "unknown"

        current_time = time.time()
        self._clean_old_entries(client_ip, current_time)

        if len(self.minute_requests[client_ip]) >= self.requests_per_minute:
            return _too_many("Rate limit exceeded. Please try again later.", retry_after=60)

        if len(self.hour_requests[client_ip]) >= self.requests_per_hour:
            return _too_many("Hourly rate limit exceeded. Please try again later.", retry_after=3600)

        self.minute_requests[client_ip].append(current_time)
        self.hour_requests[client_ip].append(current_time)

        return await call_next(request)

    def _clean_old_entries(self, client_ip: str, current_time: float) -> None:
        """Remove old entries from rate limit tracking."""
        self.minute_requests[client_ip] = [
            t for t in self.minute_requests[client_ip]
            if current_time - t < 60
        ]
        self.hour_requests[client_ip] = [
            t for t in self.hour_requests[client_ip]
            if current_time - t < 3600
        ]


def _too_many(message: str, *, retry_after: int) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_429_TOO_MANY_REQUESTS,
        content={"error": "RateLimited", "message": message, "details": {"retryAfter": str(retry_after)}},
        headers={"Retry-After": str(retry_after)},
    )


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Add security headers to responses."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        """Add security headers."""
        response = await call_next(request)
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["X-XSS-Protection"] = "1; mode=block"
        response.headers["Strict-Transport-Security"] = "max-age=31536000; includeSubDomains"
        return response
