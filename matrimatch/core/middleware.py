"""
Middleware for FastAPI
Request IDs, request logging, security headers and body size limits.
"""

import logging
import time
import uuid
from typing import Callable
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from matrimatch.config import settings
from matrimatch.logging_config import reset_request_id, set_request_id


logger = logging.getLogger(__name__)

# Paths not worth a log line
QUIET_PATHS = ("/", "/health", "/docs", "/openapi.json")


class RequestIDMiddleware(BaseHTTPMiddleware):
    """
    Reuses the caller's X-Request-ID or X-Correlation-ID, or generates one,
    and makes it available to every log record of the request.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = (
            request.headers.get("X-Request-ID")
            or request.headers.get("X-Correlation-ID")
            or uuid.uuid4().hex[:12]
        )
        request.state.request_id = request_id
        token = set_request_id(request_id)
        try:
            response = await call_next(request)
        finally:
            reset_request_id(token)
        response.headers["X-Request-ID"] = request_id
        return response


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """
    Middleware to add security headers to all responses.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        response = await call_next(request)

        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        response.headers["Content-Security-Policy"] = (
            "default-src 'none'; frame-ancestors 'none'"
        )

        # Scores are derived from personal data
        if request.url.path.startswith(settings.API_V1_PREFIX):
            response.headers["Cache-Control"] = "no-store, private"

        # HSTS - force HTTPS (only in production)
        if settings.ENVIRONMENT == "production":
            response.headers["Strict-Transport-Security"] = (
                "max-age=31536000; includeSubDomains; preload"
            )

        return response


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Logs method, path, status and duration of every API request.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        start_time = time.time()

        try:
            response = await call_next(request)
        except Exception:
            logger.exception("%s %s failed", request.method, request.url.path)
            raise

        duration_ms = round((time.time() - start_time) * 1000, 2)

        # Don't log health checks to reduce noise
        if request.url.path not in QUIET_PATHS:
            logger.info(
                "%s %s - %s (%sms) client=%s",
                request.method,
                request.url.path,
                response.status_code,
                duration_ms,
                self._get_client_ip(request),
            )

        return response

    def _get_client_ip(self, request: Request) -> str:
        """Extract real client IP from request."""
        forwarded_for = request.headers.get("X-Forwarded-For")
        if forwarded_for:
            return forwarded_for.split(",")[0].strip()

        real_ip = request.headers.get("X-Real-IP")
        if real_ip:
            return real_ip.strip()

        return request.client.host if request.client else "unknown"


class RequestSizeLimitMiddleware(BaseHTTPMiddleware):
    """
    Rejects request bodies larger than MAX_BODY_SIZE.
    Ranking requests carry whole candidate pools, so the limit is generous.
    """

    MAX_BODY_SIZE = 10 * 1024 * 1024  # 10 MB

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        content_length = request.headers.get("Content-Length")

        if content_length and content_length.isdigit() and int(content_length) > self.MAX_BODY_SIZE:
            return Response(
                content='{"detail": "Request body too large. Maximum size is 10MB."}',
                status_code=413,
                media_type="application/json",
            )

        return await call_next(request)
