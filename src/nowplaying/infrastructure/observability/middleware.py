"""Middleware for observability: request/response logging."""

import logging
import time
from collections.abc import Awaitable, Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from nowplaying.infrastructure.observability.logging import (
    get_correlation_id,
    set_correlation_id,
)

logger = logging.getLogger(__name__)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log one line per request and echo the correlation ID back."""

    # Hey future me - a request that triggers the interactive OAuth handshake can sit
    # here for minutes. The duration in the completion line makes that obvious.
    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        """Process request and log details.

        Args:
            request: Incoming request
            call_next: Next middleware/handler in chain

        Returns:
            Response from application
        """
        set_correlation_id(request.headers.get("X-Correlation-ID"))

        method = request.method
        path = request.url.path
        start_time = time.time()

        try:
            response = await call_next(request)
        except Exception as e:
            logger.exception(
                f"Request failed: {method} {path}",
                extra={
                    "method": method,
                    "path": path,
                    "duration_seconds": time.time() - start_time,
                    "error_type": type(e).__name__,
                },
            )
            raise

        duration_ms = (time.time() - start_time) * 1000
        status_emoji = "✓" if response.status_code < 400 else "✗"
        logger.info(
            f"{status_emoji} {method} {path} → {response.status_code} ({duration_ms:.0f}ms)",
            extra={
                "method": method,
                "path": path,
                "status_code": response.status_code,
                "duration_ms": int(duration_ms),
                "client_ip": request.client.host if request.client else "unknown",
            },
        )

        response.headers["X-Correlation-ID"] = get_correlation_id()
        return response
