"""
Request logging middleware.
Logs every request to the patient endpoints with its status and duration.
"""
import logging
import time
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

logger = logging.getLogger(__name__)

# Health probes are frequent and uninteresting
SKIP_PATHS = ("/health",)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Middleware that logs method, path, status code and latency."""

    async def dispatch(self, request: Request, call_next):
        started = time.perf_counter()
        response = await call_next(request)

        path = request.url.path
        if path in SKIP_PATHS:
            return response

        elapsed_ms = (time.perf_counter() - started) * 1000
        client_host = request.client.host if request.client else "-"
        level = logging.WARNING if response.status_code >= 400 else logging.INFO
        logger.log(
            level,
            "%s %s -> %s (%.1f ms, client=%s)",
            request.method, path, response.status_code, elapsed_ms, client_host,
        )
        return response
