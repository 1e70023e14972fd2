"""
Request Logging Middleware
"""

import time
from typing import Callable, Optional

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from tripshare.config import logger


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Logs one line per callable invocation with status and duration."""

    def __init__(self, app: ASGIApp, exclude_paths: Optional[set] = None):
        super().__init__(app)
        self.exclude_paths = exclude_paths or {"/health", "/healthz", "/ready"}

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        if request.url.path in self.exclude_paths:
            return await call_next(request)

        start_time = time.perf_counter()
        request_id = getattr(request.state, "request_id", "unknown")

        try:
            response = await call_next(request)
        except Exception as exc:
            logger.error(
                "Call failed: %s %s | error=%s | duration=%.2fms | request_id=%s",
                request.method,
                request.url.path,
                exc,
                (time.perf_counter() - start_time) * 1000,
                request_id,
            )
            raise

        logger.info(
            "Call: %s %s | status=%d | duration=%.2fms | request_id=%s",
            request.method,
            request.url.path,
            response.status_code,
            (time.perf_counter() - start_time) * 1000,
            request_id,
        )
        return response
