"""
Error Sanitization Middleware

Last line of defense: exceptions escaping the route handlers are logged and
returned as a generic INTERNAL callable error.
"""

from typing import Callable

from fastapi import Request, Response
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from tripshare.config import logger
from tripshare.errors import internal


class ErrorSanitizationMiddleware(BaseHTTPMiddleware):
    """
    Converts unhandled exceptions into ``{"error": {"status": "INTERNAL"}}``.

    With ``debug`` enabled the exception is re-raised so the traceback shows
    up in the development server.
    """

    def __init__(self, app: ASGIApp, debug: bool = False):
        super().__init__(app)
        self.debug = debug

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        try:
            return await call_next(request)
        except Exception as exc:
            request_id = getattr(request.state, "request_id", "unknown")
            logger.exception("Unhandled exception in request %s: %s", request_id, exc)

            if self.debug:
                raise

            error = internal()
            body = error.to_dict()
            body["error"]["details"] = {"requestId": request_id}
            return JSONResponse(status_code=error.http_status, content=body)
