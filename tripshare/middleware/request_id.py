"""
Request ID Middleware
"""

from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from tripshare.core.security import REQUEST_ID_HEADER, get_request_id


class RequestIDMiddleware(BaseHTTPMiddleware):
    """
    Tags each request with an ID for log correlation.

    A well-formed incoming X-Request-ID is reused; otherwise a new one is
    generated. The ID is echoed on the response.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request.state.request_id = get_request_id(request)
        response = await call_next(request)
        response.headers[REQUEST_ID_HEADER] = request.state.request_id
        return response
