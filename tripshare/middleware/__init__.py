"""
Middleware stack for the functions service.

Provides:
- Request ID injection
- Request/response logging
- Error sanitization into the callable error envelope
"""

from tripshare.middleware.request_id import RequestIDMiddleware
from tripshare.middleware.logging import RequestLoggingMiddleware
from tripshare.middleware.error_sanitization import ErrorSanitizationMiddleware

__all__ = [
    "RequestIDMiddleware",
    "RequestLoggingMiddleware",
    "ErrorSanitizationMiddleware",
]
