"""
Callable error types.

Errors raised by the callable handlers carry a Firebase callable status code
and a client-safe message. They are rendered as
``{"error": {"status": ..., "message": ...}}`` by the application.
"""

import functools
from enum import Enum
from typing import Any, Callable, Dict, TypeVar

from tripshare.config import logger

F = TypeVar("F", bound=Callable[..., Any])

INTERNAL_ERROR_MESSAGE = "An unexpected error occurred."


class ErrorCode(str, Enum):
    """Callable status codes surfaced to clients."""
    UNAUTHENTICATED = "UNAUTHENTICATED"
    INVALID_ARGUMENT = "INVALID_ARGUMENT"
    NOT_FOUND = "NOT_FOUND"
    PERMISSION_DENIED = "PERMISSION_DENIED"
    ALREADY_EXISTS = "ALREADY_EXISTS"
    INTERNAL = "INTERNAL"


HTTP_STATUS_BY_CODE: Dict[ErrorCode, int] = {
    ErrorCode.UNAUTHENTICATED: 401,
    ErrorCode.INVALID_ARGUMENT: 400,
    ErrorCode.PERMISSION_DENIED: 403,
    ErrorCode.NOT_FOUND: 404,
    ErrorCode.ALREADY_EXISTS: 409,
    ErrorCode.INTERNAL: 500,
}


class CallableError(Exception):
    """Typed error returned to the calling client."""

    def __init__(self, code: ErrorCode, message: str):
        self.code = code
        self.message = message
        super().__init__(message)

    @property
    def http_status(self) -> int:
        return HTTP_STATUS_BY_CODE[self.code]

    def to_dict(self) -> Dict[str, Any]:
        return {"error": {"status": self.code.value, "message": self.message}}

    def __repr__(self) -> str:
        return f"CallableError({self.code.value}, {self.message!r})"


def unauthenticated() -> CallableError:
    return CallableError(
        ErrorCode.UNAUTHENTICATED,
        "The function must be called while authenticated.",
    )


def internal(message: str = INTERNAL_ERROR_MESSAGE) -> CallableError:
    return CallableError(ErrorCode.INTERNAL, message)


def callable_errors(operation: str) -> Callable[[F], F]:
    """
    Wrap a handler so that only CallableError escapes it.

    Typed errors pass through unchanged. Anything else is logged with its
    traceback and replaced by a generic INTERNAL error.
    """

    def decorator(func: F) -> F:
        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            try:
                return func(*args, **kwargs)
            except CallableError:
                raise
            except Exception as exc:
                logger.exception("Error in %s: %s", operation, exc)
                raise internal() from exc

        return wrapper  # type: ignore[return-value]

    return decorator
