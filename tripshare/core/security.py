"""
Security Utilities

Request ID tracking and log-safe rendering of tokens and emails.
"""

import hashlib
import re
import secrets

from fastapi import Request

# Request ID header
REQUEST_ID_HEADER = "X-Request-ID"

_REQUEST_ID_PATTERN = re.compile(r"^[a-zA-Z0-9_-]+$")


def generate_request_id() -> str:
    """Generate a unique request ID."""
    return secrets.token_hex(16)


def get_request_id(request: Request) -> str:
    """Get or generate request ID from request."""
    request_id = request.headers.get(REQUEST_ID_HEADER)
    if request_id and len(request_id) <= 64 and _REQUEST_ID_PATTERN.match(request_id):
        return request_id
    return generate_request_id()


def hash_token(token: str) -> str:
    """
    Create a short hash of a token for logging.

    Invite tokens grant access to a plan; never log them raw.
    """
    return hashlib.sha256(token.encode()).hexdigest()[:16]


def mask_email(email: str) -> str:
    """Mask the local part of an email address: ``jane@x.com`` -> ``j***@x.com``."""
    local, sep, domain = email.partition("@")
    if not sep:
        return "***"
    return f"{local[:1]}***@{domain}"
