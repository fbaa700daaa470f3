"""
Rate limiting for login and upload endpoints.
Uses slowapi to prevent brute force attacks and upload abuse.
"""
from slowapi import Limiter
from slowapi.util import get_remote_address
from fastapi import Request


def get_client_identifier(request: Request) -> str:
    """
    Client identifier for rate limiting.
    Uses the first X-Forwarded-For address when behind a proxy.
    """
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return get_remote_address(request)


limiter = Limiter(
    key_func=get_client_identifier,
    default_limits=["300/hour"],
    storage_uri="memory://",  # Per-process counters
)


RATE_LIMITS = {
    "login": "5/minute",
    "upload": "30/hour",
}
