"""
Rate Limiting for EventHub API
==============================
Implements rate limiting using slowapi, keyed by client address.

Credential endpoints (signin, signup, forgot-password) are limited by
AUTH_RATE_LIMIT (default 10/minute). Set RATE_LIMIT_ENABLED=false to turn
limiting off (tests do this).
"""

from slowapi import Limiter
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded
from fastapi import Request
from fastapi.responses import JSONResponse

from eventhub.core.config import settings
from eventhub.core.logging_config import logger


def get_client_identifier(request: Request) -> str:
    """Rate limit key: client IP address"""
    return f"ip:{get_remote_address(request)}"


# Create limiter instance
limiter = Limiter(
    key_func=get_client_identifier,
    storage_uri=settings.RATE_LIMIT_STORAGE_URI,
    enabled=settings.RATE_LIMIT_ENABLED,
    strategy="fixed-window",
)


async def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded):
    """Return the API's {"error": ...} body with a Retry-After header"""
    logger.warning(
        f"[RateLimit] Exceeded for {get_client_identifier(request)} on {request.url.path}: {exc.detail}"
    )

    return JSONResponse(
        status_code=429,
        content={"error": "Too many requests. Please try again later."},
        headers={"Retry-After": "60"},
    )


def auth_rate_limit():
    """Rate limit for credential endpoints"""
    return limiter.limit(settings.AUTH_RATE_LIMIT, key_func=get_client_identifier)
