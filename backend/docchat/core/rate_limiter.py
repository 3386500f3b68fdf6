"""
Rate limiting configuration for API abuse prevention.

Uses slowapi to implement rate limiting on FastAPI endpoints.
"""

from slowapi import Limiter
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded
from fastapi import Request
from fastapi.responses import JSONResponse

from docchat.config import settings


def get_real_client_ip(request: Request) -> str:
    """
    Get the real client IP address, handling proxies.

    Checks X-Forwarded-For and X-Real-IP headers for proxy setups.
    """
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        # X-Forwarded-For can contain multiple IPs, take the first one
        return forwarded.split(",")[0].strip()

    real_ip = request.headers.get("X-Real-IP")
    if real_ip:
        return real_ip.strip()

    return get_remote_address(request)


limiter = Limiter(key_func=get_real_client_ip, enabled=settings.RATE_LIMIT_ENABLED)


# Rate limit configurations for different endpoint types
RATE_LIMITS = {
    # Authentication endpoints (stricter limits to prevent brute force)
    "login": "10/minute",
    "register": "3/minute",

    # Document upload (resource intensive)
    "upload": "10/minute",
}


def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    """
    Custom handler for rate limit exceeded errors.

    Args:
        request: The request that triggered the error
        exc: The rate limit exception

    Returns:
        JSONResponse: Error response with retry-after header
    """
    response = JSONResponse(
        status_code=429,
        content={
            "error": "rate_limit_exceeded",
            "detail": f"Rate limit exceeded: {exc.detail}",
        },
    )

    if hasattr(exc, "retry_after"):
        response.headers["Retry-After"] = str(exc.retry_after)

    return response
