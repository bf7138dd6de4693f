"""
Rate limiting utilities for API endpoints.
Uses slowapi to prevent brute force attacks and API abuse.
"""
from slowapi import Limiter
from slowapi.util import get_remote_address
from limits import RateLimitItem, parse
from fastapi import Request
from fastapi.responses import JSONResponse
from typing import Optional
import logging

from gallery_api.config import settings
from gallery_api.utils.errors import TooManyRequestsError, error_envelope

logger = logging.getLogger(__name__)

LOGIN_PATH = "/api/auth/login"


def get_client_identifier(request: Request) -> str:
    """
    Get client identifier for rate limiting.
    Uses forwarded IP if behind proxy, otherwise remote address.

    Args:
        request: FastAPI request object

    Returns:
        str: Client identifier (IP address)
    """
    # Check for forwarded IP (if behind reverse proxy)
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        # Get first IP in chain (original client)
        return forwarded.split(",")[0].strip()

    # Fall back to direct remote address
    return get_remote_address(request)


# Create limiter instance
limiter = Limiter(
    key_func=get_client_identifier,
    enabled=settings.RATE_LIMIT_ENABLED,
    storage_uri="memory://"  # Fixed windows per process (for multiple workers, consider Redis)
)


# Rate limit configurations for specific use cases
RATE_LIMITS = {
    "general": settings.RATE_LIMIT_GENERAL,  # Shared by every /api request
    "login": settings.RATE_LIMIT_LOGIN,  # Stricter budget for login attempts
}

GENERAL_LIMIT = parse(RATE_LIMITS["general"])
LOGIN_LIMIT = parse(RATE_LIMITS["login"])


def is_api_path(path: str) -> bool:
    return path == "/api" or path.startswith("/api/")


def charge_request(request: Request) -> Optional[RateLimitItem]:
    """
    Count a request against the budgets that apply to it.

    Runs before routing, so requests later rejected with 400, 401 or 404
    are charged too. Budgets are checked in order and the first one that is
    exhausted stops the request.

    Returns:
        The exhausted limit, or None if the request may proceed
    """
    path = request.url.path
    if not limiter.enabled or not is_api_path(path):
        return None

    budgets = [("api", GENERAL_LIMIT)]
    if request.method == "POST" and path == LOGIN_PATH:
        budgets.append(("login", LOGIN_LIMIT))

    key = get_client_identifier(request)
    for scope, item in budgets:
        if not limiter.limiter.hit(item, scope, key):
            return item
    return None


def rate_limit_response(request: Request, item: RateLimitItem) -> JSONResponse:
    """Render a 429 in the shared error envelope."""
    if request.url.path == LOGIN_PATH:
        message = "Too many login attempts, please try again later."
    else:
        message = TooManyRequestsError.default_message

    logger.warning(
        f"Rate limit exceeded on {request.method} {request.url.path} "
        f"for {get_client_identifier(request)}: {item}"
    )
    return JSONResponse(
        status_code=TooManyRequestsError.status_code,
        content=error_envelope(message, TooManyRequestsError.status_code, str(request.url.path)),
    )
