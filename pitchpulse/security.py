"""Rate limiting and metrics authentication."""

import logging
from typing import Optional

from slowapi import Limiter
from slowapi.util import get_remote_address

from pitchpulse.config import get_settings

logger = logging.getLogger(__name__)

# Rate limiter using client IP
limiter = Limiter(key_func=get_remote_address)


def default_rate_limit() -> str:
    return get_settings().RATE_LIMIT_PER_MINUTE


def check_bearer_token(authorization: Optional[str], expected_token: str) -> Optional[str]:
    """
    Validate an "Authorization: Bearer <token>" header.

    Returns None when access is granted, else the reason it was refused.
    An empty expected token leaves the endpoint open.
    """
    if not expected_token:
        return None
    if not authorization:
        return "Missing Authorization header"
    parts = authorization.split(" ", 1)
    if len(parts) != 2 or parts[0].lower() != "bearer":
        return "Invalid Authorization format"
    if parts[1] != expected_token:
        logger.warning("[SECURITY] Rejected metrics request with invalid token")
        return "Invalid token"
    return None
