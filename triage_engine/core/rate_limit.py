"""
Rate limiting configuration using SlowAPI.

Counters live in the storage named by ``RATE_LIMIT_STORAGE_URI``; use a
``redis://`` URI in production so limits hold across workers and restarts.
The analysis engine itself never sees throttling state.
"""

from slowapi import Limiter
from slowapi.util import get_remote_address
from starlette.requests import Request

from triage_engine.config import get_settings


def _get_rate_limit_key(request: Request) -> str:
    """
    Rate limit per forwarded client IP, falling back to the socket address.

    The calling backend shares one API key across all end users, so the key
    alone would throttle everyone together.
    """
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return f"ip:{forwarded.split(',')[0].strip()}"

    real_ip = request.headers.get("X-Real-IP")
    if real_ip:
        return f"ip:{real_ip.strip()}"

    return get_remote_address(request)


def get_rate_limit_string() -> str:
    """Get the rate limit string from settings."""
    settings = get_settings()
    return f"{settings.RATE_LIMIT_REQUESTS}/{settings.RATE_LIMIT_WINDOW} seconds"


_settings = get_settings()

limiter = Limiter(
    key_func=_get_rate_limit_key,
    storage_uri=_settings.RATE_LIMIT_STORAGE_URI,
    enabled=_settings.RATE_LIMIT_ENABLED,
)
