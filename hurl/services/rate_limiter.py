"""
Rate limiting policy for hurls.

The limiter is consulted before every execution. The default policy never
throttles; swap the ``get_rate_limiter`` dependency to plug in another.
"""

from typing import Protocol


class RateLimiter(Protocol):
    """Anything that can tell whether the caller should be throttled."""

    def is_rate_limited(self) -> bool:
        ...


class NoRateLimit:
    """Policy that never throttles."""

    def is_rate_limited(self) -> bool:
        return False


def get_rate_limiter() -> RateLimiter:
    """FastAPI dependency returning the active rate limiting policy."""
    return NoRateLimit()
