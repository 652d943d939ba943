"""
URL validation for outbound hurls.

Only http and https URLs are admitted, and never ones pointing back at
the service's own host. Private and loopback addresses are not blocked.
"""

from dataclasses import dataclass
from typing import Optional
from urllib.parse import urlsplit


VALID_SCHEMES = ("http", "https")


@dataclass(frozen=True)
class UrlCheck:
    """Outcome of a URL check: valid, or invalid with a reason."""
    reason: Optional[str] = None

    @property
    def is_valid(self) -> bool:
        return self.reason is None

    @classmethod
    def valid(cls) -> "UrlCheck":
        return cls()

    @classmethod
    def invalid(cls, reason: str) -> "UrlCheck":
        return cls(reason=reason)


def check_url(url: Optional[str], own_host: str) -> UrlCheck:
    """
    Check whether ``url`` may be requested.

    Args:
        url: The URL as supplied by the user
        own_host: The service's canonical host name

    Returns:
        UrlCheck.valid() or UrlCheck.invalid(reason); never raises
    """
    if not url:
        return UrlCheck.invalid("URL is empty")

    try:
        parts = urlsplit(url)
        host = parts.hostname
        # Accessing .port validates it
        parts.port
    except ValueError as e:
        return UrlCheck.invalid(f"URL could not be parsed: {e}")

    if parts.scheme not in VALID_SCHEMES:
        return UrlCheck.invalid(f"Unsupported scheme: {parts.scheme or '(none)'}")

    if not host:
        return UrlCheck.invalid("URL has no host")

    if host == own_host.lower():
        return UrlCheck.invalid("URL points back at this service")

    return UrlCheck.valid()


def invalid_url(url: Optional[str], own_host: str) -> bool:
    """Return True when ``url`` must be rejected."""
    return not check_url(url, own_host).is_valid
