"""
Optional HTTP Basic gate for routes that run or remove hurls.

The gate is open unless both HURL_BASIC_AUTH_USERNAME and
HURL_BASIC_AUTH_PASSWORD are configured.
"""

import secrets

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBasic, HTTPBasicCredentials

from .config import Settings, get_settings


basic_auth = HTTPBasic(auto_error=False)


def require_basic_auth(
    credentials: HTTPBasicCredentials | None = Depends(basic_auth),
    settings: Settings = Depends(get_settings),
) -> None:
    """Dependency rejecting callers without the configured credentials."""
    username, password = settings.basic_auth_username, settings.basic_auth_password
    if username is None or password is None:
        return

    authorized = (
        credentials is not None
        and secrets.compare_digest(credentials.username.encode(), username.encode())
        and secrets.compare_digest(credentials.password.encode(), password.encode())
    )
    if not authorized:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authorized",
            headers={"WWW-Authenticate": "Basic"},
        )
