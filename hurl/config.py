"""
Configuration for the Hurl service.

Values are read from the environment (prefix ``HURL_``) or a ``.env`` file.
"""

from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings"""

    app_name: str = "Hurl"
    app_version: str = "1.0.0"

    # Requests aimed back at this host are refused
    canonical_host: str = "hurl.it"

    database_url: str = "sqlite:///./hurl.db"

    # Signs the cookie holding the per-session hurl history
    session_secret: str = "change-me"

    # When both are set, POST / and DELETE /hurls/{id} require HTTP Basic
    basic_auth_username: Optional[str] = None
    basic_auth_password: Optional[str] = None

    # Development
    debug: bool = False
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_prefix="HURL_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )


@lru_cache
def get_settings() -> Settings:
    """Return the process-wide settings (FastAPI dependency)."""
    return Settings()
