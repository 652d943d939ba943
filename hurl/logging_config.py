"""Logging setup for the Hurl service."""

import logging

from .config import Settings


LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(settings: Settings) -> None:
    """
    Configure the ``hurl`` logger hierarchy.

    Debug mode forces the DEBUG level so the request/response trace
    written by the hurl service becomes visible.
    """
    level = logging.DEBUG if settings.debug else getattr(
        logging, settings.log_level.upper(), logging.INFO
    )

    logger = logging.getLogger("hurl")
    logger.setLevel(level)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
