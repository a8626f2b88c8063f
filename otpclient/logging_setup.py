"""Logging configuration for scripts that use the OTP client."""

import logging
from typing import Optional

from .config import get_log_level

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(level: Optional[str] = None) -> None:
    """
    Configure root logging.

    The library itself only creates module loggers; applications call this
    once at startup.

    Args:
        level: Log level name, defaults to LOG_LEVEL from the environment
    """
    logging.basicConfig(
        level=getattr(logging, (level or get_log_level()).upper(), logging.INFO),
        format=LOG_FORMAT,
    )
