"""
Sentry error reporting for the OTP client.

Reporting is opt-in: nothing is sent unless init_sentry() is called with
SENTRY_DSN set. Failures to report are logged and never reach the caller.
"""

import logging
import os
from typing import Any, Dict, Optional

import sentry_sdk
from sentry_sdk.integrations.logging import LoggingIntegration

logger = logging.getLogger(__name__)

_sentry_initialized = False


def init_sentry(service_name: str = "otpclient") -> bool:
    """
    Initialize Sentry for the calling application.

    Args:
        service_name: Value of the service_name tag

    Returns:
        True if Sentry was initialized
    """
    global _sentry_initialized

    sentry_dsn = os.getenv("SENTRY_DSN")
    if not sentry_dsn:
        logger.info("SENTRY_DSN not set, skipping Sentry initialization")
        return False

    try:
        sentry_sdk.init(
            dsn=sentry_dsn,
            traces_sample_rate=float(os.getenv("SENTRY_TRACES_SAMPLE_RATE", "0.0")),
            environment=os.getenv("SENTRY_ENVIRONMENT", "development"),
            release=os.getenv("SENTRY_RELEASE", "unknown"),
            integrations=[
                LoggingIntegration(
                    level=logging.INFO,
                    event_level=logging.ERROR,
                ),
            ],
        )
        sentry_sdk.set_tag("service_name", service_name)
        _sentry_initialized = True
        logger.info(f"Sentry initialized for {service_name} "
                    f"({os.getenv('SENTRY_ENVIRONMENT', 'development')})")
    except Exception as e:
        logger.error(f"Failed to initialize Sentry: {e}", exc_info=True)

    return _sentry_initialized


def capture_exception(error: Exception, additional_data: Optional[Dict[str, Any]] = None) -> None:
    """
    Capture an exception that was turned into a result envelope.

    Args:
        error: Exception to capture
        additional_data: Extra context, e.g. the request URL
    """
    if not _sentry_initialized:
        return

    try:
        with sentry_sdk.new_scope() as scope:
            scope.set_tag("event_type", "exception")
            for key, value in (additional_data or {}).items():
                scope.set_extra(key, value)
            sentry_sdk.capture_exception(error)

        logger.debug(f"Sentry: Captured exception: {type(error).__name__}")

    except Exception as e:
        logger.warning(f"Failed to capture exception to Sentry: {e}")


def add_breadcrumb(message: str, category: str, level: str = "info", data: Optional[Dict[str, Any]] = None) -> None:
    """
    Add a breadcrumb to the current Sentry scope.

    Args:
        message: Breadcrumb message
        category: Breadcrumb category (e.g., "otp.request")
        level: Breadcrumb level (info, warning, error)
        data: Optional additional data
    """
    if not _sentry_initialized:
        return

    try:
        sentry_sdk.add_breadcrumb(
            message=message,
            category=category,
            level=level,
            data=data,
        )
    except Exception as e:
        logger.warning(f"Failed to add breadcrumb to Sentry: {e}")


def is_initialized() -> bool:
    """Check if Sentry is initialized."""
    return _sentry_initialized
