"""
Configuration management for the OTP client.

Handles environment variable loading and connection defaults.
"""

import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

# Load .env from the working directory if it exists
_env_path = Path.cwd() / ".env"
if _env_path.exists():
    load_dotenv(_env_path)


def get_otp_hostname() -> str:
    """
    Get the OTP server hostname from environment variable.

    Returns:
        Hostname string (default: "localhost")
    """
    return os.getenv("OTP_HOSTNAME", "localhost").strip()


def get_otp_port() -> int:
    """
    Get the OTP server port from environment variable.

    Returns:
        Port number (default: 8080)

    Raises:
        ValueError: If OTP_PORT is not a positive integer
    """
    raw = os.getenv("OTP_PORT", "8080").strip()
    try:
        port = int(raw)
    except ValueError:
        raise ValueError(f"Invalid OTP_PORT: {raw}. Must be a positive integer")
    if port <= 0:
        raise ValueError(f"Invalid OTP_PORT: {raw}. Must be a positive integer")
    return port


def get_otp_router() -> str:
    """
    Get the router id from environment variable.

    Returns:
        Router id string (default: "default")
    """
    return os.getenv("OTP_ROUTER", "default").strip()


def use_ssl() -> bool:
    """
    Check if requests should use https.

    Returns:
        True if OTP_SSL is "true", "1", "yes" or "on"
    """
    return os.getenv("OTP_SSL", "false").lower().strip() in ["true", "1", "yes", "on"]


def get_request_timeout() -> Optional[float]:
    """
    Get the HTTP request timeout from environment variable.

    Returns:
        Timeout in seconds, or None to keep the transport default

    Raises:
        ValueError: If OTP_TIMEOUT is set but not a number
    """
    raw = os.getenv("OTP_TIMEOUT", "").strip()
    if not raw:
        return None
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"Invalid OTP_TIMEOUT: {raw}. Must be a number of seconds")


def get_log_level() -> str:
    """
    Get log level from environment variable.

    Returns:
        Log level string (default: "INFO")
    """
    return os.getenv("LOG_LEVEL", "INFO").upper()
