"""
OTP connection setup.

otp_connect() builds the immutable connection descriptor every other call
takes, optionally checking that the router exists and reading the server's
major version.
"""

import logging
from dataclasses import replace
from typing import Dict, Optional

import requests

from .config import get_otp_hostname, get_otp_port, get_otp_router, get_request_timeout, use_ssl
from .decode import parse_server_version
from .errors import OTPArgumentError, OTPConnectionError
from .models import OTPConnection

logger = logging.getLogger(__name__)

SUPPORTED_VERSIONS = [1, 2]


def _check_router_url(router_url: str) -> None:
    base, sep, router = router_url.partition("/routers/")
    if not sep or not base or not router or "/" in router:
        raise OTPArgumentError(
            f"Invalid url: {router_url}. Must be a router URL such as "
            "http://localhost:8080/otp/routers/default"
        )


def make_url(otpcon: OTPConnection) -> Dict[str, str]:
    """
    Build the base URLs for a connection.

    Args:
        otpcon: OTP connection descriptor

    Returns:
        {"router": router URL, "otp": OTP API base URL}

    Raises:
        OTPArgumentError: If url is set but is not a router URL
    """
    if otpcon.url:
        router_url = otpcon.url.rstrip("/")
        _check_router_url(router_url)
        otp_url = router_url.split("/routers/", 1)[0]
        return {"router": router_url, "otp": otp_url}

    otp_url = f"{otpcon.scheme}://{otpcon.hostname}:{otpcon.port}/otp"
    return {"router": f"{otp_url}/routers/{otpcon.router}", "otp": otp_url}


def otp_connect(
    hostname: Optional[str] = None,
    router: Optional[str] = None,
    port: Optional[int] = None,
    ssl: Optional[bool] = None,
    version: int = 1,
    url: Optional[str] = None,
    check: bool = True,
    timeout: Optional[float] = None,
) -> OTPConnection:
    """
    Create an OTP connection descriptor.

    Unset hostname, router, port, ssl and timeout come from the environment
    (OTP_HOSTNAME, OTP_ROUTER, OTP_PORT, OTP_SSL, OTP_TIMEOUT).

    Args:
        hostname: OTP server hostname
        router: Router id
        port: OTP server port
        ssl: Use https
        version: Major OTP version to assume when it cannot be detected
        url: Full router URL ending in /routers/{router}, e.g.
            "https://otp.example/otp/routers/default". Overrides
            hostname/port/router.
        check: Check the router exists and detect the server version
        timeout: Request timeout in seconds (None keeps the transport default)

    Returns:
        OTPConnection

    Raises:
        OTPArgumentError: If port, version or url are invalid
        OTPConnectionError: If check is True and the router cannot be reached
    """
    if version not in SUPPORTED_VERSIONS:
        raise OTPArgumentError(f"Invalid version: {version}. Must be 1 or 2")

    port = get_otp_port() if port is None else port
    if isinstance(port, bool) or not isinstance(port, int) or port <= 0:
        raise OTPArgumentError(f"Invalid port: {port}. Must be a positive integer")
    if url is not None:
        _check_router_url(url.rstrip("/"))

    otpcon = OTPConnection(
        hostname=hostname or get_otp_hostname(),
        router=router or get_otp_router(),
        port=port,
        version=version,
        ssl=use_ssl() if ssl is None else ssl,
        url=url,
        timeout=get_request_timeout() if timeout is None else timeout,
    )

    if not check:
        return otpcon

    urls = make_url(otpcon)
    logger.info(f"Checking router at {urls['router']}")
    try:
        response = requests.get(urls["router"], timeout=otpcon.timeout)
    except requests.exceptions.RequestException as e:
        raise OTPConnectionError(
            f"Unable to connect to OTP. Does {urls['router']} even exist?"
        ) from e

    if response.status_code != 200:
        raise OTPConnectionError(
            f"Router {urls['router']} does not exist (HTTP {response.status_code})"
        )

    detected = _detect_version(urls["otp"], otpcon.timeout)
    if detected is None:
        logger.warning(f"Could not detect OTP version, assuming OTPv{version}")
    elif detected != version:
        otpcon = replace(otpcon, version=detected)

    logger.info(f"Connected to OTPv{otpcon.version} router {urls['router']}")
    return otpcon


def _detect_version(otp_url: str, timeout: Optional[float]) -> Optional[int]:
    try:
        response = requests.get(otp_url, timeout=timeout)
        if response.status_code != 200:
            return None
        return parse_server_version(response.json())
    except (requests.exceptions.RequestException, ValueError) as e:
        logger.debug(f"Version lookup at {otp_url} failed: {e}")
        return None
