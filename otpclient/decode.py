"""
Response parsing for OTP API replies.

Only the fields the client needs are extracted; the rest of a response is
passed through untouched.
"""

import json
import logging
import re
from typing import Any, Optional

logger = logging.getLogger(__name__)

_SURFACE_ID_RE = re.compile(r'"id"\s*:\s*(\d+)')


def extract_surface_id(text: Optional[str]) -> Optional[int]:
    """
    Extract the server-assigned surface id from a create-surface response.

    The body is first read as JSON and its top-level integer "id" used. If
    the body is not JSON, or has no such field, the first "id":<integer>
    occurrence in the raw text is used instead.

    Args:
        text: Raw response body

    Returns:
        Surface id, or None if the response does not contain one
    """
    if not text:
        return None

    try:
        body = json.loads(text)
    except ValueError:
        body = None

    if isinstance(body, dict):
        surface_id = body.get("id")
        if isinstance(surface_id, int) and not isinstance(surface_id, bool):
            return surface_id

    match = _SURFACE_ID_RE.search(text)
    if match:
        return int(match.group(1))

    logger.debug("No surface id found in response text")
    return None


def parse_server_version(body: Any) -> Optional[int]:
    """
    Read the major version from the OTP server root document.

    Args:
        body: Decoded JSON from GET /otp, e.g.
            {"serverVersion": {"major": 1, "minor": 5, ...}}

    Returns:
        Major version number, or None if it cannot be found
    """
    if not isinstance(body, dict):
        return None

    server_version = body.get("serverVersion")
    if not isinstance(server_version, dict):
        return None

    major = server_version.get("major")
    if isinstance(major, int) and not isinstance(major, bool):
        return major
    if isinstance(major, str) and major.isdigit():
        return int(major)
    return None
