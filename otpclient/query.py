"""
Query construction for OTP API requests.

Pure functions: no network access, no side effects.
"""

from typing import Any, Dict, Mapping, Optional
from urllib.parse import unquote

import requests

from .models import SurfaceRequest


def _format_value(value: Any) -> Any:
    # OTP expects lower case booleans
    if isinstance(value, bool):
        return "true" if value else "false"
    return value


def build_surface_query(
    params: SurfaceRequest,
    extra_params: Optional[Mapping[str, Any]] = None,
) -> Dict[str, Any]:
    """
    Build the query parameter map for POST /surfaces.

    arriveBy is always sent as false and batch as true. Extra parameters are
    appended last, unchecked.

    Args:
        params: Validated surface request parameters
        extra_params: Additional OTP parameters passed through as-is

    Returns:
        Ordered dict of query parameters
    """
    query: Dict[str, Any] = {
        "fromPlace": ",".join(str(c) for c in params.from_place),
        "mode": params.mode,
        "date": params.date,
        "time": params.time,
    }
    if params.max_walk_distance is not None:
        query["maxWalkDistance"] = params.max_walk_distance
    query.update({
        "walkReluctance": params.walk_reluctance,
        "waitReluctance": params.wait_reluctance,
        "transferPenalty": params.transfer_penalty,
        "minTransferTime": params.min_transfer_time,
        "arriveBy": False,
        "batch": True,
    })

    for key, value in (extra_params or {}).items():
        query[key] = value

    return {key: _format_value(value) for key, value in query.items()}


def prepare_url(method: str, url: str, params: Optional[Mapping[str, Any]] = None) -> str:
    """
    Return the exact URL requests will send for this call.

    Args:
        method: HTTP method
        url: Endpoint URL
        params: Query parameters

    Returns:
        Encoded request URL
    """
    prepared = requests.Request(method, url, params=params).prepare()
    return prepared.url


def decode_url(url: str) -> str:
    """URL-decode a request URL for reporting."""
    return unquote(url)
