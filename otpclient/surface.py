"""
Travel time surfaces (OTPv1 analyst API).

A surface holds the travel time from one origin to every reachable point,
up to OTP's hard coded limit of 120 minutes. Surfaces live on the server;
this module only keeps the id OTP assigns.

The surface API is only available when OTP was launched with --analyst.

Notes on the raster OTP produces for a surface:
- Every cell inside the graph extent that is 120 minutes or more away, or
  not accessible, has the value 120.
- Cells outside the extent of the network have the value 128.
- The first raster generated after OTP starts can take a while; later
  ones (even for other origins) are much faster.
"""

import logging
import os
import tempfile
import warnings
from datetime import datetime
from typing import Any, Callable, Dict, Mapping, Optional, Sequence, Tuple, Union

import requests

from .connection import make_url
from .decode import extract_surface_id
from .errors import (
    OTPArgumentError,
    OTPConnectionError,
    OTPSurfaceAPIUnavailableError,
    OTPUnsupportedVersionError,
    OTPUnvalidatedParamsWarning,
    OTPValidationError,
)
from .models import (
    ErrorResult,
    IsochroneResult,
    OTPConnection,
    RasterResult,
    SurfaceListResult,
    SurfaceRequest,
    SurfaceResult,
)
from .modes import otp_check_mode
from .query import build_surface_query, decode_url, prepare_url
from .sentry import add_breadcrumb, capture_exception
from .validation import DATE_FORMAT, TIME_FORMAT, check_output_dir, collect_violations

logger = logging.getLogger(__name__)

RASTER_CHUNK_SIZE = 64 * 1024
SURFACE_NOT_CREATED = "A surface was not successfully created"
RASTER_NOT_REQUESTED = "Not requested"

_PRIMITIVES = (str, int, float, bool)


def raster_filename(surface_id: int) -> str:
    """Name of the GeoTIFF written for a surface."""
    return f"surface_{surface_id}.tiff"


def _require_v1(otpcon: Optional[OTPConnection], operation: str) -> None:
    if otpcon is None:
        raise OTPArgumentError("otpcon argument is required")
    if otpcon.version != 1:
        raise OTPUnsupportedVersionError(
            f"OTP server is running OTPv{otpcon.version}. {operation}() is only supported in OTPv1"
        )


def _require_surface_id(surface_id: Any) -> int:
    if isinstance(surface_id, bool) or not isinstance(surface_id, int) or surface_id < 0:
        raise OTPArgumentError(f"surface_id must be a non-negative integer, got {surface_id!r}")
    return surface_id


def _check_extra_params(extra_params: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
    if extra_params is None:
        return {}
    if not isinstance(extra_params, Mapping):
        raise OTPArgumentError(
            f"extra_params must be a mapping, got {type(extra_params).__name__}"
        )
    for key, value in extra_params.items():
        if not isinstance(key, str):
            raise OTPArgumentError(f"extra_params keys must be strings, got {key!r}")
        if not isinstance(value, _PRIMITIVES):
            raise OTPArgumentError(
                f"extra_params['{key}'] must be a string, number or boolean, "
                f"got {type(value).__name__}"
            )
    return dict(extra_params)


def _check_surface_api(surface_url: str, timeout: Optional[float]) -> None:
    """Check that the server answers on /surfaces before creating anything."""
    logger.info(f"Checking surface API at {surface_url}")
    try:
        response = requests.get(surface_url, timeout=timeout)
    except requests.exceptions.RequestException as e:
        raise OTPConnectionError(
            f"Unable to connect to OTP. Does {surface_url.rsplit('/surfaces', 1)[0]} even exist?"
        ) from e

    if response.status_code != 200:
        raise OTPSurfaceAPIUnavailableError(
            f"Unable to connect to surface API (HTTP {response.status_code}). "
            f"Was {surface_url.rsplit('/surfaces', 1)[0]} launched in analyst mode using --analyst ?"
        )


def _fetch_raster(raster_url: str, download_path: str, timeout: Optional[float]) -> str:
    """Stream a surface raster to disk and return the file path.

    The body is written to a .part file beside the target and only renamed
    to download_path once complete, so a failed download leaves no file
    under the surface's name.
    """
    logger.info(f"Downloading raster {raster_url} to {download_path}")
    partial_path = f"{download_path}.part"
    with requests.get(raster_url, stream=True, timeout=timeout) as response:
        response.raise_for_status()
        try:
            with open(partial_path, "wb") as f:
                for chunk in response.iter_content(chunk_size=RASTER_CHUNK_SIZE):
                    if chunk:
                        f.write(chunk)
            os.replace(partial_path, download_path)
        except Exception:
            if os.path.exists(partial_path):
                os.remove(partial_path)
            raise
    return download_path


def _get_json(url: str, params: Optional[Dict[str, Any]], timeout: Optional[float]) -> Tuple[str, Union[Any, ErrorResult]]:
    """GET a JSON resource; failures come back as an ErrorResult."""
    query = decode_url(prepare_url("GET", url, params))
    logger.info(f"GET {query}")
    try:
        response = requests.get(url, params=params, timeout=timeout)
    except requests.exceptions.RequestException as e:
        logger.warning(f"Request to {query} failed: {e}")
        capture_exception(e, {"query": query})
        return query, ErrorResult("ERROR", f"Unable to connect to OTP: {e}", query)

    if response.status_code != 200:
        return query, ErrorResult(
            "ERROR", f"OTP returned HTTP {response.status_code}: {response.text[:200]}", query
        )

    try:
        return query, response.json()
    except ValueError:
        return query, ErrorResult("ERROR", "OTP returned a response that is not valid JSON", query)


def otp_create_surface(
    otpcon: OTPConnection,
    from_place: Optional[Sequence[float]] = None,
    mode: Union[str, Sequence[str]] = "TRANSIT",
    date: Optional[str] = None,
    time: Optional[str] = None,
    arrive_by: bool = True,
    max_walk_distance: Optional[float] = None,
    walk_reluctance: float = 2,
    wait_reluctance: float = 1,
    transfer_penalty: int = 0,
    min_transfer_time: int = 0,
    batch: bool = True,
    get_raster: bool = False,
    raster_path: Optional[str] = None,
    extra_params: Optional[Mapping[str, Any]] = None,
    clock: Optional[Callable[[], datetime]] = None,
) -> Union[SurfaceResult, ErrorResult]:
    """
    Create a travel time surface for an origin (OTPv1 only).

    Optionally saves the surface as a GeoTIFF named surface_{id}.tiff in
    raster_path.

    Each call allocates a new surface on the server, so repeating a call
    with the same parameters yields a new id.

    Args:
        otpcon: OTP connection from otp_connect()
        from_place: Latitude/longitude pair of the origin, e.g. (53.48805, -2.24258)
        mode: Mode token or tokens. WALK is added for transit modes.
        date: Travel date, mm-dd-yyyy. Defaults to the clock's date.
        time: Departure time, hh:mm:ss. Defaults to the clock's time.
        arrive_by: Checked but not sent; OTP surfaces are always built
            with arriveBy=false.
        max_walk_distance: Maximum walk distance in meters. Not sent when None.
        walk_reluctance: How much worse walking is than riding transit
        wait_reluctance: How much worse waiting is than riding transit
        transfer_penalty: Extra weight (roughly seconds) for each boarding after the first
        min_transfer_time: Minimum seconds between trips on different vehicles
        batch: Checked but not sent; surfaces always use batch=true
        get_raster: Download the surface raster
        raster_path: Directory for the raster. Defaults to the temp directory.
        extra_params: Other SurfaceResource parameters, sent without checks
        clock: Callable returning "now", used for the date/time defaults

    Returns:
        SurfaceResult on success, ErrorResult if OTP did not create a surface

    Raises:
        OTPArgumentError: If a required argument is missing or extra_params is malformed
        OTPUnsupportedVersionError: If the server is not OTPv1
        OTPValidationError: If any parameter fails its checks
        OTPConnectionError: If the server cannot be reached
        OTPSurfaceAPIUnavailableError: If the surface API is not enabled
    """
    _require_v1(otpcon, "otp_create_surface")
    if from_place is None:
        raise OTPArgumentError("from_place argument is required")
    extra_params = _check_extra_params(extra_params)

    now = (clock or datetime.now)()
    if date is None:
        date = now.strftime(DATE_FORMAT)
    if time is None:
        time = now.strftime(TIME_FORMAT)
    if raster_path is None:
        raster_path = tempfile.gettempdir()

    # Validate everything before touching the network
    violations = []
    try:
        mode = otp_check_mode(mode)
    except OTPArgumentError as e:
        violations.append(f"mode: {e}")
    violations.extend(collect_violations(
        from_place=from_place,
        date=date,
        time=time,
        max_walk_distance=max_walk_distance,
        walk_reluctance=walk_reluctance,
        wait_reluctance=wait_reluctance,
        transfer_penalty=transfer_penalty,
        min_transfer_time=min_transfer_time,
        arrive_by=arrive_by,
        batch=batch,
        get_raster=get_raster,
        raster_path=raster_path,
    ))
    if violations:
        raise OTPValidationError(violations)

    surface_url = f"{make_url(otpcon)['otp']}/surfaces"
    _check_surface_api(surface_url, otpcon.timeout)

    request = SurfaceRequest(
        from_place=from_place,
        mode=mode,
        date=date,
        time=time,
        max_walk_distance=max_walk_distance,
        walk_reluctance=walk_reluctance,
        wait_reluctance=wait_reluctance,
        transfer_penalty=transfer_penalty,
        min_transfer_time=min_transfer_time,
        arrive_by=arrive_by,
        batch=batch,
    )
    query = build_surface_query(request, extra_params)

    if extra_params:
        warnings.warn(
            "Unknown parameters were passed to the OTP API without checks: "
            + ", ".join(extra_params),
            OTPUnvalidatedParamsWarning,
            stacklevel=2,
        )

    url = decode_url(prepare_url("POST", surface_url, query))
    add_breadcrumb("create surface", "otp.request", data={"query": url})
    logger.info(f"POST {url}")

    try:
        response = requests.post(surface_url, params=query, timeout=otpcon.timeout)
    except requests.exceptions.RequestException as e:
        logger.warning(f"Create surface request failed: {e}")
        capture_exception(e, {"query": url})
        return ErrorResult("ERROR", f"Unable to connect to OTP surface API: {e}", url)

    text = response.content.decode("utf-8", errors="replace")
    surface_id = extract_surface_id(text)
    if surface_id is None:
        logger.warning(f"No surface id in response (HTTP {response.status_code}) for {url}")
        return ErrorResult("ERROR", SURFACE_NOT_CREATED, url)

    logger.info(f"Created surface {surface_id}")

    raster_download: Union[str, Exception] = RASTER_NOT_REQUESTED
    if get_raster:
        download_path = os.path.join(raster_path, raster_filename(surface_id))
        try:
            raster_download = _fetch_raster(
                f"{surface_url}/{surface_id}/raster", download_path, otpcon.timeout
            )
        except (requests.exceptions.RequestException, OSError) as e:
            logger.warning(f"Raster download for surface {surface_id} failed: {e}")
            capture_exception(e, {"query": url, "surface_id": surface_id})
            raster_download = e

    return SurfaceResult(
        surfaceId=surface_id,
        surfaceRecord=text,
        rasterDownload=raster_download,
        query=url,
    )


def otp_get_surface_raster(
    otpcon: OTPConnection,
    surface_id: int,
    raster_path: Optional[str] = None,
) -> Union[RasterResult, ErrorResult]:
    """
    Download the GeoTIFF raster of an existing surface (OTPv1 only).

    Args:
        otpcon: OTP connection from otp_connect()
        surface_id: Id returned by otp_create_surface()
        raster_path: Directory for surface_{id}.tiff. Defaults to the temp directory.

    Returns:
        RasterResult with the file path, or ErrorResult if the download failed

    Raises:
        OTPArgumentError: If surface_id is not a non-negative integer
        OTPUnsupportedVersionError: If the server is not OTPv1
        OTPValidationError: If raster_path is not a writable directory
    """
    _require_v1(otpcon, "otp_get_surface_raster")
    surface_id = _require_surface_id(surface_id)
    if raster_path is None:
        raster_path = tempfile.gettempdir()

    violations = check_output_dir(raster_path)
    if violations:
        raise OTPValidationError(violations)

    raster_url = f"{make_url(otpcon)['otp']}/surfaces/{surface_id}/raster"
    query = decode_url(prepare_url("GET", raster_url))
    download_path = os.path.join(raster_path, raster_filename(surface_id))

    try:
        path = _fetch_raster(raster_url, download_path, otpcon.timeout)
    except (requests.exceptions.RequestException, OSError) as e:
        logger.warning(f"Raster download for surface {surface_id} failed: {e}")
        capture_exception(e, {"query": query, "surface_id": surface_id})
        return ErrorResult("ERROR", f"Raster for surface {surface_id} could not be downloaded: {e}", query)

    return RasterResult(surfaceId=surface_id, rasterDownload=path, query=query)


def otp_list_surfaces(otpcon: OTPConnection) -> Union[SurfaceListResult, ErrorResult]:
    """
    List the surfaces currently held by the server (OTPv1 only).

    Returns:
        SurfaceListResult, or ErrorResult if the surface API did not answer
    """
    _require_v1(otpcon, "otp_list_surfaces")
    query, body = _get_json(f"{make_url(otpcon)['otp']}/surfaces", None, otpcon.timeout)
    if isinstance(body, ErrorResult):
        return body
    if not isinstance(body, list):
        return ErrorResult("ERROR", "Unexpected response from the surface API", query)
    return SurfaceListResult(query=query, surfaces=body)


def otp_get_surface_isochrone(
    otpcon: OTPConnection,
    surface_id: int,
    spacing: int = 30,
    n_max: int = 4,
) -> Union[IsochroneResult, ErrorResult]:
    """
    Get isochrone bands for a surface as GeoJSON (OTPv1 only).

    Args:
        otpcon: OTP connection from otp_connect()
        surface_id: Id returned by otp_create_surface()
        spacing: Minutes between isochrone bands
        n_max: Maximum number of bands

    Returns:
        IsochroneResult holding the GeoJSON FeatureCollection, or ErrorResult

    Raises:
        OTPArgumentError: If surface_id is not a non-negative integer
        OTPUnsupportedVersionError: If the server is not OTPv1
        OTPValidationError: If spacing or n_max are not positive integers
    """
    _require_v1(otpcon, "otp_get_surface_isochrone")
    surface_id = _require_surface_id(surface_id)

    violations = []
    for name, value in (("spacing", spacing), ("n_max", n_max)):
        if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
            violations.append(f"{name}: must be a positive integer, got {value!r}")
    if violations:
        raise OTPValidationError(violations)

    query, body = _get_json(
        f"{make_url(otpcon)['otp']}/surfaces/{surface_id}/isochrone",
        {"spacing": spacing, "nMax": n_max},
        otpcon.timeout,
    )
    if isinstance(body, ErrorResult):
        return body
    if not isinstance(body, dict) or body.get("type") != "FeatureCollection":
        return ErrorResult("ERROR", "OTP did not return a GeoJSON FeatureCollection", query)
    return IsochroneResult(surfaceId=surface_id, isochrones=body, query=query)
