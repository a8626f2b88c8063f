"""
OpenTripPlanner REST API client.

Provides functions to connect to an OTP server and to create and query
travel time surfaces.
"""

from .connection import make_url, otp_connect
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
from .surface import (
    otp_create_surface,
    otp_get_surface_isochrone,
    otp_get_surface_raster,
    otp_list_surfaces,
)
from .validation import otp_check_params

__all__ = [
    "otp_connect",
    "make_url",
    "otp_check_mode",
    "otp_check_params",
    "otp_create_surface",
    "otp_get_surface_raster",
    "otp_list_surfaces",
    "otp_get_surface_isochrone",
    "OTPConnection",
    "SurfaceRequest",
    "SurfaceResult",
    "RasterResult",
    "SurfaceListResult",
    "IsochroneResult",
    "ErrorResult",
    "OTPArgumentError",
    "OTPValidationError",
    "OTPUnsupportedVersionError",
    "OTPConnectionError",
    "OTPSurfaceAPIUnavailableError",
    "OTPUnvalidatedParamsWarning",
]
