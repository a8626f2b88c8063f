"""
Parameter checks for OTP API calls.

Checks run before any network call. Every violation is collected and
reported together in one OTPValidationError.
"""

import math
import os
import re
from datetime import datetime
from numbers import Real
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from .errors import OTPValidationError

DATE_FORMAT = "%m-%d-%Y"
TIME_FORMAT = "%H:%M:%S"

_DATE_RE = re.compile(r"^\d{2}-\d{2}-\d{4}$")
_TIME_RE = re.compile(r"^\d{2}:\d{2}:\d{2}$")


def _is_number(value: Any) -> bool:
    return isinstance(value, Real) and not isinstance(value, bool)


class SurfaceParams(BaseModel):
    """Shape and range rules for OTP query parameters.

    Fields left as None are not checked, so any subset can be validated.
    """
    model_config = ConfigDict(extra="forbid")

    from_place: Any = None
    to_place: Any = None
    date: Any = None
    time: Any = None
    max_walk_distance: Any = None
    walk_reluctance: Any = None
    wait_reluctance: Any = None
    transfer_penalty: Any = None
    min_transfer_time: Any = None
    arrive_by: Any = None
    batch: Any = None

    @field_validator("from_place", "to_place")
    @classmethod
    def check_coordinates(cls, v):
        if v is None:
            return v
        if isinstance(v, (str, bytes)) or not hasattr(v, "__len__") or len(v) != 2:
            raise ValueError("must be a latitude/longitude pair of two numbers")
        lat, lng = v
        if not (_is_number(lat) and _is_number(lng)):
            raise ValueError("must be a latitude/longitude pair of two numbers")
        if not -90 <= lat <= 90:
            raise ValueError(f"latitude {lat} is outside [-90, 90]")
        if not -180 <= lng <= 180:
            raise ValueError(f"longitude {lng} is outside [-180, 180]")
        return v

    @field_validator("date")
    @classmethod
    def check_date(cls, v):
        if v is None:
            return v
        if not isinstance(v, str) or not _DATE_RE.match(v):
            raise ValueError(f"'{v}' must be in the format mm-dd-yyyy")
        try:
            datetime.strptime(v, DATE_FORMAT)
        except ValueError:
            raise ValueError(f"'{v}' is not a valid calendar date")
        return v

    @field_validator("time")
    @classmethod
    def check_time(cls, v):
        if v is None:
            return v
        if not isinstance(v, str) or not _TIME_RE.match(v):
            raise ValueError(f"'{v}' must be in the format hh:mm:ss")
        try:
            datetime.strptime(v, TIME_FORMAT)
        except ValueError:
            raise ValueError(f"'{v}' is not a valid 24 hour clock time")
        return v

    @field_validator("max_walk_distance", "walk_reluctance", "wait_reluctance")
    @classmethod
    def check_non_negative_number(cls, v):
        if v is None:
            return v
        if not _is_number(v):
            raise ValueError("must be a single number")
        if not math.isfinite(v):
            raise ValueError(f"must be a finite number, got {v}")
        if v < 0:
            raise ValueError(f"must be non-negative, got {v}")
        return v

    @field_validator("transfer_penalty", "min_transfer_time")
    @classmethod
    def check_non_negative_integer(cls, v):
        if v is None:
            return v
        if not _is_number(v) or not float(v).is_integer():
            raise ValueError("must be a single integer")
        if v < 0:
            raise ValueError(f"must be non-negative, got {v}")
        return v

    @field_validator("arrive_by", "batch")
    @classmethod
    def check_flag(cls, v):
        if v is None:
            return v
        if not isinstance(v, bool):
            raise ValueError("must be True or False")
        return v


def check_output_dir(path: Optional[str], name: str = "raster_path") -> List[str]:
    """
    Check that a directory exists and is writable.

    Args:
        path: Directory path
        name: Parameter name used in messages

    Returns:
        List of violation messages (empty when the directory is usable)
    """
    if not isinstance(path, (str, os.PathLike)) or not str(path):
        return [f"{name}: must be a directory path"]
    if not os.path.isdir(path):
        return [f"{name}: directory '{path}' does not exist"]
    if not os.access(path, os.W_OK):
        return [f"{name}: directory '{path}' is not writable"]
    return []


def collect_violations(get_raster: bool = False, raster_path: Optional[str] = None, **params) -> List[str]:
    """
    Validate parameters and return every violation found.

    Args:
        get_raster: Whether a raster will be written to raster_path
        raster_path: Output directory for the raster
        **params: OTP query parameters (see SurfaceParams)

    Returns:
        List of violation messages
    """
    violations: List[str] = []

    try:
        SurfaceParams(**params)
    except ValidationError as e:
        for err in e.errors():
            loc = ".".join(str(part) for part in err["loc"])
            msg = err["msg"].removeprefix("Value error, ")
            violations.append(f"{loc}: {msg}")

    if not isinstance(get_raster, bool):
        violations.append("get_raster: must be True or False")
    elif get_raster:
        violations.extend(check_output_dir(raster_path))

    return violations


def otp_check_params(**params) -> None:
    """
    Check OTP API parameters before a request is made.

    Raises:
        OTPValidationError: Listing every violated constraint
    """
    violations = collect_violations(**params)
    if violations:
        raise OTPValidationError(violations)
