"""
Travel mode normalisation.

Expands user supplied mode tokens into the comma-joined mode string the OTP
API expects.
"""

from typing import Iterable, List, Union

from .errors import OTPArgumentError

VALID_MODES = ["WALK", "BICYCLE", "CAR", "TRANSIT", "BUS", "RAIL", "TRAM", "SUBWAY"]
TRANSIT_MODES = ["TRANSIT", "BUS", "RAIL", "TRAM", "SUBWAY"]


def otp_check_mode(mode: Union[str, Iterable[str]]) -> str:
    """
    Check and expand travel modes.

    WALK is added for any transit mode since OTP needs a walk leg to reach
    and leave stops. CAR cannot be combined with transit.

    Args:
        mode: A mode token ("TRANSIT") or an iterable of tokens
            (["TRANSIT", "BICYCLE"]). Case insensitive.

    Returns:
        Comma-joined mode string, e.g. "TRANSIT,WALK"

    Raises:
        OTPArgumentError: If mode is empty, contains an unknown token, or
            mixes CAR with transit
    """
    if isinstance(mode, str):
        tokens = [mode]
    elif mode is None:
        tokens = []
    else:
        tokens = list(mode)

    modes: List[str] = []
    for token in tokens:
        if not isinstance(token, str):
            raise OTPArgumentError(f"Mode must be a string, got {type(token).__name__}")
        token = token.strip().upper()
        if token not in VALID_MODES:
            raise OTPArgumentError(
                f"Invalid mode: {token}. Must be one of {', '.join(VALID_MODES)}"
            )
        if token not in modes:
            modes.append(token)

    if not modes:
        raise OTPArgumentError("At least one mode is required")

    has_transit = any(m in TRANSIT_MODES for m in modes)
    if has_transit and "CAR" in modes:
        raise OTPArgumentError("CAR cannot be combined with transit modes")

    if has_transit and "WALK" not in modes:
        modes.append("WALK")

    return ",".join(modes)
