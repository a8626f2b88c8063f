import pytest

from otpclient import OTPArgumentError, otp_check_mode
from otpclient.modes import TRANSIT_MODES


@pytest.mark.parametrize("mode", TRANSIT_MODES)
def test_transit_modes_get_walk(mode):
    assert otp_check_mode(mode) == f"{mode},WALK"


def test_car_and_bicycle_never_get_walk():
    assert otp_check_mode("CAR") == "CAR"
    assert otp_check_mode("BICYCLE") == "BICYCLE"
    assert otp_check_mode(["BICYCLE", "WALK"]) == "BICYCLE,WALK"


def test_bicycle_with_transit():
    assert otp_check_mode(["TRANSIT", "BICYCLE"]) == "TRANSIT,BICYCLE,WALK"


def test_walk_not_duplicated():
    assert otp_check_mode(["WALK", "BUS", "walk", "bus"]) == "WALK,BUS"


def test_lower_case_tokens_accepted():
    assert otp_check_mode("rail") == "RAIL,WALK"


def test_car_with_transit_rejected():
    with pytest.raises(OTPArgumentError, match="CAR"):
        otp_check_mode(["CAR", "BUS"])


@pytest.mark.parametrize("mode", [[], (), None, ""])
def test_empty_mode_rejected(mode):
    with pytest.raises(OTPArgumentError):
        otp_check_mode(mode)


def test_unknown_mode_rejected():
    with pytest.raises(OTPArgumentError, match="FERRY"):
        otp_check_mode(["BUS", "FERRY"])
