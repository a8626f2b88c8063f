"""
Exception and warning types for the OTP client.

Programmer errors (bad arguments, unsupported server version) are raised.
Runtime failures of a request are returned as ErrorResult envelopes instead,
see otpclient.models.
"""

from typing import Iterable, List


class OTPArgumentError(ValueError):
    """A required argument is missing or has the wrong shape."""


class OTPValidationError(OTPArgumentError):
    """One or more parameters failed validation.

    All violations are collected before raising, so ``violations`` lists
    every problem found in a single call.
    """

    def __init__(self, violations: Iterable[str]):
        self.violations: List[str] = list(violations)
        lines = "\n".join(f" * {v}" for v in self.violations)
        super().__init__(f"{len(self.violations)} parameter check(s) failed:\n{lines}")


class OTPUnsupportedVersionError(OTPArgumentError):
    """The operation is not available on the connected OTP major version."""


class OTPConnectionError(ConnectionError):
    """The OTP server could not be reached."""


class OTPSurfaceAPIUnavailableError(OTPConnectionError):
    """The server is reachable but the surface API is not enabled."""


class OTPUnvalidatedParamsWarning(UserWarning):
    """Extra parameters were forwarded to the OTP API without checks."""
