"""
Typed models for OTP connections, request parameters and result envelopes.

Every public operation returns one of the result dataclasses below. Success
envelopes carry errorId "OK"; failures are an ErrorResult.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Union


@dataclass(frozen=True)
class OTPConnection:
    """Connection descriptor for one OTP server and router."""
    hostname: str = "localhost"
    router: str = "default"
    port: int = 8080
    version: int = 1
    ssl: bool = False
    url: Optional[str] = None
    timeout: Optional[float] = None

    @property
    def scheme(self) -> str:
        return "https" if self.ssl else "http"


@dataclass
class SurfaceRequest:
    """Validated parameters for a create-surface request."""
    from_place: Sequence[float]
    mode: str
    date: str
    time: str
    max_walk_distance: Optional[float] = None
    walk_reluctance: float = 2
    wait_reluctance: float = 1
    transfer_penalty: int = 0
    min_transfer_time: int = 0
    arrive_by: bool = True
    batch: bool = True


@dataclass
class ErrorResult:
    """Failure envelope."""
    errorId: str
    errorMessage: str
    query: str

    @property
    def ok(self) -> bool:
        return False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "errorId": self.errorId,
            "errorMessage": self.errorMessage,
            "query": self.query,
        }


@dataclass
class SurfaceResult:
    """Envelope for a successfully created surface."""
    surfaceId: int
    surfaceRecord: str
    rasterDownload: Union[str, Exception]
    query: str
    errorId: str = "OK"

    @property
    def ok(self) -> bool:
        return True

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary with the documented key order."""
        return {
            "errorId": self.errorId,
            "surfaceId": self.surfaceId,
            "surfaceRecord": self.surfaceRecord,
            "rasterDownload": self.rasterDownload,
            "query": self.query,
        }


@dataclass
class RasterResult:
    """Envelope for a downloaded surface raster."""
    surfaceId: int
    rasterDownload: str
    query: str
    errorId: str = "OK"

    @property
    def ok(self) -> bool:
        return True

    def to_dict(self) -> Dict[str, Any]:
        return {
            "errorId": self.errorId,
            "surfaceId": self.surfaceId,
            "rasterDownload": self.rasterDownload,
            "query": self.query,
        }


@dataclass
class SurfaceListResult:
    """Envelope for the list of surfaces held by the server."""
    query: str
    surfaces: List[Dict[str, Any]] = field(default_factory=list)
    errorId: str = "OK"

    @property
    def ok(self) -> bool:
        return True

    def to_dict(self) -> Dict[str, Any]:
        return {
            "errorId": self.errorId,
            "surfaces": self.surfaces,
            "query": self.query,
        }


@dataclass
class IsochroneResult:
    """Envelope for the GeoJSON isochrone bands of a surface."""
    surfaceId: int
    isochrones: Dict[str, Any]
    query: str
    errorId: str = "OK"

    @property
    def ok(self) -> bool:
        return True

    def to_dict(self) -> Dict[str, Any]:
        return {
            "errorId": self.errorId,
            "surfaceId": self.surfaceId,
            "isochrones": self.isochrones,
            "query": self.query,
        }
