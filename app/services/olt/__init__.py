"""ONU telemetry polling for GPON OLTs."""

from app.services.olt.exceptions import (
    DeviceUnreachable,
    InvalidCoordinate,
    OltError,
    OnuNotFound,
    PollTimeout,
    ProtocolError,
)
from app.services.olt.service import OnuService, build_onu_service

__all__ = [
    "DeviceUnreachable",
    "InvalidCoordinate",
    "OltError",
    "OnuNotFound",
    "OnuService",
    "PollTimeout",
    "ProtocolError",
    "build_onu_service",
]
