"""Error taxonomy for OLT polling.

Only coordinate validation and the identity walk are fatal to a request.
Attribute-level decode and fetch errors are recovered where they happen.
"""

from __future__ import annotations


class OltError(Exception):
    """Base error for OLT polling and ONU aggregation."""

    status_code = 500
    code = "olt_error"


class InvalidCoordinate(OltError):
    """Board, PON or ONU id outside the valid domain."""

    status_code = 400
    code = "invalid_coordinate"


class OnuNotFound(OltError):
    """No ONU registered at the requested slot."""

    status_code = 404
    code = "onu_not_found"


class DeviceUnreachable(OltError):
    """The OLT did not answer or the SNMP tooling is unavailable."""

    status_code = 502
    code = "device_unreachable"


class ProtocolError(OltError):
    """The OLT answered with something that could not be parsed."""

    status_code = 502
    code = "protocol_error"


class PollTimeout(OltError):
    """The request deadline expired while polling."""

    status_code = 504
    code = "poll_timeout"


class DecodeError(OltError, ValueError):
    """A single polled value could not be converted to its domain type."""

    code = "decode_error"


class TimestampParseError(DecodeError):
    """A rendered timestamp string could not be parsed back."""

    code = "timestamp_parse_error"


class CacheUnavailable(OltError):
    """Cache backend fault. Never surfaced to callers."""

    code = "cache_unavailable"


class AddressTableError(OltError):
    """The OLT address table file is missing or malformed."""

    code = "address_table_error"
