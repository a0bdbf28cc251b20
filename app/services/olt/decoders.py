"""Decoding of raw SNMP values into ONU domain strings."""

from __future__ import annotations

import enum
import struct
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from app.services.olt.exceptions import DecodeError, TimestampParseError

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"
UNKNOWN = "Unknown"
SERIAL_VENDOR_PREFIX = "1,"


class ValueKind(enum.Enum):
    text = "text"
    octets = "octets"
    integer = "integer"
    other = "other"


@dataclass(frozen=True)
class PolledValue:
    kind: ValueKind
    value: object

    @classmethod
    def text(cls, value: str) -> "PolledValue":
        return cls(ValueKind.text, value)

    @classmethod
    def octets(cls, value: bytes) -> "PolledValue":
        return cls(ValueKind.octets, bytes(value))

    @classmethod
    def integer(cls, value: int) -> "PolledValue":
        return cls(ValueKind.integer, int(value))

    @classmethod
    def other(cls, value: object = None) -> "PolledValue":
        return cls(ValueKind.other, value)


STATUS_LABELS = {
    1: "Logging",
    2: "LOS",
    3: "Synchronization",
    4: "Online",
    5: "Dying Gasp",
    6: "Auth Failed",
    7: "Offline",
}

OFFLINE_REASON_LABELS = {
    1: "Unknown",
    2: "LOS",
    3: "LOSi",
    4: "LOFi",
    5: "sfi",
    6: "loai",
    7: "loami",
    8: "AuthFail",
    9: "PowerOff",
    10: "deactiveSucc",
    11: "deactiveFail",
    12: "Reboot",
    13: "Shutdown",
}


def decode_text(value: PolledValue) -> str:
    """Decode a name, description, type or IP address value."""
    if value.kind == ValueKind.text:
        return str(value.value)
    if value.kind == ValueKind.octets:
        return bytes(value.value).decode("utf-8", errors="replace")
    raise DecodeError(f"expected text value, got {value.kind.value}")


def decode_serial_number(value: PolledValue) -> str:
    text = decode_text(value)
    if text.startswith(SERIAL_VENDOR_PREFIX):
        return text[len(SERIAL_VENDOR_PREFIX):]
    return text


def decode_power(value: PolledValue) -> str:
    """Convert a raw optical power reading to dBm.

    The OLT reports power in 0.002 dB steps offset by 30 dB.
    """
    if value.kind != ValueKind.integer:
        raise DecodeError(f"expected integer power reading, got {value.kind.value}")
    dbm = int(value.value) * 0.002 - 30.0
    return f"{dbm:.2f}"


def _lookup_label(value: PolledValue, labels: dict[int, str]) -> str:
    if value.kind != ValueKind.integer:
        return UNKNOWN
    return labels.get(int(value.value), UNKNOWN)


def decode_status(value: PolledValue) -> str:
    return _lookup_label(value, STATUS_LABELS)


def decode_offline_reason(value: PolledValue) -> str:
    return _lookup_label(value, OFFLINE_REASON_LABELS)


def decode_optical_distance(value: PolledValue) -> str:
    if value.kind != ValueKind.integer:
        return UNKNOWN
    return str(int(value.value))


def decode_timestamp(value: PolledValue) -> str:
    """Decode an 8-byte device timestamp to ``YYYY-MM-DD HH:MM:SS``.

    Layout: year (uint16, big-endian), month, day, hour, minute, second, and
    two trailing bytes that are ignored.

    Raises:
        DecodeError: Wrong kind, wrong length or out-of-range component.
    """
    if value.kind != ValueKind.octets:
        raise DecodeError(f"expected octet string timestamp, got {value.kind.value}")
    raw = bytes(value.value)
    if len(raw) != 8:
        raise DecodeError(f"timestamp must be 8 bytes, got {len(raw)}")
    year, month, day, hour, minute, second = struct.unpack(">HBBBBB", raw[:7])
    if not 1 <= month <= 12:
        raise DecodeError(f"timestamp month out of range: {month}")
    if not 1 <= day <= 31:
        raise DecodeError(f"timestamp day out of range: {day}")
    if hour > 23 or minute > 59 or second > 59:
        raise DecodeError(f"timestamp time out of range: {hour}:{minute}:{second}")
    try:
        stamp = datetime(year, month, day, hour, minute, second)
    except ValueError as exc:
        raise DecodeError(f"invalid timestamp date: {exc}") from exc
    return stamp.strftime(TIMESTAMP_FORMAT)


def slot_from_address(address: str) -> int:
    """Return the trailing component of a full address as an ONU id, or 0."""
    tail = address.rstrip(".").rsplit(".", 1)[-1]
    try:
        return int(tail)
    except ValueError:
        return 0


def parse_timestamp(text: str) -> datetime:
    try:
        return datetime.strptime(text, TIMESTAMP_FORMAT)
    except (TypeError, ValueError) as exc:
        raise TimestampParseError(f"cannot parse timestamp {text!r}") from exc


def format_duration(span: timedelta) -> str:
    total = max(int(span.total_seconds()), 0)
    days, remainder = divmod(total, 86400)
    hours, remainder = divmod(remainder, 3600)
    minutes, seconds = divmod(remainder, 60)
    return f"{days} days {hours} hours {minutes} minutes {seconds} seconds"


def compute_uptime(
    last_online: str,
    now: datetime | None = None,
    correction_hours: float = 0,
) -> str:
    """Time elapsed since ``last_online`` as a duration string.

    Device timestamps carry no zone; they are compared against ``now`` as
    naive wall-clock values after applying ``correction_hours``.
    """
    online_at = parse_timestamp(last_online)
    current = now or datetime.now(timezone.utc)
    if current.tzinfo is not None:
        current = current.replace(tzinfo=None)
    return format_duration(current - online_at + timedelta(hours=correction_hours))


def compute_downtime(last_online: str, last_offline: str) -> str:
    """Duration of the last outage: ``last_online - last_offline``."""
    online_at = parse_timestamp(last_online)
    offline_at = parse_timestamp(last_offline)
    return format_duration(online_at - offline_at)
