"""Assemble ONU records from polled attributes."""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime

from app.schemas.onu import OnuDetail, OnuSummary
from app.services.olt import decoders
from app.services.olt.addresses import (
    DETAIL_ATTRIBUTES,
    SUMMARY_ATTRIBUTES,
    PortAddress,
)
from app.services.olt.decoders import PolledValue
from app.services.olt.exceptions import DecodeError, OltError, PollTimeout
from app.services.olt.poller import TelemetryPoller

logger = logging.getLogger(__name__)

_DECODERS: dict[str, Callable[[PolledValue], str]] = {
    "onu_type": decoders.decode_text,
    "serial_number": decoders.decode_serial_number,
    "rx_power": decoders.decode_power,
    "tx_power": decoders.decode_power,
    "status": decoders.decode_status,
    "ip_address": decoders.decode_text,
    "description": decoders.decode_text,
    "last_online": decoders.decode_timestamp,
    "last_offline": decoders.decode_timestamp,
    "offline_reason": decoders.decode_offline_reason,
    "optical_distance": decoders.decode_optical_distance,
}

_FIELD_NAMES = {"optical_distance": "gpon_optical_distance"}


def _fetch_attributes(
    poller: TelemetryPoller,
    port: PortAddress,
    onu_id: int,
    attributes: tuple[str, ...],
) -> dict[str, str]:
    """Fetch and decode attributes for one ONU.

    A failed fetch or decode leaves the field empty. Deadline expiry is not
    recovered.
    """
    fields = {_FIELD_NAMES.get(name, name): "" for name in attributes}
    addresses = port.instance_addresses(onu_id, attributes)
    try:
        values = poller.get(list(addresses.values()))
    except PollTimeout:
        raise
    except OltError as exc:
        logger.warning(
            "Attribute fetch failed for board %s pon %s onu %s: %s",
            port.board,
            port.pon,
            onu_id,
            exc,
        )
        return fields

    for name, address in addresses.items():
        value = values.get(address)
        if value is None:
            continue
        try:
            fields[_FIELD_NAMES.get(name, name)] = _DECODERS[name](value)
        except DecodeError as exc:
            logger.warning(
                "Skipping %s for board %s pon %s onu %s: %s",
                name,
                port.board,
                port.pon,
                onu_id,
                exc,
            )
    return fields


def _decode_name(value: PolledValue, port: PortAddress, onu_id: int) -> str:
    try:
        return decoders.decode_text(value)
    except DecodeError as exc:
        logger.warning(
            "Undecodable name for board %s pon %s onu %s: %s", port.board, port.pon, onu_id, exc
        )
        return ""


def walk_identities(poller: TelemetryPoller, port: PortAddress) -> list[tuple[int, str]]:
    """Return (onu_id, name) pairs registered on the port, ascending by id.

    Any walk failure propagates.
    """
    found: dict[int, str] = {}
    for address, value in poller.walk_table(port.identity.oid):
        onu_id = decoders.slot_from_address(address)
        if onu_id == 0:
            logger.warning(
                "Ignoring unparsable identity address %s on board %s pon %s",
                address,
                port.board,
                port.pon,
            )
            continue
        found[onu_id] = _decode_name(value, port, onu_id)
    return sorted(found.items())


def list_onus(poller: TelemetryPoller, port: PortAddress) -> list[OnuSummary]:
    """Build the summary view for every ONU on a port."""
    summaries = []
    for onu_id, name in walk_identities(poller, port):
        fields = _fetch_attributes(poller, port, onu_id, SUMMARY_ATTRIBUTES)
        summaries.append(
            OnuSummary(board=port.board, pon=port.pon, onu_id=onu_id, name=name, **fields)
        )
    logger.debug(
        "Aggregated %d ONUs on board %s pon %s", len(summaries), port.board, port.pon
    )
    return summaries


def get_onu_detail(
    poller: TelemetryPoller,
    port: PortAddress,
    onu_id: int,
    *,
    correction_hours: float = 0,
    now: Callable[[], datetime] | None = None,
) -> OnuDetail | None:
    """Build the detail view for one slot, or None when the slot is empty."""
    identity = poller.get_one(port.identity.for_onu(onu_id))
    if identity is None:
        return None
    name = _decode_name(identity, port, onu_id)
    fields = _fetch_attributes(poller, port, onu_id, DETAIL_ATTRIBUTES)

    if fields["last_online"]:
        try:
            fields["uptime"] = decoders.compute_uptime(
                fields["last_online"],
                now=now() if now else None,
                correction_hours=correction_hours,
            )
        except DecodeError as exc:
            logger.warning("Cannot compute uptime for onu %s: %s", onu_id, exc)
        if fields["last_offline"]:
            try:
                fields["last_down_time_duration"] = decoders.compute_downtime(
                    fields["last_online"], fields["last_offline"]
                )
            except DecodeError as exc:
                logger.warning("Cannot compute downtime for onu %s: %s", onu_id, exc)

    return OnuDetail(board=port.board, pon=port.pon, onu_id=onu_id, name=name, **fields)
