from __future__ import annotations

from collections.abc import Iterable

from app.services.olt.addresses import MAX_ONU_ID, MIN_ONU_ID, PortAddress
from app.services.olt.aggregator import walk_identities
from app.services.olt.poller import TelemetryPoller


def free_slots(occupied: Iterable[int]) -> list[int]:
    """ONU ids in 1..128 not present in ``occupied``, ascending."""
    taken = set(occupied)
    return [slot for slot in range(MIN_ONU_ID, MAX_ONU_ID + 1) if slot not in taken]


def occupied_slots(poller: TelemetryPoller, port: PortAddress) -> set[int]:
    # A failed walk propagates; an empty set would report every slot free.
    return {onu_id for onu_id, _name in walk_identities(poller, port)}
