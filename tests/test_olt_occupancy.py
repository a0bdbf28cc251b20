"""Tests for free ONU slot calculation."""

import pytest

from app.services.olt.exceptions import DeviceUnreachable
from app.services.olt.occupancy import free_slots, occupied_slots
from tests.mocks import build_onu_values


def test_free_slots_complements_occupied():
    occupied = {1, 5, 128}
    free = free_slots(occupied)
    assert len(free) == 125
    assert set(free).isdisjoint(occupied)
    assert set(free) | occupied == set(range(1, 129))
    assert free == sorted(free)
    assert free[:4] == [2, 3, 4, 6]


def test_free_slots_edges():
    assert free_slots([]) == list(range(1, 129))
    assert free_slots(range(1, 129)) == []


def test_occupied_slots_from_identity_walk(fake_session, poller, port):
    for onu_id in (3, 7):
        fake_session.values.update(build_onu_values(port, onu_id, f"CPE-{onu_id}"))
    assert occupied_slots(poller, port) == {3, 7}


def test_occupied_slots_propagates_walk_failure(fake_session, poller, port):
    fake_session.walk_error = DeviceUnreachable("down")
    with pytest.raises(DeviceUnreachable):
        occupied_slots(poller, port)
