"""Deadline-bounded telemetry polling over a device session."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from typing import Protocol

from app.services.olt.deadline import Deadline
from app.services.olt.decoders import PolledValue

logger = logging.getLogger(__name__)

__all__ = ["Deadline", "DeviceSession", "TelemetryPoller"]


class DeviceSession(Protocol):
    def walk(
        self, oid: str, deadline: Deadline | None = None
    ) -> Iterator[tuple[str, PolledValue | None]]:
        ...

    def get(
        self, oids: list[str], deadline: Deadline | None = None
    ) -> dict[str, PolledValue | None]:
        ...


class TelemetryPoller:
    """Reads device tables and instances within a request deadline."""

    def __init__(self, session: DeviceSession, deadline: Deadline):
        self.session = session
        self.deadline = deadline

    def walk_table(self, address: str) -> Iterator[tuple[str, PolledValue]]:
        self.deadline.check("walk")
        for full_address, value in self.session.walk(address, deadline=self.deadline):
            self.deadline.check("walk")
            if value is None:
                continue
            yield full_address, value

    def get(self, addresses: list[str]) -> dict[str, PolledValue | None]:
        self.deadline.check("get")
        values = self.session.get(list(addresses), deadline=self.deadline)
        return {address: values.get(address) for address in addresses}

    def get_one(self, address: str) -> PolledValue | None:
        return self.get([address]).get(address)
