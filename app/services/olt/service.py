"""ONU query operations: cached list, detail, free slots and pages."""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime

from app.config import Settings
from app.schemas.onu import OnuDetail, OnuSummary, Page
from app.services.olt import aggregator, occupancy
from app.services.olt.addresses import AddressTable, load_address_table, validate_slot
from app.services.olt.cache import (
    ReadThroughCache,
    detail_key,
    free_slots_key,
    get_redis_client,
    json_codec,
    port_key,
)
from app.services.olt.exceptions import OnuNotFound
from app.services.olt.pagination import paginate
from app.services.olt.poller import Deadline, TelemetryPoller
from app.services.olt.transport import SnmpSession

logger = logging.getLogger(__name__)

PollerFactory = Callable[[Deadline], TelemetryPoller]

_summary_codec = json_codec(list[OnuSummary])
_detail_codec = json_codec(OnuDetail)
_slots_codec = json_codec(list[int])


class OnuService:
    def __init__(
        self,
        settings: Settings,
        address_table: AddressTable,
        poller_factory: PollerFactory,
        cache: ReadThroughCache,
        now: Callable[[], datetime] | None = None,
    ):
        self.settings = settings
        self.address_table = address_table
        self.poller_factory = poller_factory
        self.cache = cache
        self.now = now

    def _poller(self) -> TelemetryPoller:
        return self.poller_factory(Deadline(self.settings.request_deadline_seconds))

    def list_by_port(self, board: int, pon: int) -> list[OnuSummary]:
        port = self.address_table.resolve(board, pon)
        return self.cache.get_or_compute(
            port_key(board, pon),
            lambda: aggregator.list_onus(self._poller(), port),
            *_summary_codec,
        )

    def detail_by_port_and_slot(self, board: int, pon: int, onu_id: int) -> OnuDetail:
        """Return one ONU's detail view.

        Raises:
            InvalidCoordinate: Bad board, pon or onu_id.
            OnuNotFound: Nothing is registered at the slot.
        """
        port = self.address_table.resolve(board, pon)
        validate_slot(onu_id)

        def compute() -> OnuDetail:
            detail = aggregator.get_onu_detail(
                self._poller(),
                port,
                onu_id,
                correction_hours=self.settings.clock_correction_hours,
                now=self.now,
            )
            if detail is None:
                # Raised inside compute so the absence is never cached.
                raise OnuNotFound(f"no ONU at board {board} pon {pon} onu_id {onu_id}")
            return detail

        return self.cache.get_or_compute(detail_key(board, pon, onu_id), compute, *_detail_codec)

    def free_slots(self, board: int, pon: int) -> list[int]:
        port = self.address_table.resolve(board, pon)
        return self.cache.get_or_compute(
            free_slots_key(board, pon),
            lambda: occupancy.free_slots(occupancy.occupied_slots(self._poller(), port)),
            *_slots_codec,
        )

    def paged_list_by_port(
        self, board: int, pon: int, page: int, page_size: int
    ) -> Page[OnuSummary]:
        summaries = self.list_by_port(board, pon)
        return paginate(
            summaries,
            page,
            page_size,
            default_page_size=self.settings.default_page_size,
            max_page_size=self.settings.max_page_size,
        )


def build_onu_service(settings: Settings) -> OnuService:
    """Wire the production SNMP session, address table and Redis cache."""
    address_table = load_address_table(settings.address_table_path)
    session = SnmpSession.connect(
        settings.snmp_host,
        port=settings.snmp_port,
        community=settings.snmp_community,
        timeout=settings.snmp_timeout_seconds,
        retries=settings.snmp_retries,
    )
    cache = ReadThroughCache(
        get_redis_client(settings.redis_url),
        prefix=settings.cache_prefix,
        ttl=settings.cache_ttl_seconds,
    )
    logger.info(
        "ONU service ready: olt=%s:%s cache_ttl=%ss deadline=%ss",
        settings.snmp_host,
        settings.snmp_port,
        settings.cache_ttl_seconds,
        settings.request_deadline_seconds,
    )
    return OnuService(
        settings,
        address_table,
        lambda deadline: TelemetryPoller(session, deadline),
        cache,
    )
