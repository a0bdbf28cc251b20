import pytest

from app.config import Settings
from app.services.olt.addresses import load_address_table
from app.services.olt.cache import ReadThroughCache
from app.services.olt.poller import Deadline, TelemetryPoller
from app.services.olt.service import OnuService
from tests.mocks import FakeClock, FakeRedis, FakeSnmpSession


@pytest.fixture(scope="session")
def address_table():
    return load_address_table()


@pytest.fixture()
def port(address_table):
    return address_table.resolve(1, 1)


@pytest.fixture()
def clock():
    return FakeClock()


@pytest.fixture()
def fake_redis(clock):
    return FakeRedis(clock)


@pytest.fixture()
def fake_session():
    return FakeSnmpSession()


@pytest.fixture()
def poller(fake_session):
    return TelemetryPoller(fake_session, Deadline(30))


@pytest.fixture()
def olt_settings():
    return Settings(
        snmp_host="192.0.2.10",
        redis_url="redis://localhost:6379/15",
        cache_ttl_seconds=300,
        request_deadline_seconds=30,
    )


@pytest.fixture()
def onu_service(olt_settings, address_table, fake_session, fake_redis):
    cache = ReadThroughCache(fake_redis, prefix="", ttl=olt_settings.cache_ttl_seconds)
    return OnuService(
        olt_settings,
        address_table,
        lambda deadline: TelemetryPoller(fake_session, deadline),
        cache,
    )
