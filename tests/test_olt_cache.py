"""Tests for the Redis read-through cache."""

import pytest
import redis

from app.schemas.onu import OnuSummary
from app.services.olt.cache import (
    ReadThroughCache,
    detail_key,
    free_slots_key,
    json_codec,
    port_key,
)
from tests.mocks import FakeRedis

SUMMARIES = [OnuSummary(board=1, pon=2, onu_id=3, name="CPE-3", status="Online")]


class _Counter:
    def __init__(self, value):
        self.value = value
        self.calls = 0

    def __call__(self):
        self.calls += 1
        return self.value


class _BrokenRedis:
    def get(self, key):
        raise redis.ConnectionError("connection refused")

    def setex(self, key, seconds, value):
        raise redis.ConnectionError("connection refused")


class _UndecodableRedis(FakeRedis):
    def get(self, key):
        raise UnicodeDecodeError("utf-8", b"\xff", 0, 1, "invalid start byte")


def test_cache_keys():
    assert port_key(1, 2) == "board_1_pon_2"
    assert free_slots_key(1, 2) == "board_1_pon_2_empty_onu_id"
    assert detail_key(2, 8, 17) == "board_2_pon_8_onu_17"


def test_hit_within_ttl_computes_once(fake_redis, clock):
    cache = ReadThroughCache(fake_redis, ttl=300)
    compute = _Counter(SUMMARIES)
    loads, dumps = json_codec(list[OnuSummary])

    first = cache.get_or_compute("board_1_pon_2", compute, loads, dumps)
    clock.advance(299)
    second = cache.get_or_compute("board_1_pon_2", compute, loads, dumps)

    assert compute.calls == 1
    assert first == second == SUMMARIES
    assert fake_redis.setex_calls == [("board_1_pon_2", 300)]


def test_expired_entry_recomputes(fake_redis, clock):
    cache = ReadThroughCache(fake_redis, ttl=300)
    compute = _Counter([1, 2, 3])
    loads, dumps = json_codec(list[int])

    cache.get_or_compute("k", compute, loads, dumps)
    clock.advance(301)
    cache.get_or_compute("k", compute, loads, dumps)

    assert compute.calls == 2


def test_prefix_and_explicit_ttl(fake_redis):
    cache = ReadThroughCache(fake_redis, prefix="olt:", ttl=300)
    loads, dumps = json_codec(list[int])
    cache.get_or_compute("k", _Counter([1]), loads, dumps, ttl=60)
    assert fake_redis.setex_calls == [("olt:k", 60)]
    assert fake_redis.store["olt:k"] == "[1]"


def test_undecodable_entry_is_a_miss(fake_redis):
    fake_redis.setex("k", 300, "{not json")
    cache = ReadThroughCache(fake_redis, ttl=300)
    compute = _Counter(SUMMARIES)
    loads, dumps = json_codec(list[OnuSummary])

    assert cache.get_or_compute("k", compute, loads, dumps) == SUMMARIES
    assert compute.calls == 1


def test_wrong_shape_entry_is_a_miss(fake_redis):
    fake_redis.setex("k", 300, '{"unexpected": true}')
    cache = ReadThroughCache(fake_redis, ttl=300)
    compute = _Counter([4, 5])
    loads, dumps = json_codec(list[int])

    assert cache.get_or_compute("k", compute, loads, dumps) == [4, 5]


def test_backend_fault_degrades_to_compute():
    cache = ReadThroughCache(_BrokenRedis(), ttl=300)
    compute = _Counter([7])
    loads, dumps = json_codec(list[int])

    assert cache.get_or_compute("k", compute, loads, dumps) == [7]
    assert cache.get_or_compute("k", compute, loads, dumps) == [7]
    assert compute.calls == 2


def test_no_client_always_computes():
    cache = ReadThroughCache(None)
    compute = _Counter([1])
    loads, dumps = json_codec(list[int])
    cache.get_or_compute("k", compute, loads, dumps)
    cache.get_or_compute("k", compute, loads, dumps)
    assert compute.calls == 2


def test_compute_errors_are_not_cached():
    fake_redis = FakeRedis()
    cache = ReadThroughCache(fake_redis, ttl=300)
    loads, dumps = json_codec(list[int])

    def failing():
        raise RuntimeError("boom")

    with pytest.raises(RuntimeError):
        cache.get_or_compute("k", failing, loads, dumps)
    assert fake_redis.store == {}


def test_non_utf8_entry_is_a_miss():
    client = _UndecodableRedis()
    cache = ReadThroughCache(client, ttl=300)
    compute = _Counter([3])
    loads, dumps = json_codec(list[int])

    assert cache.get_or_compute("k", compute, loads, dumps) == [3]
    assert compute.calls == 1
    assert client.setex_calls == [("k", 300)]
