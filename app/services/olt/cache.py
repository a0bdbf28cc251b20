"""Redis read-through cache for ONU views.

Entries are written once with a TTL and expire on their own. A cache fault
degrades to a recompute; it never fails the request.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Callable
from typing import Any, TypeVar, cast

import redis
from pydantic import TypeAdapter, ValidationError

from app.services.olt.exceptions import CacheUnavailable

logger = logging.getLogger(__name__)

T = TypeVar("T")


def port_key(board: int, pon: int) -> str:
    return f"board_{board}_pon_{pon}"


def free_slots_key(board: int, pon: int) -> str:
    return f"{port_key(board, pon)}_empty_onu_id"


def detail_key(board: int, pon: int, onu_id: int) -> str:
    return f"{port_key(board, pon)}_onu_{onu_id}"


def get_redis_client(redis_url: str) -> redis.Redis:
    return redis.Redis.from_url(redis_url, decode_responses=True)


def json_codec(type_: Any) -> tuple[Callable[[str], Any], Callable[[Any], str]]:
    """Return (loads, dumps) for a pydantic-compatible type."""
    adapter: TypeAdapter[Any] = TypeAdapter(type_)

    def loads(raw: str) -> Any:
        return adapter.validate_json(raw)

    def dumps(value: Any) -> str:
        return json.dumps(adapter.dump_python(value, mode="json"))

    return loads, dumps


class ReadThroughCache:
    """Serve values from Redis, computing and storing them on a miss."""

    def __init__(self, client: redis.Redis | None, prefix: str = "", ttl: int = 300):
        self.client = client
        self.prefix = prefix
        self.ttl = ttl

    def _key(self, key: str) -> str:
        return f"{self.prefix}{key}"

    def _read(self, key: str) -> str | None:
        if self.client is None:
            return None
        try:
            return cast(str | None, self.client.get(key))
        except (redis.RedisError, OSError) as exc:
            raise CacheUnavailable(f"cache read failed for {key}: {exc}") from exc
        except UnicodeDecodeError as exc:
            logger.warning("Discarding non UTF-8 cache entry %s: %s", key, exc)
            return None

    def _write(self, key: str, payload: str, ttl: int) -> None:
        if self.client is None:
            return
        try:
            self.client.setex(key, ttl, payload)
        except (redis.RedisError, OSError) as exc:
            raise CacheUnavailable(f"cache write failed for {key}: {exc}") from exc

    def get_or_compute(
        self,
        key: str,
        compute: Callable[[], T],
        loads: Callable[[str], T],
        dumps: Callable[[T], str],
        ttl: int | None = None,
    ) -> T:
        """Return the cached value for ``key`` or compute and store it.

        Args:
            key: Cache key, without the configured prefix.
            compute: Produces the value on a miss. Its errors propagate.
            loads: Deserializes a stored payload.
            dumps: Serializes a computed value.
            ttl: Seconds to keep the entry. Defaults to the cache TTL.

        Returns:
            The cached or freshly computed value.
        """
        full_key = self._key(key)
        try:
            raw = self._read(full_key)
        except CacheUnavailable as exc:
            logger.warning("%s", exc)
            raw = None

        if raw is not None:
            try:
                value = loads(raw)
            except (ValidationError, ValueError, TypeError) as exc:
                logger.warning("Discarding undecodable cache entry %s: %s", full_key, exc)
            else:
                logger.debug("Cache hit for %s", full_key)
                return value

        logger.debug("Cache miss for %s", full_key)
        value = compute()
        try:
            payload = dumps(value)
            self._write(full_key, payload, ttl if ttl is not None else self.ttl)
        except CacheUnavailable as exc:
            logger.warning("%s", exc)
        except (TypeError, ValueError) as exc:
            logger.warning("Cache encode failed for %s: %s", full_key, exc)
        return value
