"""Redis cache adapter implementing CachePort.

Falls back to no-op when Redis is unavailable.
"""

from __future__ import annotations

import json
import logging
import time

from redis.exceptions import RedisError

from domain.ports import CachePort

logger = logging.getLogger(__name__)


class RedisCacheAdapter(CachePort):
    """CachePort backed by Redis, values stored as JSON.

    With no client every call is a no-op. A Redis failure is logged and
    treated as a cache miss: KPIs are always recomputable from the snapshot.
    """

    PREFIX = "fleettrack:"

    def __init__(self, redis_client=None):
        self._redis = redis_client

    def _key(self, key: str) -> str:
        return f"{self.PREFIX}{key}"

    # ── CachePort interface ──────────────────────────────────────────────

    def get(self, key: str) -> object | None:
        if not self._redis:
            return None
        try:
            raw = self._redis.get(self._key(key))
        except RedisError as e:
            logger.warning("Redis get failed for %s: %s", key, e)
            return None
        if raw is None:
            return None
        return json.loads(raw)

    def set(self, key: str, value: object, ttl: int = 3600) -> None:
        if not self._redis:
            return
        try:
            self._redis.setex(self._key(key), ttl, json.dumps(value, default=str))
        except RedisError as e:
            logger.warning("Redis set failed for %s: %s", key, e)

    def invalidate(self, prefix: str) -> None:
        if not self._redis:
            return
        try:
            for k in self._redis.scan_iter(f"{self._key(prefix)}*"):
                self._redis.delete(k)
        except RedisError as e:
            logger.warning("Redis invalidation failed for %s: %s", prefix, e)


class InMemoryCacheAdapter(CachePort):
    """Single-process CachePort with the same semantics as the Redis adapter.

    Values are kept as JSON text, so a caller mutating what it read never
    alters the cached entry. Entries expire ``ttl`` seconds after ``set``.
    """

    def __init__(self, clock=time.monotonic):
        self._clock = clock
        self._store: dict[str, tuple[float, str]] = {}

    def get(self, key: str) -> object | None:
        entry = self._store.get(key)
        if entry is None:
            return None
        expires_at, raw = entry
        if self._clock() >= expires_at:
            del self._store[key]
            return None
        return json.loads(raw)

    def set(self, key: str, value: object, ttl: int = 3600) -> None:
        self._store[key] = (self._clock() + ttl, json.dumps(value, default=str))

    def invalidate(self, prefix: str) -> None:
        for k in [k for k in self._store if k.startswith(prefix)]:
            del self._store[k]
