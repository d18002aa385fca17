"""Cache construction and the compute-on-miss helper for KPI values."""

from __future__ import annotations

import logging
from typing import Any, Callable

import redis

from fleettrack.adapters.outbound.redis_cache import InMemoryCacheAdapter, RedisCacheAdapter
from domain.ports import CachePort

logger = logging.getLogger(__name__)


def build_cache(config: dict) -> CachePort:
    """Redis-backed cache when ``cache.redis_url`` answers, in-memory otherwise."""
    redis_url = config.get("cache", {}).get("redis_url")
    if redis_url:
        try:
            client = redis.from_url(redis_url)
            client.ping()
            return RedisCacheAdapter(redis_client=client)
        except redis.exceptions.RedisError as e:
            logger.warning("Redis unavailable at %s, using in-memory cache: %s", redis_url, e)
    return InMemoryCacheAdapter()


def get_or_compute(cache: CachePort | None, key: str, compute_fn: Callable[[], Any],
                   ttl: int = 3600) -> Any:
    if cache is not None:
        cached = cache.get(key)
        if cached is not None:
            return cached

    result = compute_fn()

    if cache is not None and result is not None:
        cache.set(key, result, ttl)
    return result
