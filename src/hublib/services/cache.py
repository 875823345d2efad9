"""Cache invalidation collaborators.

HubLib does not own cached responses; after a mutation it only tells the
cache which keys went stale. Back-end failures are logged and swallowed so a
Redis outage never fails a write that already committed.
"""

from __future__ import annotations

import logging
from typing import Protocol

import redis

from hublib.core.settings import settings

logger = logging.getLogger(__name__)

_SCAN_BATCH = 500


def resource_key(resource_id: int) -> str:
    """Detail-view key of a resource."""
    return f"resource:{resource_id}"


def suggestion_votes_key(suggestion_id: int) -> str:
    """Vote-tally key of a suggestion."""
    return f"suggestion:{suggestion_id}:votes"


RESOURCE_LIST_PATTERN = "resources:list:*"
SUGGESTIONS_PATTERN = "suggestions:*"


class CacheInvalidator(Protocol):
    """Interface the services use to drop stale cache entries."""

    def invalidate(self, key: str) -> None:
        """Drop a single key."""

    def invalidate_pattern(self, pattern: str) -> None:
        """Drop every key matching a glob-style pattern."""


class NullCacheInvalidator:
    """Invalidator used when caching is disabled."""

    def invalidate(self, key: str) -> None:
        return None

    def invalidate_pattern(self, pattern: str) -> None:
        return None


class RedisCacheInvalidator:
    """Invalidator deleting keys from Redis under a shared prefix."""

    def __init__(self, client: redis.Redis, prefix: str | None = None) -> None:
        self._redis = client
        self._prefix = settings.cache_key_prefix if prefix is None else prefix

    def invalidate(self, key: str) -> None:
        full_key = f"{self._prefix}{key}"
        try:
            self._redis.delete(full_key)
        except redis.RedisError as exc:
            logger.warning("Cache invalidation of %s failed: %s", full_key, exc)

    def invalidate_pattern(self, pattern: str) -> None:
        full_pattern = f"{self._prefix}{pattern}"
        try:
            batch: list[bytes | str] = []
            for key in self._redis.scan_iter(match=full_pattern, count=_SCAN_BATCH):
                batch.append(key)
                if len(batch) >= _SCAN_BATCH:
                    self._redis.delete(*batch)
                    batch.clear()
            if batch:
                self._redis.delete(*batch)
        except redis.RedisError as exc:
            logger.warning("Cache invalidation of pattern %s failed: %s", full_pattern, exc)


def invalidate_resource(cache: CacheInvalidator, resource_id: int) -> None:
    """Drop the detail entry of a resource and every resource list page."""
    cache.invalidate(resource_key(resource_id))
    cache.invalidate_pattern(RESOURCE_LIST_PATTERN)


def invalidate_suggestion(cache: CacheInvalidator, suggestion_id: int) -> None:
    """Drop the tally of a suggestion and every suggestion listing."""
    cache.invalidate(suggestion_votes_key(suggestion_id))
    cache.invalidate_pattern(SUGGESTIONS_PATTERN)


_cache: CacheInvalidator | None = None


def get_cache_invalidator() -> CacheInvalidator:
    """Return the process-wide invalidator configured from settings."""
    global _cache
    if _cache is None:
        if settings.cache_enabled:
            _cache = RedisCacheInvalidator(redis.Redis.from_url(settings.redis_url))
        else:
            _cache = NullCacheInvalidator()
    return _cache
