"""
Redis caching service for listing pages.

CACHING STRATEGY
================

What we cache:
  - Paginated listing responses (JSON-serialized)
  - Cache key pattern: "listings:list:page={page}&size={size}&available={available_only}"

Invalidation strategy:
  - On listing create/update/delete: delete all listing list keys
  - TTL-based expiry as safety net (REDIS_CACHE_TTL)

  All listing keys share the "listings:list:" prefix so they can be SCANned
  and deleted together.

What we do NOT cache:
  - Beds, rooms and bookings. Occupancy must be read live; a stale
    "vacant" bed would be offered to tenants after it was confirmed.
  - Search results: the filter space is too wide to be worth keying.

When Redis is disabled or unreachable every call degrades to a miss/no-op.
"""

import json
from typing import Optional

import redis.asyncio as redis
from pg_finder.core.config import get_settings
from pg_finder.core.logging import get_logger
from pg_finder.core.metrics import record_cache_operation

logger = get_logger(__name__)
settings = get_settings()

LISTING_KEY_PREFIX = "listings:list:"

_redis_client: Optional[redis.Redis] = None


async def get_redis() -> Optional[redis.Redis]:
    """Get or create Redis connection. Returns None if Redis is disabled."""
    global _redis_client

    if not settings.REDIS_ENABLED:
        return None

    if _redis_client is None:
        try:
            _redis_client = redis.from_url(
                settings.REDIS_URL,
                encoding="utf-8",
                decode_responses=True,
                socket_connect_timeout=5,
                socket_timeout=5,
                retry_on_timeout=True,
            )
            await _redis_client.ping()
            logger.info("redis_connected", url=settings.REDIS_URL)
        except (redis.RedisError, OSError) as e:
            logger.error("redis_connection_failed", error=str(e))
            _redis_client = None
            return None

    return _redis_client


async def close_redis() -> None:
    """Close Redis connection on shutdown."""
    global _redis_client
    if _redis_client:
        await _redis_client.aclose()
        _redis_client = None


def make_listing_list_key(page: int, page_size: int, available_only: bool) -> str:
    return f"{LISTING_KEY_PREFIX}page={page}&size={page_size}&available={available_only}"


async def get_cached_listings(page: int, page_size: int, available_only: bool) -> Optional[dict]:
    """Retrieve a cached listing page."""
    client = await get_redis()
    if not client:
        return None

    key = make_listing_list_key(page, page_size, available_only)
    try:
        data = await client.get(key)
        if data:
            record_cache_operation("get", hit=True)
            logger.debug("cache_hit", key=key)
            return json.loads(data)
        record_cache_operation("get", hit=False)
        logger.debug("cache_miss", key=key)
    except redis.RedisError as e:
        logger.error("cache_get_error", key=key, error=str(e))

    return None


async def set_cached_listings(
    page: int,
    page_size: int,
    available_only: bool,
    data: dict,
) -> None:
    """Cache a listing page with TTL."""
    client = await get_redis()
    if not client:
        return

    key = make_listing_list_key(page, page_size, available_only)
    try:
        await client.setex(key, settings.REDIS_CACHE_TTL, json.dumps(data, default=str))
        record_cache_operation("set", hit=False)
        logger.debug("cache_set", key=key, ttl=settings.REDIS_CACHE_TTL)
    except redis.RedisError as e:
        logger.error("cache_set_error", key=key, error=str(e))


async def invalidate_listing_cache() -> None:
    """Invalidate all cached listing pages."""
    client = await get_redis()
    if not client:
        return

    try:
        deleted = 0
        async for key in client.scan_iter(match=f"{LISTING_KEY_PREFIX}*", count=100):
            await client.delete(key)
            deleted += 1
        logger.info("cache_invalidated", keys_deleted=deleted)
    except redis.RedisError as e:
        logger.error("cache_invalidation_error", error=str(e))


async def get_cache_stats() -> dict:
    """Get Redis cache statistics for monitoring."""
    client = await get_redis()
    if not client:
        return {"status": "disabled"}

    try:
        info = await client.info("stats")
        hits = info.get("keyspace_hits", 0)
        misses = info.get("keyspace_misses", 0)
        return {
            "status": "connected",
            "hits": hits,
            "misses": misses,
            "hit_rate": round(hits / max(hits + misses, 1) * 100, 2),
        }
    except redis.RedisError as e:
        return {"status": "error", "error": str(e)}
