"""
Redis caching service for the public match listing.

What we cache:
  - Match listing responses, keyed by status filter
  - Cache key pattern: "matches:list:status={status}"

What we never cache:
  - Seat maps and booking ledgers. They must reflect the latest committed
    state, and a stale "available" seat is exactly the bug the booking
    engine exists to prevent.

Invalidation strategy:
  - On match create/update/delete: delete all "matches:list:*" keys
  - TTL-based expiry as safety net
"""

import json
from typing import Optional

import redis.asyncio as redis
from redis.exceptions import RedisError
from cricket_tickets.core.config import get_settings
from cricket_tickets.core.logging import get_logger
from cricket_tickets.core.metrics import record_cache_operation

logger = get_logger(__name__)
settings = get_settings()

_redis_client: Optional[redis.Redis] = None

MATCH_LIST_PREFIX = "matches:list:"


async def get_redis() -> Optional[redis.Redis]:
    """Get or create Redis connection. Returns None if Redis is disabled or unreachable."""
    global _redis_client

    if not settings.REDIS_ENABLED:
        return None

    if _redis_client is None:
        client = redis.from_url(
            settings.REDIS_URL,
            encoding="utf-8",
            decode_responses=True,
            socket_connect_timeout=5,
            socket_timeout=5,
            retry_on_timeout=True,
        )
        try:
            await client.ping()
        except RedisError as e:
            logger.error("redis_connection_failed", error=str(e))
            await client.aclose()
            return None
        _redis_client = client
        logger.info("redis_connected", url=settings.REDIS_URL)

    return _redis_client


async def close_redis() -> None:
    """Close Redis connection on shutdown."""
    global _redis_client
    if _redis_client:
        await _redis_client.aclose()
        _redis_client = None


def _make_match_list_key(status: Optional[str]) -> str:
    return f"{MATCH_LIST_PREFIX}status={status or 'all'}"


async def get_cached_matches(status: Optional[str]) -> Optional[dict]:
    """Retrieve cached match list response."""
    client = await get_redis()
    if not client:
        return None

    key = _make_match_list_key(status)
    try:
        data = await client.get(key)
    except RedisError as e:
        logger.error("cache_get_error", key=key, error=str(e))
        return None

    record_cache_operation("get", hit=bool(data))
    if data:
        logger.debug("cache_hit", key=key)
        return json.loads(data)
    logger.debug("cache_miss", key=key)
    return None


async def set_cached_matches(status: Optional[str], data: dict) -> None:
    """Cache match list response with TTL."""
    client = await get_redis()
    if not client:
        return

    key = _make_match_list_key(status)
    try:
        await client.setex(key, settings.REDIS_CACHE_TTL, json.dumps(data, default=str))
        logger.debug("cache_set", key=key, ttl=settings.REDIS_CACHE_TTL)
    except RedisError as e:
        logger.error("cache_set_error", key=key, error=str(e))


async def invalidate_match_cache() -> None:
    """Invalidate all cached match listings."""
    client = await get_redis()
    if not client:
        return

    try:
        deleted = 0
        async for key in client.scan_iter(match=f"{MATCH_LIST_PREFIX}*", count=100):
            await client.delete(key)
            deleted += 1
        logger.info("cache_invalidated", keys_deleted=deleted)
    except RedisError as e:
        logger.error("cache_invalidation_error", error=str(e))


async def get_cache_stats() -> dict:
    """Get Redis cache statistics for monitoring."""
    client = await get_redis()
    if not client:
        return {"status": "disabled"}

    try:
        info = await client.info("stats")
    except RedisError as e:
        return {"status": "error", "error": str(e)}

    hits = info.get("keyspace_hits", 0)
    misses = info.get("keyspace_misses", 0)
    return {
        "status": "connected",
        "hits": hits,
        "misses": misses,
        "hit_rate": round(hits / max(hits + misses, 1) * 100, 2),
    }
