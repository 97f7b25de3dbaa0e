"""
Redis caching service for event listings.

CACHING STRATEGY
================

What we cache:
  - The event listing of one company for one filter combination
  - Cache key pattern: "events:list:{company_id}:active={..}&start={..}&category={..}"

Why:
  - The back office dashboard lists events on every page load
  - Each listing also counts active tickets per event (a correlated subquery)

Invalidation strategy:
  - Any event or ticket write deletes that company's listing keys
    (ticket writes change ticket_types_count)
  - TTL-based expiry as safety net (REDIS_CACHE_TTL)

  Keys of one company share the prefix "events:list:{company_id}:" so they
  can be found with SCAN and deleted without touching other tenants.

Failure mode:
  - Redis is optional. When it is disabled or unreachable every call
    degrades to a miss and the listing is read from the database.
"""

from typing import Optional
from uuid import UUID

import pydantic
import redis.asyncio as redis
from pydantic import TypeAdapter
from redis.exceptions import RedisError

from app.core.config import get_settings
from app.core.metrics import record_cache_operation, redis_connection_errors
from app.core.logging import get_logger
from app.schemas.event import EventFilters, EventResponse

logger = get_logger(__name__)
settings = get_settings()

_event_listing = TypeAdapter(list[EventResponse])

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
        except Exception as e:
            logger.error("redis_connection_failed", error=str(e))
            redis_connection_errors.inc()
            _redis_client = None
            return None

    return _redis_client


async def close_redis() -> None:
    """Close Redis connection on shutdown."""
    global _redis_client
    if _redis_client:
        await _redis_client.aclose()
        _redis_client = None


def _company_prefix(company_id: UUID) -> str:
    return f"events:list:{company_id}:"


def _listing_key(company_id: UUID, filters: EventFilters) -> str:
    return _company_prefix(company_id) + filters.cache_key()


async def get_cached_events(company_id: UUID, filters: EventFilters) -> Optional[list[EventResponse]]:
    client = await get_redis()
    if not client:
        return None

    key = _listing_key(company_id, filters)
    try:
        payload = await client.get(key)
    except RedisError as e:
        logger.error("cache_get_error", key=key, error=str(e))
        return None

    record_cache_operation("get", hit=payload is not None)
    if payload is None:
        return None

    try:
        return _event_listing.validate_json(payload)
    except pydantic.ValidationError:
        # Written by an older schema; let the next set overwrite it
        logger.warning("cache_entry_discarded", key=key)
        return None


async def set_cached_events(company_id: UUID, filters: EventFilters, events: list[EventResponse]) -> None:
    client = await get_redis()
    if not client:
        return

    key = _listing_key(company_id, filters)
    try:
        await client.setex(key, settings.REDIS_CACHE_TTL, _event_listing.dump_json(events))
    except RedisError as e:
        logger.error("cache_set_error", key=key, error=str(e))


async def invalidate_event_cache(company_id: UUID) -> None:
    """Drop every cached listing of one company. Other tenants keep theirs."""
    client = await get_redis()
    if not client:
        return

    try:
        keys = [key async for key in client.scan_iter(match=_company_prefix(company_id) + "*", count=100)]
        if keys:
            await client.unlink(*keys)
        logger.info("cache_invalidated", company_id=str(company_id), keys_deleted=len(keys))
    except RedisError as e:
        logger.error("cache_invalidation_error", company_id=str(company_id), error=str(e))


async def get_cache_stats() -> dict:
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
