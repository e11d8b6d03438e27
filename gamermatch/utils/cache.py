"""Redis cache helpers for GamerMatch.

Only profile lookups are cached. Discovery pages are never cached: the ranked
pool has to be recomputed per request so offset pagination stays consistent.
"""

import json
from typing import Any, Dict, Optional, Type, TypeVar, Union

import redis
import sentry_sdk
from pydantic import BaseModel

from gamermatch.config import settings
from gamermatch.utils.logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T", bound=BaseModel)


class RedisClient:
    """
    Lazily created Redis client shared by the process.

    When REDIS_URL is missing or the connection pool cannot be built the client
    is marked as failed and every cache call becomes a no-op.
    """

    _instance: Optional[redis.Redis] = None
    _failed: bool = False

    @classmethod
    def get_client(cls) -> Optional[redis.Redis]:
        """
        Get or create the Redis client.

        Returns:
            Optional[redis.Redis]: Redis client instance or None if caching is disabled.
        """
        if cls._failed:
            return None

        if cls._instance is None:
            if not settings.REDIS_URL:
                logger.debug("REDIS_URL not configured, profile cache disabled")
                cls._failed = True
                return None
            try:
                pool = redis.ConnectionPool.from_url(
                    settings.REDIS_URL,
                    max_connections=10,
                    decode_responses=True,
                )
                cls._instance = redis.Redis(connection_pool=pool)
                logger.info("Redis client initialized")
            except Exception as e:
                logger.warning("Failed to initialize Redis client, caching will be disabled", error=str(e))
                cls._failed = True
                return None
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        """Forget the current client so the next call reads settings again."""
        cls._instance = None
        cls._failed = False


def set_cache(key: str, value: Union[str, Dict[str, Any], BaseModel], expiration: int = 3600) -> None:
    """
    Store a value in the cache.

    Pydantic models are stored as their JSON dump, dicts as JSON, anything else
    as `str(value)`. A non-positive expiration is replaced by one hour.

    Args:
        key (str): Cache key.
        value (Union[str, Dict[str, Any], BaseModel]): Value to cache.
        expiration (int): Expiration in seconds.
    """
    with sentry_sdk.start_span(op="cache.set", name=key) as span:
        client = RedisClient.get_client()
        if client is None:
            span.set_data("status", "disabled")
            return

        try:
            if isinstance(value, BaseModel):
                cache_value = value.model_dump_json()
            elif isinstance(value, dict):
                cache_value = json.dumps(value)
            else:
                cache_value = str(value)

            if expiration <= 0:
                logger.warning("Cache set without expiration, forcing default 1h", key=key)
                expiration = 3600

            client.set(key, cache_value, ex=expiration)
            logger.debug("Cache set", key=key, expiration=expiration)
            span.set_data("status", "success")
        except Exception as e:
            logger.warning("Failed to set cache, continuing without cache", key=key, error=str(e))
            span.set_status("internal_error")


def get_cache(key: str, extend_ttl: Optional[int] = None) -> Optional[str]:
    """
    Read a raw string from the cache.

    Args:
        key (str): Cache key.
        extend_ttl (Optional[int]): Seconds to extend the TTL on a hit (sliding expiration).

    Returns:
        Optional[str]: Cached value, or None on a miss or when Redis is unavailable.
    """
    with sentry_sdk.start_span(op="cache.get", name=key) as span:
        client = RedisClient.get_client()
        if client is None:
            span.set_data("status", "disabled")
            return None

        try:
            value: Optional[str] = client.get(key)  # type: ignore
            if value:
                span.set_data("status", "hit")
                if extend_ttl:
                    client.expire(key, extend_ttl)
                return value

            span.set_data("status", "miss")
            return None
        except Exception as e:
            logger.warning("Failed to get cache", key=key, error=str(e))
            span.set_status("internal_error")
            return None


def get_cache_model(key: str, model_class: Type[T], extend_ttl: Optional[int] = None) -> Optional[T]:
    """
    Read a cached value and validate it into a pydantic model.

    A payload that no longer validates is treated as a miss.
    """
    value = get_cache(key, extend_ttl=extend_ttl)
    if not value:
        return None
    try:
        return model_class.model_validate_json(value)
    except Exception as e:
        logger.error("Failed to parse cached model", key=key, model=model_class.__name__, error=str(e))
        return None


def delete_cache(key: str) -> None:
    """Delete a key; silently skipped when Redis is unavailable."""
    with sentry_sdk.start_span(op="cache.delete", name=key) as span:
        client = RedisClient.get_client()
        if client is None:
            span.set_data("status", "disabled")
            return

        try:
            client.delete(key)
            logger.debug("Cache deleted", key=key)
            span.set_data("status", "success")
        except Exception as e:
            logger.warning("Failed to delete cache, continuing without cache", key=key, error=str(e))
            span.set_status("internal_error")
