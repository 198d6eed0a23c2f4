"""
Redis caching layer for Catalog Service.
"""

from typing import Optional

import redis.asyncio as redis
from shared.logging import get_logger
from shared.errors import ExternalServiceError


class RedisProductCache:
    """Redis string cache of serialized products, keyed by product ID.

    Entries never expire unless ``ttl_seconds`` is set; writes to a product
    remove its entry.
    """

    def __init__(
        self,
        redis_url: str,
        key_prefix: str = "ProductCache_",
        ttl_seconds: Optional[int] = None,
        timeout_seconds: float = 5.0
    ):
        self.redis_url = redis_url
        self.key_prefix = key_prefix
        self.ttl_seconds = ttl_seconds
        self.timeout_seconds = timeout_seconds
        self.logger = get_logger("catalog.cache.redis")
        self.redis: Optional[redis.Redis] = None

    async def start(self):
        """Start the Redis cache."""
        try:
            self.redis = redis.from_url(
                self.redis_url,
                encoding="utf-8",
                decode_responses=True,
                socket_connect_timeout=self.timeout_seconds,
                socket_timeout=self.timeout_seconds,
                health_check_interval=30
            )

            await self.redis.ping()

            self.logger.info("Redis cache started", ttl_seconds=self.ttl_seconds)

        except Exception as e:
            self.logger.error("Failed to start Redis cache", error=str(e))
            raise ExternalServiceError("redis", str(e)) from e

    async def stop(self):
        """Stop the Redis cache."""
        if self.redis:
            await self.redis.aclose()
            self.logger.info("Redis cache stopped")

    async def get(self, product_id: str) -> Optional[str]:
        """Get the cached value for a product."""
        cache_key = self._get_key(product_id)
        try:
            cached = await self.redis.get(cache_key)
        except Exception as e:
            self.logger.error("Error reading cache", cache_key=cache_key, error=str(e))
            raise ExternalServiceError("redis", str(e)) from e

        self.logger.debug("Cache lookup", cache_key=cache_key, hit=cached is not None)
        return cached

    async def set(self, product_id: str, value: str) -> None:
        """Cache a value for a product."""
        cache_key = self._get_key(product_id)
        try:
            if self.ttl_seconds:
                await self.redis.set(cache_key, value, ex=self.ttl_seconds)
            else:
                await self.redis.set(cache_key, value)
        except Exception as e:
            self.logger.error("Error writing cache", cache_key=cache_key, error=str(e))
            raise ExternalServiceError("redis", str(e)) from e

        self.logger.debug("Cached product", cache_key=cache_key, ttl=self.ttl_seconds)

    async def remove(self, product_id: str) -> None:
        """Remove the cached value for a product."""
        cache_key = self._get_key(product_id)
        try:
            removed = await self.redis.delete(cache_key)
        except Exception as e:
            self.logger.error("Error removing cache entry", cache_key=cache_key, error=str(e))
            raise ExternalServiceError("redis", str(e)) from e

        self.logger.debug("Cache entry removed", cache_key=cache_key, existed=bool(removed))

    def _get_key(self, product_id: str) -> str:
        return f"{self.key_prefix}{product_id}"

    async def health_check(self) -> bool:
        """Check Redis health."""
        try:
            await self.redis.ping()
            return True
        except Exception:
            return False
