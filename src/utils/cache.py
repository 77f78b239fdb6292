"""Redis-based caching service for chat history reads."""
import json
import hashlib
from typing import Any, Optional, Dict, List
import redis.asyncio as aioredis
from src.utils.config import settings
from src.analytics.logger import logger

# History limits requested by the app; each is cached under its own key
HISTORY_CACHE_LIMITS = (6, 10, 20, 50)


class CacheService:
    """Redis-based cache; every operation degrades to a no-op when Redis is down."""

    def __init__(self):
        self.redis_client: Optional[aioredis.Redis] = None
        self.enabled = False
        self._connection_pool: Optional[aioredis.ConnectionPool] = None
        # Cache statistics for monitoring
        self._stats = {
            "hits": 0,
            "misses": 0,
            "sets": 0,
            "errors": 0
        }

    async def connect(self):
        """Initialize Redis connection."""
        try:
            self._connection_pool = aioredis.ConnectionPool.from_url(
                settings.redis_url,
                max_connections=50,
                decode_responses=True
            )
            self.redis_client = aioredis.Redis(connection_pool=self._connection_pool)

            # Test connection
            await self.redis_client.ping()
            logger.info("Redis cache connected successfully")
            self.enabled = True
        except Exception as e:
            logger.warning(f"Redis not available, caching disabled: {e}")
            self.enabled = False
            self.redis_client = None

    async def disconnect(self):
        """Close Redis connection."""
        if self.redis_client:
            await self.redis_client.aclose()
            if self._connection_pool:
                await self._connection_pool.disconnect()
            logger.info("Redis cache disconnected")
        self.enabled = False
        self.redis_client = None

    def _generate_key(self, prefix: str, *args) -> str:
        """Generate a cache key from prefix and arguments."""
        key_string = ":".join([prefix, *(str(arg) for arg in args)])
        # If key is too long, hash it
        if len(key_string) > 250:
            key_hash = hashlib.sha256(key_string.encode()).hexdigest()
            return f"{prefix}:{key_hash}"
        return key_string

    async def get(self, key: str) -> Optional[Any]:
        """Get value from cache."""
        if not self.enabled or not self.redis_client:
            self._stats["misses"] += 1
            return None

        try:
            value = await self.redis_client.get(key)
            if value is None:
                self._stats["misses"] += 1
                return None
            parsed = json.loads(value)
            self._stats["hits"] += 1
            return parsed
        except json.JSONDecodeError as je:
            logger.warning(f"Cache get JSON decode error for key {key}: {je}")
            self._stats["misses"] += 1
            self._stats["errors"] += 1
            return None
        except Exception as e:
            logger.warning(f"Cache get error for key {key}: {e}")
            self._stats["misses"] += 1
            self._stats["errors"] += 1
            return None

    async def set(self, key: str, value: Any, ttl: Optional[int] = None) -> bool:
        """Set value in cache with optional TTL (in seconds)."""
        if not self.enabled or not self.redis_client:
            return False

        try:
            serialized = json.dumps(value, default=str)
            if ttl:
                await self.redis_client.setex(key, ttl, serialized)
            else:
                await self.redis_client.set(key, serialized)
            self._stats["sets"] += 1
            return True
        except Exception as e:
            logger.warning(f"Cache set error for key {key}: {e}")
            self._stats["errors"] += 1
            return False

    async def delete(self, key: str) -> bool:
        """Delete a key from cache."""
        if not self.enabled or not self.redis_client:
            return False

        try:
            await self.redis_client.delete(key)
            return True
        except Exception as e:
            logger.warning(f"Cache delete error for key {key}: {e}")
            return False

    # Chat history

    def chat_history_key(self, user_id: str, limit: int) -> str:
        return self._generate_key("chat:history", user_id, limit)

    async def get_chat_history(self, user_id: str, limit: int) -> Optional[List[Dict[str, Any]]]:
        """Get cached chat history (oldest first)."""
        cached = await self.get(self.chat_history_key(user_id, limit))
        return cached if isinstance(cached, list) else None

    async def set_chat_history(
        self,
        user_id: str,
        history: List[Dict[str, Any]],
        limit: int,
        ttl: Optional[int] = None
    ) -> bool:
        """Cache chat history."""
        return await self.set(
            self.chat_history_key(user_id, limit),
            history,
            ttl=ttl or settings.cache_history_ttl
        )

    async def invalidate_chat_history(self, user_id: str) -> None:
        """Drop every cached history window for a user."""
        for limit in HISTORY_CACHE_LIMITS:
            await self.delete(self.chat_history_key(user_id, limit))

    def get_cache_stats(self) -> Dict[str, Any]:
        """Hit/miss counters."""
        total = self._stats["hits"] + self._stats["misses"]
        return {
            **self._stats,
            "total_requests": total,
            "hit_rate": round(self._stats["hits"] / total, 4) if total else 0.0,
            "enabled": self.enabled,
        }


# Global cache service instance
cache_service = CacheService()
