"""In-process TTL cache for the reference documents.

Serves the last good documents when a refresh fails (stale-if-error), and
reports which of the three outcomes happened so callers can log degraded
states.
"""

import asyncio
from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, Optional

from pydantic import BaseModel, ConfigDict

from src.analytics.logger import logger
from src.utils.clock import Clock, elapsed_ms, system_clock
from src.utils.config import settings


class ContextDocuments(BaseModel):
    """The four reference documents injected into the system prompt."""

    model_config = ConfigDict(frozen=True)

    product: str
    contact: str
    privacy: str
    detail: str


ContextLoader = Callable[[], Awaitable[Optional[ContextDocuments]]]


class CacheState(str, Enum):
    FRESH = "fresh"
    STALE = "stale"
    UNAVAILABLE = "unavailable"


@dataclass(frozen=True)
class ContextCacheResult:
    """Outcome of a cache read."""

    state: CacheState
    data: Optional[ContextDocuments] = None
    from_cache: bool = False

    @property
    def available(self) -> bool:
        return self.data is not None


@dataclass(frozen=True)
class CachedContext:
    data: ContextDocuments
    cached_at: datetime
    expires_at: datetime


class ContextCache:
    """TTL cache around a context-document loader."""

    def __init__(
        self,
        clock: Clock = system_clock,
        ttl_seconds: Optional[int] = None,
        load_timeout: Optional[float] = None,
    ):
        self.clock = clock
        self.ttl = timedelta(
            seconds=settings.context_cache_ttl if ttl_seconds is None else ttl_seconds
        )
        self.load_timeout = settings.context_load_timeout if load_timeout is None else load_timeout
        self._entry: Optional[CachedContext] = None

    async def _load(self, loader: ContextLoader) -> Optional[ContextDocuments]:
        try:
            if self.load_timeout:
                return await asyncio.wait_for(loader(), timeout=self.load_timeout)
            return await loader()
        except asyncio.TimeoutError:
            logger.warning(f"Context loader timed out after {self.load_timeout}s")
        except Exception as e:
            logger.error(f"Context loader failed: {e}", exc_info=True)
        return None

    async def get(self, loader: ContextLoader) -> ContextCacheResult:
        """Return cached documents, refreshing through ``loader`` when expired."""
        entry = self._entry
        if entry and self.clock.now() < entry.expires_at:
            logger.debug("Using cached context files")
            return ContextCacheResult(state=CacheState.FRESH, data=entry.data, from_cache=True)

        logger.info("Loading fresh context files...")
        fresh = await self._load(loader)

        if fresh is None:
            # Re-read: another request may have refreshed while we awaited
            entry = self._entry
            if entry:
                logger.warning("Using stale context cache due to load failure")
                return ContextCacheResult(state=CacheState.STALE, data=entry.data, from_cache=True)
            logger.error("Context files unavailable and no cached copy exists")
            return ContextCacheResult(state=CacheState.UNAVAILABLE)

        now = self.clock.now()
        self._entry = CachedContext(data=fresh, cached_at=now, expires_at=now + self.ttl)
        logger.info("Context files cached successfully")
        return ContextCacheResult(state=CacheState.FRESH, data=fresh)

    async def get_cached_context_files(self, loader: ContextLoader) -> Optional[ContextDocuments]:
        """Documents only; ``None`` means no copy could be produced."""
        result = await self.get(loader)
        return result.data

    def clear(self) -> None:
        """Discard the cached documents."""
        self._entry = None
        logger.info("Context cache cleared")

    def get_status(self) -> Dict[str, Any]:
        """Cache state for monitoring."""
        entry = self._entry
        if entry is None:
            return {
                "status": "empty",
                "age_ms": None,
                "time_to_expiry_ms": None,
                "last_modified": None,
            }

        now = self.clock.now()
        return {
            "status": "expired" if now >= entry.expires_at else "valid",
            "age_ms": elapsed_ms(entry.cached_at, now),
            "time_to_expiry_ms": elapsed_ms(now, entry.expires_at),
            "last_modified": entry.cached_at.isoformat(),
        }
