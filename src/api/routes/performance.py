"""Cache monitoring and warm-up endpoints."""
import platform
import time
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException

from src.agent.support_agent import SupportAgent
from src.analytics.logger import logger
from src.api.dependencies import get_support_agent
from src.api.schemas import PerformanceStats, WarmCacheRequest, WarmCacheResponse

router = APIRouter(prefix="/api/performance", tags=["performance"])

_started_at = time.time()


def _system_stats() -> dict:
    stats = {
        "python_version": platform.python_version(),
        "platform": platform.system().lower(),
        "uptime_seconds": round(time.time() - _started_at, 2),
    }
    try:
        import psutil

        process = psutil.Process()
        memory = process.memory_info()
        stats["memory"] = {"rss_mb": round(memory.rss / 1024 / 1024, 2)}
        stats["cpu_percent"] = process.cpu_percent(interval=None)
    except Exception as e:
        logger.debug(f"Could not collect process stats: {e}")
    return stats


@router.get("/stats", response_model=PerformanceStats)
async def performance_stats(agent: SupportAgent = Depends(get_support_agent)):
    """Context cache status, product index stats and process info."""
    stats = agent.get_performance_stats()
    return PerformanceStats(
        timestamp=datetime.now(timezone.utc).isoformat(),
        context_cache=stats["context_cache"],
        product_index=stats["product_index"],
        system=_system_stats(),
    )


@router.post("/warm-cache", response_model=WarmCacheResponse)
async def warm_cache(
    request: WarmCacheRequest = WarmCacheRequest(),
    agent: SupportAgent = Depends(get_support_agent),
):
    """Preload context documents and the product index."""
    warmed = await agent.warm_caches(force=request.force)
    if not warmed:
        raise HTTPException(status_code=500, detail="Failed to warm context cache")

    return WarmCacheResponse(
        success=True,
        message="Cache warmed successfully",
        context_files_loaded=True,
        product_index_warmed=True,
        timestamp=datetime.now(timezone.utc).isoformat(),
    )
