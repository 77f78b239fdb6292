"""FastAPI main application."""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
from src.api.routes import chat, health, performance
from src.api.middleware import RateLimitMiddleware, LoggingMiddleware
from src.database.db import init_db
from src.analytics.logger import logger
from src.utils.config import settings
from src.utils.cache import cache_service


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    # Startup
    logger.info("Starting application...")

    try:
        init_db()
        logger.info("Database initialized")
    except Exception as e:
        logger.error(f"Error initializing database: {e}")

    if settings.cache_enabled:
        await cache_service.connect()

    if not settings.llm_api_key:
        logger.warning("LLM_API_KEY not set - replies will use the fallback message")
    else:
        logger.info(f"Using chat model: {settings.llm_model}")

    logger.info("Application startup complete")

    yield

    # Shutdown
    logger.info("Shutting down application...")
    if settings.cache_enabled:
        try:
            await cache_service.disconnect()
        except Exception as e:
            logger.warning(f"Error disconnecting cache: {e}")


app = FastAPI(
    title=f"{settings.store_name} Support Assistant API",
    description="Customer support chat with cached store context and product matching",
    version="1.0.0",
    lifespan=lifespan,
)

# CORS middleware
cors_origins = settings.cors_origins.split(",") if settings.cors_origins else ["*"]
if settings.production_mode and "*" in cors_origins:
    logger.warning("CORS is set to allow all origins in production. Consider restricting this.")
app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_middleware(RateLimitMiddleware, calls=settings.rate_limit_per_minute, period=60)
app.add_middleware(LoggingMiddleware)

app.include_router(chat.router)
app.include_router(performance.router)
app.include_router(health.router)


@app.get("/")
async def root():
    """API info."""
    return {"message": f"{settings.store_name} Support Assistant API", "version": "1.0.0", "docs": "/docs"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("src.api.main:app", host=settings.api_host, port=settings.api_port, reload=True)
