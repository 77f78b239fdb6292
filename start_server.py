"""Start the FastAPI server."""
import uvicorn

from src.utils.config import settings


if __name__ == "__main__":
    reload = not settings.production_mode

    print("=" * 60)
    print(f"Starting {settings.store_name} Support Assistant Server")
    print("=" * 60)
    print(f"Server will be available at: http://{settings.api_host}:{settings.api_port}")
    print(f"Environment: {settings.environment}")
    print(f"Reload enabled: {reload}")
    print("Press Ctrl+C to stop the server")
    print("=" * 60)

    uvicorn.run(
        "src.api.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=reload,
        log_level=settings.log_level.lower()
    )
