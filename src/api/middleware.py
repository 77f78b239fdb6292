"""API middleware for rate limiting and logging."""

import time
from collections import deque
from typing import Deque, Dict

from fastapi import Request
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from src.analytics.logger import logger


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Sliding-window rate limit per client address."""

    def __init__(self, app, calls: int = 60, period: int = 60):
        super().__init__(app)
        self.calls = calls
        self.period = period
        self.clients: Dict[str, Deque[float]] = {}
        self._last_sweep = time.monotonic()

    def _evict(self, window: Deque[float], now: float) -> None:
        while window and now - window[0] >= self.period:
            window.popleft()

    def sweep(self, now: float) -> None:
        """Forget clients with no requests inside the window."""
        for client_ip in list(self.clients):
            window = self.clients[client_ip]
            self._evict(window, now)
            if not window:
                del self.clients[client_ip]
        self._last_sweep = now

    async def dispatch(self, request: Request, call_next):
        client_ip = request.client.host if request.client else "unknown"
        now = time.monotonic()
        if now - self._last_sweep >= self.period:
            self.sweep(now)

        window = self.clients.setdefault(client_ip, deque())
        self._evict(window, now)

        if len(window) >= self.calls:
            logger.warning(f"Rate limit exceeded for {client_ip}")
            return JSONResponse(
                status_code=429,
                content={"detail": f"Rate limit exceeded: {self.calls} requests per {self.period} seconds"},
            )

        window.append(now)
        return await call_next(request)


class LoggingMiddleware(BaseHTTPMiddleware):
    """Request logging middleware."""

    async def dispatch(self, request: Request, call_next):
        start_time = time.perf_counter()
        client_ip = request.client.host if request.client else "unknown"
        logger.info(f"{request.method} {request.url.path} - {client_ip}")

        response = await call_next(request)

        process_time = time.perf_counter() - start_time
        logger.info(
            f"{request.method} {request.url.path} - "
            f"{response.status_code} - {process_time:.3f}s"
        )
        response.headers["X-Process-Time"] = f"{process_time:.3f}"
        return response
