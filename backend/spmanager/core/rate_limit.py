# spmanager/core/rate_limit.py
"""
Request throttling for the unauthenticated auth endpoints.

Limiters are keyed by client IP and route bucket. The in-memory sliding window
below is the default; anything implementing RateLimiter (e.g. a Redis-backed
limiter shared by several workers) can be swapped in through the
get_*_limiter dependencies.
"""
import asyncio
import logging
import time
from collections import deque
from functools import lru_cache
from typing import Callable, Protocol

from fastapi import Depends, Request

from spmanager.config import settings
from spmanager.core.errors import RateLimitedError

logger = logging.getLogger(__name__)


class RateLimiter(Protocol):
    async def hit(self, key: str) -> float | None:
        """Record a request. Returns None if allowed, else seconds until retry."""
        ...


class SlidingWindowRateLimiter:
    """Simple in-memory sliding window limiter (per process)."""

    def __init__(self, max_requests: int, window_seconds: float, clock: Callable[[], float] = time.monotonic):
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._clock = clock
        self._hits: dict[str, deque[float]] = {}
        self._last_sweep = clock()
        self._lock = asyncio.Lock()

    async def hit(self, key: str) -> float | None:
        async with self._lock:
            now = self._clock()
            if now - self._last_sweep >= self.window_seconds:
                self._sweep(now)
            hits = self._hits.setdefault(key, deque())
            # Remove old requests outside the window
            while hits and now - hits[0] >= self.window_seconds:
                hits.popleft()
            if len(hits) < self.max_requests:
                hits.append(now)
                return None
            return max(self.window_seconds - (now - hits[0]), 0.0)

    def _sweep(self, now: float) -> None:
        """Drop keys whose newest request has left the window."""
        stale = [key for key, hits in self._hits.items() if not hits or now - hits[-1] >= self.window_seconds]
        for key in stale:
            del self._hits[key]
        self._last_sweep = now


def client_ip(request: Request) -> str:
    """Client address, taken from the hop our proxy appended to X-Forwarded-For when trusted."""
    if settings.trust_proxy:
        forwarded = request.headers.get("x-forwarded-for")
        if forwarded:
            # Earlier entries are client supplied
            return forwarded.split(",")[-1].strip()
    return request.client.host if request.client else "unknown"


@lru_cache(maxsize=1)
def get_register_limiter() -> RateLimiter:
    return SlidingWindowRateLimiter(settings.register_rate_limit, settings.register_rate_window)


@lru_cache(maxsize=1)
def get_login_limiter() -> RateLimiter:
    return SlidingWindowRateLimiter(settings.login_rate_limit, settings.login_rate_window)


async def _enforce(limiter: RateLimiter, request: Request, bucket: str, message: str) -> None:
    ip = client_ip(request)
    retry_after = await limiter.hit(f"{ip}:{bucket}")
    if retry_after is not None:
        logger.warning("[rate-limit] %s blocked for ip=%s", bucket, ip)
        raise RateLimitedError(retry_after, message=message)


async def register_rate_limit(request: Request, limiter: RateLimiter = Depends(get_register_limiter)) -> None:
    await _enforce(limiter, request, "register",
                   "Too many accounts created from this IP address, please try again later")


async def login_rate_limit(request: Request, limiter: RateLimiter = Depends(get_login_limiter)) -> None:
    await _enforce(limiter, request, "login",
                   "Too many login attempts from this IP address, please try again later")
