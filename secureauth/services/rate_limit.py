"""
Rate limiting service untuk SecureAuth API.
Fixed-window request counter per client key, dipakai untuk Register dan Login.
Window dimulai dari request pertama (bukan calendar-aligned).
"""

import logging
import math
import time
from dataclasses import dataclass
from threading import Lock
from typing import Callable, Dict, Optional, Protocol

import redis.asyncio as redis

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RateLimitDecision:
    """Hasil pengecekan rate limit untuk satu request."""
    allowed: bool
    limit: int
    remaining: int
    retry_after: float  # detik sampai window berakhir

    @property
    def retry_after_seconds(self) -> int:
        """Retry-after dibulatkan ke atas, minimal 1 detik saat ditolak."""
        if self.allowed:
            return 0
        return max(1, math.ceil(self.retry_after))


@dataclass
class RateWindow:
    """State counter untuk satu client key."""
    started_at: float
    count: int = 0


class RateLimiter(Protocol):
    """Contract rate limiter yang dipakai auth workflows."""

    async def hit(self, key: str) -> RateLimitDecision:
        ...

    async def allow(self, key: str) -> bool:
        ...

    async def reset(self, key: str) -> None:
        ...


class FixedWindowRateLimiter:
    """
    In-process fixed-window rate limiter.

    Increment-and-check dilakukan di bawah lock sehingga dua request concurrent
    tidak bisa sama-sama lolos ceiling. Window yang sudah lewat di-reset saat
    dibaca dan dibersihkan secara periodik.
    """

    def __init__(
        self,
        max_requests: int = 5,
        window_seconds: float = 900,
        clock: Callable[[], float] = time.monotonic,
        sweep_interval: Optional[float] = None
    ):
        """
        Initialize rate limiter.

        Args:
            max_requests: Maksimal request yang diizinkan per window
            window_seconds: Durasi window dalam detik
            clock: Sumber waktu monotonic
            sweep_interval: Interval pembersihan window idle (default = window_seconds)
        """
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._clock = clock
        self._sweep_interval = sweep_interval if sweep_interval is not None else window_seconds
        self._windows: Dict[str, RateWindow] = {}
        self._lock = Lock()
        self._last_sweep = clock()

    def _expired(self, window: RateWindow, now: float) -> bool:
        return now >= window.started_at + self.window_seconds

    def _sweep(self, now: float) -> None:
        expired = [key for key, window in self._windows.items() if self._expired(window, now)]
        for key in expired:
            del self._windows[key]
        self._last_sweep = now
        if expired:
            logger.debug(f"Evicted {len(expired)} idle rate limit windows")

    def check(self, key: str) -> RateLimitDecision:
        """
        Catat satu request untuk key dan putuskan apakah diizinkan.

        Args:
            key: Client key (mis. auth:<ip>)

        Returns:
            RateLimitDecision
        """
        with self._lock:
            now = self._clock()

            if now - self._last_sweep >= self._sweep_interval:
                self._sweep(now)

            window = self._windows.get(key)
            if window is None or self._expired(window, now):
                window = RateWindow(started_at=now)
                self._windows[key] = window

            retry_after = window.started_at + self.window_seconds - now

            if window.count >= self.max_requests:
                return RateLimitDecision(
                    allowed=False,
                    limit=self.max_requests,
                    remaining=0,
                    retry_after=retry_after
                )

            window.count += 1
            return RateLimitDecision(
                allowed=True,
                limit=self.max_requests,
                remaining=self.max_requests - window.count,
                retry_after=retry_after
            )

    async def hit(self, key: str) -> RateLimitDecision:
        return self.check(key)

    async def allow(self, key: str) -> bool:
        """Return True jika request masih dalam batas rate limit."""
        return self.check(key).allowed

    async def reset(self, key: str) -> None:
        """
        Reset rate limit untuk specific key.
        Useful untuk testing atau admin override.
        """
        with self._lock:
            self._windows.pop(key, None)

    def __len__(self) -> int:
        return len(self._windows)


class RedisFixedWindowRateLimiter:
    """
    Distributed fixed-window rate limiter dengan Redis.

    Setiap hit menjalankan SET NX PX, INCR, dan PTTL dalam satu MULTI/EXEC
    sehingga atomic per key. Expiry key di Redis berfungsi sebagai eviction.
    """

    def __init__(
        self,
        client: redis.Redis,
        max_requests: int = 5,
        window_seconds: float = 900,
        key_prefix: str = "rate_limit"
    ):
        """
        Initialize Redis rate limiter.

        Args:
            client: Redis asyncio client
            max_requests: Maksimal request per window
            window_seconds: Durasi window dalam detik
            key_prefix: Namespace untuk Redis keys
        """
        self._client = client
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._window_ms = int(window_seconds * 1000)
        self.key_prefix = key_prefix

    @classmethod
    def from_url(
        cls,
        redis_url: str,
        max_requests: int = 5,
        window_seconds: float = 900
    ) -> "RedisFixedWindowRateLimiter":
        """Build limiter dari Redis URL."""
        client = redis.from_url(
            redis_url,
            encoding="utf-8",
            decode_responses=True
        )
        return cls(client, max_requests=max_requests, window_seconds=window_seconds)

    def _redis_key(self, key: str) -> str:
        return f"{self.key_prefix}:{key}"

    async def hit(self, key: str) -> RateLimitDecision:
        """
        Catat satu request dan putuskan apakah diizinkan.

        Counter tetap bertambah untuk request yang ditolak, tetapi window tidak
        diperpanjang karena expiry hanya di-set saat key dibuat.
        """
        redis_key = self._redis_key(key)

        async with self._client.pipeline(transaction=True) as pipe:
            pipe.set(redis_key, 0, px=self._window_ms, nx=True)
            pipe.incr(redis_key)
            pipe.pttl(redis_key)
            _, count, ttl_ms = await pipe.execute()

        count = int(count)
        ttl_ms = int(ttl_ms)
        retry_after = ttl_ms / 1000 if ttl_ms > 0 else self.window_seconds

        if count > self.max_requests:
            return RateLimitDecision(
                allowed=False,
                limit=self.max_requests,
                remaining=0,
                retry_after=retry_after
            )

        return RateLimitDecision(
            allowed=True,
            limit=self.max_requests,
            remaining=self.max_requests - count,
            retry_after=retry_after
        )

    async def allow(self, key: str) -> bool:
        """Return True jika request masih dalam batas rate limit."""
        return (await self.hit(key)).allowed

    async def reset(self, key: str) -> None:
        """Reset rate limit untuk specific key."""
        await self._client.delete(self._redis_key(key))

    async def close(self) -> None:
        """Close Redis connection."""
        await self._client.aclose()
