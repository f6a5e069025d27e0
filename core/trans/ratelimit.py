"""Token-bucket rate limiting for translation engines."""

from __future__ import annotations

import asyncio
import threading
import time
from typing import TYPE_CHECKING, Final

from core.trans.interface import TransInterface
from utils.logger_utils import LoggerUtils

if TYPE_CHECKING:
    import logging
    from collections.abc import Callable

    from models.translation_models import TranslateRequest

__all__: list[str] = ["DEFAULT_REQUESTS_PER_MINUTE", "RateLimitedEngine", "RateLimiter"]

logger: logging.Logger = LoggerUtils.get_logger(__name__)

DEFAULT_REQUESTS_PER_MINUTE: Final[int] = 60


class RateLimiter:
    """Token bucket shared by every caller of one engine.

    The bucket starts full. Refill and decrement happen under one lock so concurrent
    callers (tasks or threads) are never over-admitted.

    Args:
        requests_per_minute (int): Sustained rate. Zero or negative uses 60.
        burst_size (int): Bucket capacity. Zero or negative uses requests_per_minute.
        clock (Callable[[], float]): Monotonic time source in seconds, injectable for tests.
    """

    def __init__(
        self,
        requests_per_minute: int = DEFAULT_REQUESTS_PER_MINUTE,
        burst_size: int = 0,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        rpm: float = float(requests_per_minute) if requests_per_minute > 0 else float(DEFAULT_REQUESTS_PER_MINUTE)
        burst: float = float(burst_size) if burst_size > 0 else rpm

        self._clock: Callable[[], float] = clock
        self._max_tokens: float = burst
        self._tokens: float = burst
        self._refill_rate: float = rpm / 60.0  # tokens per second
        self._last_refill: float = clock()
        self._lock: threading.Lock = threading.Lock()

    @property
    def refill_rate(self) -> float:
        return self._refill_rate

    @property
    def capacity(self) -> float:
        return self._max_tokens

    def _refill(self) -> None:
        # caller must hold the lock
        now: float = self._clock()
        elapsed: float = max(0.0, now - self._last_refill)
        self._last_refill = now
        self._tokens = min(self._max_tokens, self._tokens + elapsed * self._refill_rate)

    def try_acquire(self) -> bool:
        """Take one token if available without blocking.

        Returns:
            bool: True if a token was taken.
        """
        with self._lock:
            self._refill()
            if self._tokens >= 1:
                self._tokens -= 1
                return True
            return False

    async def wait(self) -> None:
        """Wait until a token is taken.

        Polls ``try_acquire`` and sleeps for the time it takes to produce one token between
        attempts. Cancelling the awaiting task interrupts the sleep immediately.
        """
        interval: float = 1.0 / self._refill_rate
        while not self.try_acquire():
            logger.debug("Rate limit reached; waiting %.2f seconds", interval)
            await asyncio.sleep(interval)

    def available(self) -> float:
        """Return the number of tokens currently in the bucket."""
        with self._lock:
            self._refill()
            return self._tokens


class RateLimitedEngine(TransInterface):
    """Engine wrapper that waits for a rate-limiter token before every batch.

    Args:
        engine (TransInterface): Engine to decorate.
        limiter (RateLimiter | None): Shared limiter. A default 60 rpm limiter is created if None.
    """

    def __init__(self, engine: TransInterface, limiter: RateLimiter | None = None) -> None:
        self._engine: TransInterface = engine
        self._limiter: RateLimiter = limiter if limiter is not None else RateLimiter()

    @staticmethod
    def fetch_engine_name() -> str:
        return ""

    @property
    def engine_name(self) -> str:
        return self._engine.engine_name

    @property
    def model_name(self) -> str:
        return self._engine.model_name

    @property
    def limiter(self) -> RateLimiter:
        return self._limiter

    async def translate(self, request: TranslateRequest) -> list[str]:
        await self._limiter.wait()
        return await self._engine.translate(request)

    async def close(self) -> None:
        await self._engine.close()
