"""Process-local translation cache with read-time expiry."""

from __future__ import annotations

import threading
import time
from typing import TYPE_CHECKING, NamedTuple

from core.cache.interface import ExportableCache
from utils.logger_utils import LoggerUtils

if TYPE_CHECKING:
    import logging
    from collections.abc import Callable

__all__: list[str] = ["MemoryCache"]

logger: logging.Logger = LoggerUtils.get_logger(__name__)


class _Entry(NamedTuple):
    value: str
    stored_at: float


class MemoryCache(ExportableCache):
    """In-memory cache guarded by a lock, with optional time-to-live.

    Expiry is checked only when an entry is read: an expired entry is evicted by ``get``
    and reported as a miss. There is no background sweeper, so ``len()`` may still count
    stale entries until they are next read.

    Args:
        ttl_seconds (float): Entry lifetime. Zero or negative disables expiry.
        clock (Callable[[], float]): Monotonic time source, injectable for tests.
    """

    def __init__(self, ttl_seconds: float = 0, *, clock: Callable[[], float] = time.monotonic) -> None:
        self._ttl: float = ttl_seconds
        self._clock: Callable[[], float] = clock
        self._data: dict[str, _Entry] = {}
        self._lock: threading.Lock = threading.Lock()
        logger.debug("MemoryCache created (ttl=%s)", ttl_seconds)

    @property
    def ttl(self) -> float:
        return self._ttl

    def _is_expired(self, entry: _Entry, now: float) -> bool:
        return self._ttl > 0 and now - entry.stored_at > self._ttl

    async def get(self, key: str) -> str | None:
        with self._lock:
            entry: _Entry | None = self._data.get(key)
            if entry is None:
                return None
            if self._is_expired(entry, self._clock()):
                del self._data[key]
                logger.debug("Evicted expired entry: %s", key[:16])
                return None
            return entry.value

    async def set(self, key: str, value: str) -> None:
        with self._lock:
            self._data[key] = _Entry(value=value, stored_at=self._clock())

    async def entries(self) -> dict[str, str]:
        now: float = self._clock()
        with self._lock:
            return {key: entry.value for key, entry in self._data.items() if not self._is_expired(entry, now)}

    def clear(self) -> None:
        with self._lock:
            self._data.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._data)
