"""Tests for MemoryCache.

Covers hit/miss behavior, lazy TTL eviction with an injected clock, and live entry enumeration.
"""

from __future__ import annotations

import pytest

from core.cache.memory_cache import MemoryCache


class FakeClock:
    def __init__(self) -> None:
        self.now: float = 1000.0

    def __call__(self) -> float:
        return self.now


@pytest.mark.asyncio
async def test_get_returns_none_for_missing_key() -> None:
    cache = MemoryCache()
    assert await cache.get("missing") is None


@pytest.mark.asyncio
async def test_set_then_get_and_overwrite() -> None:
    cache = MemoryCache()
    await cache.set("k", "v1")
    await cache.set("k", "v2")

    assert await cache.get("k") == "v2"
    assert len(cache) == 1


@pytest.mark.asyncio
async def test_entries_expire_lazily() -> None:
    clock = FakeClock()
    cache = MemoryCache(ttl_seconds=10, clock=clock)
    await cache.set("k", "v")

    clock.now += 10
    assert await cache.get("k") == "v"

    clock.now += 0.5
    # still stored until read
    assert len(cache) == 1
    assert await cache.get("k") is None
    assert len(cache) == 0


@pytest.mark.asyncio
async def test_zero_ttl_never_expires() -> None:
    clock = FakeClock()
    cache = MemoryCache(ttl_seconds=0, clock=clock)
    await cache.set("k", "v")

    clock.now += 10**9
    assert await cache.get("k") == "v"


@pytest.mark.asyncio
async def test_entries_skip_expired_items() -> None:
    clock = FakeClock()
    cache = MemoryCache(ttl_seconds=5, clock=clock)
    await cache.set("old", "1")
    clock.now += 4
    await cache.set("new", "2")
    clock.now += 2

    assert await cache.entries() == {"new": "2"}


@pytest.mark.asyncio
async def test_clear_and_context_manager() -> None:
    async with MemoryCache() as cache:
        await cache.set("k", "v")
        cache.clear()
        assert await cache.get("k") is None
