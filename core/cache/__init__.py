"""Translation cache package.

Provides the cache contract, in-memory and Redis implementations, export/import of
cache snapshots, and batch cache lookup helpers.
"""

from __future__ import annotations

from core.cache.export import CacheExporter, CacheImporter
from core.cache.interface import CacheError, CacheInterface, ExportableCache
from core.cache.memory_cache import MemoryCache
from core.cache.parallel import DEFAULT_PARALLEL_THRESHOLD, parallel_cache_lookup, sequential_cache_lookup
from core.cache.redis_cache import RedisCache

__all__: list[str] = [
    "DEFAULT_PARALLEL_THRESHOLD",
    "CacheError",
    "CacheExporter",
    "CacheImporter",
    "CacheInterface",
    "ExportableCache",
    "MemoryCache",
    "RedisCache",
    "parallel_cache_lookup",
    "sequential_cache_lookup",
]
