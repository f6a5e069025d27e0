"""Batch cache lookups for the translator.

Both lookups return the same result for the same input: a map of fingerprint to cached
translation for hits, and the missed units deduplicated by fingerprint in first-occurrence order.
A read that raises CacheError is logged and counted as a miss.
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, Final

from core.cache.interface import CacheError
from utils.hash_utils import HashUtils
from utils.logger_utils import LoggerUtils

if TYPE_CHECKING:
    import logging
    from collections.abc import Callable

    from core.cache.interface import CacheInterface
    from models.text_models import TextUnit

__all__: list[str] = ["DEFAULT_PARALLEL_THRESHOLD", "parallel_cache_lookup", "sequential_cache_lookup"]

logger: logging.Logger = LoggerUtils.get_logger(__name__)

DEFAULT_PARALLEL_THRESHOLD: Final[int] = 5

type LookupResult = tuple[dict[str, str], list[TextUnit]]


def _unique_units(units: list[TextUnit]) -> list[TextUnit]:
    seen: set[str] = set()
    unique: list[TextUnit] = []
    for unit in units:
        if unit.fingerprint not in seen:
            seen.add(unit.fingerprint)
            unique.append(unit)
    return unique


def _key_builder(target_lang: str, key_builder: Callable[[str], str] | None) -> Callable[[str], str]:
    if key_builder is not None:
        return key_builder
    return lambda fingerprint: HashUtils.cache_key(fingerprint, target_lang)


async def sequential_cache_lookup(
    cache: CacheInterface | None,
    units: list[TextUnit],
    target_lang: str,
    *,
    key_builder: Callable[[str], str] | None = None,
) -> LookupResult:
    """Look up one unique fingerprint at a time.

    Args:
        cache (CacheInterface | None): Cache to read. None means every unit misses.
        units (list[TextUnit]): Units to resolve.
        target_lang (str): Target language used in the cache key.
        key_builder (Callable[[str], str] | None): Maps a fingerprint to its cache key.
            Defaults to ``HashUtils.cache_key(fingerprint, target_lang)``.

    Returns:
        LookupResult: Hits keyed by fingerprint, and the ordered unique misses.
    """
    if cache is None or not units:
        return {}, list(units)

    build_key: Callable[[str], str] = _key_builder(target_lang, key_builder)
    hits: dict[str, str] = {}
    misses: list[TextUnit] = []
    for unit in _unique_units(units):
        key: str = build_key(unit.fingerprint)
        try:
            value: str | None = await cache.get(key)
        except CacheError as err:
            logger.warning("Cache read failed for %s, treating as miss: %s", key[:16], err)
            value = None
        if value is None:
            misses.append(unit)
        else:
            hits[unit.fingerprint] = value
    return hits, misses


async def parallel_cache_lookup(
    cache: CacheInterface | None,
    units: list[TextUnit],
    target_lang: str,
    *,
    key_builder: Callable[[str], str] | None = None,
) -> LookupResult:
    """Look up every unique fingerprint concurrently, one task each.

    Results complete in any order but are reassembled in input order, so the output is
    identical to ``sequential_cache_lookup``. Cancelling the caller cancels every pending read.

    Args:
        cache (CacheInterface | None): Cache to read. None means every unit misses.
        units (list[TextUnit]): Units to resolve.
        target_lang (str): Target language used in the cache key.
        key_builder (Callable[[str], str] | None): Maps a fingerprint to its cache key.

    Returns:
        LookupResult: Hits keyed by fingerprint, and the ordered unique misses.
    """
    if cache is None or not units:
        return {}, list(units)

    build_key: Callable[[str], str] = _key_builder(target_lang, key_builder)
    unique: list[TextUnit] = _unique_units(units)
    logger.debug("Parallel cache lookup: %d units, %d unique", len(units), len(unique))

    results: list[str | None | BaseException] = await asyncio.gather(
        *(cache.get(build_key(unit.fingerprint)) for unit in unique), return_exceptions=True
    )

    hits: dict[str, str] = {}
    misses: list[TextUnit] = []
    for unit, result in zip(unique, results, strict=True):
        value: str | None
        if isinstance(result, CacheError):
            logger.warning("Cache read failed for %s, treating as miss: %s", unit.fingerprint[:16], result)
            value = None
        elif isinstance(result, BaseException):
            raise result
        else:
            value = result
        if value is None:
            misses.append(unit)
        else:
            hits[unit.fingerprint] = value
    return hits, misses
