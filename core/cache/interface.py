"""Abstract cache contract shared by the translator and the export tooling."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Self

__all__: list[str] = ["CacheError", "CacheInterface", "ExportableCache"]


class CacheError(Exception):
    """A cache operation failed.

    Never fatal to a translation pass; the translator logs it and treats the entry as missing.
    """


class CacheInterface(ABC):
    """Key-value store for translated text keyed by composite cache key.

    Implementations must be safe for concurrent use from multiple tasks without external locking.
    """

    @abstractmethod
    async def get(self, key: str) -> str | None:
        """Look up a cached translation.

        Args:
            key (str): Composite cache key.

        Returns:
            str | None: The cached value, or None on a miss.
        """
        raise NotImplementedError

    @abstractmethod
    async def set(self, key: str, value: str) -> None:
        """Store a translation.

        Args:
            key (str): Composite cache key.
            value (str): Translated text.

        Raises:
            CacheError: If the value could not be stored.
        """
        raise NotImplementedError

    async def close(self) -> None:  # noqa: B027
        """Release any resources held by the cache. The default does nothing."""

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        _ = exc_type, exc_val, exc_tb
        await self.close()


class ExportableCache(CacheInterface):
    """A cache that can enumerate its live entries for snapshotting."""

    @abstractmethod
    async def entries(self) -> dict[str, str]:
        """Return every unexpired entry.

        Returns:
            dict[str, str]: Mapping of cache key to value.

        Raises:
            CacheError: If the entries could not be enumerated.
        """
        raise NotImplementedError
