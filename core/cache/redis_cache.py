"""Network-backed translation cache on top of Redis."""

from __future__ import annotations

from typing import TYPE_CHECKING, ClassVar, Self

from redis.asyncio import Redis
from redis.exceptions import RedisError

from core.cache.interface import CacheError, ExportableCache
from utils.logger_utils import LoggerUtils

if TYPE_CHECKING:
    import logging

__all__: list[str] = ["RedisCache"]

logger: logging.Logger = LoggerUtils.get_logger(__name__)


class RedisCache(ExportableCache):
    """Cache that stores translations in Redis under a common key prefix.

    Expiry is applied by the server at write time, so entries outlive the process.
    Read failures are logged and reported as misses; write failures raise CacheError.

    Attributes:
        DEFAULT_KEY_PREFIX (ClassVar[str]): Prefix used when none is given.
        SCAN_BATCH_SIZE (ClassVar[int]): COUNT hint used when enumerating entries.
    """

    DEFAULT_KEY_PREFIX: ClassVar[str] = "tlai:"
    SCAN_BATCH_SIZE: ClassVar[int] = 500

    def __init__(self, client: Redis, ttl_seconds: int = 0, key_prefix: str = DEFAULT_KEY_PREFIX) -> None:
        """Wrap an existing client.

        Args:
            client (Redis): Async Redis client created with ``decode_responses=True``.
            ttl_seconds (int): Entry lifetime in seconds. Zero or negative disables expiry.
            key_prefix (str): Prefix prepended to every key.
        """
        self._client: Redis = client
        self._ttl: int = int(ttl_seconds)
        self._prefix: str = key_prefix
        self._closed: bool = False

    @classmethod
    async def from_url(cls, url: str, ttl_seconds: int = 0, key_prefix: str = DEFAULT_KEY_PREFIX) -> Self:
        """Connect to Redis and verify the connection.

        Args:
            url (str): Redis URL such as ``redis://localhost:6379/0``.
            ttl_seconds (int): Entry lifetime in seconds.
            key_prefix (str): Prefix prepended to every key.

        Returns:
            Self: A connected cache.

        Raises:
            CacheError: If the server cannot be reached.
        """
        client: Redis = Redis.from_url(url, decode_responses=True)
        cache: Self = cls(client, ttl_seconds=ttl_seconds, key_prefix=key_prefix)
        try:
            await cache.ping()
        except CacheError:
            await cache.close()
            raise
        logger.info("Connected to Redis cache (prefix='%s', ttl=%s)", key_prefix, ttl_seconds)
        return cache

    @property
    def key_prefix(self) -> str:
        return self._prefix

    def _full_key(self, key: str) -> str:
        return f"{self._prefix}{key}"

    async def ping(self) -> None:
        """Check that the server responds.

        Raises:
            CacheError: If the ping fails.
        """
        try:
            await self._client.ping()
        except (RedisError, OSError) as err:
            msg: str = f"Redis is not reachable: {err}"
            raise CacheError(msg) from err

    async def get(self, key: str) -> str | None:
        try:
            value: str | bytes | None = await self._client.get(self._full_key(key))
        except (RedisError, OSError) as err:
            logger.warning("Redis read failed for %s; treating as a miss: %s", key[:16], err)
            return None
        if isinstance(value, bytes):
            return value.decode("utf-8")
        return value

    async def set(self, key: str, value: str) -> None:
        try:
            if self._ttl > 0:
                await self._client.set(self._full_key(key), value, ex=self._ttl)
            else:
                await self._client.set(self._full_key(key), value)
        except (RedisError, OSError) as err:
            msg: str = f"Redis write failed for key {key[:16]}: {err}"
            raise CacheError(msg) from err

    async def entries(self) -> dict[str, str]:
        """Enumerate every entry under the prefix with SCAN.

        Returns:
            dict[str, str]: Keys with the prefix removed, mapped to their values.

        Raises:
            CacheError: If the scan fails.
        """
        result: dict[str, str] = {}
        try:
            async for full_key in self._client.scan_iter(match=f"{self._prefix}*", count=self.SCAN_BATCH_SIZE):
                name: str = full_key.decode("utf-8") if isinstance(full_key, bytes) else full_key
                value: str | bytes | None = await self._client.get(name)
                if value is None:
                    # expired between SCAN and GET
                    continue
                result[name.removeprefix(self._prefix)] = (
                    value.decode("utf-8") if isinstance(value, bytes) else value
                )
        except (RedisError, OSError) as err:
            msg: str = f"Failed to enumerate Redis entries: {err}"
            raise CacheError(msg) from err
        return result

    async def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        try:
            await self._client.aclose()
        except (RedisError, OSError) as err:
            logger.error("Error closing Redis connection: %s", err)
        else:
            logger.info("Redis cache connection closed")
