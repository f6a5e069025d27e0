"""Bounded exponential-backoff retry for translation engines."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import TYPE_CHECKING

from core.trans.interface import ProviderError, TransInterface
from utils.logger_utils import LoggerUtils

if TYPE_CHECKING:
    import logging
    from collections.abc import Awaitable, Callable

    from models.translation_models import TranslateRequest

__all__: list[str] = ["RetryConfig", "RetryableEngine", "is_retryable", "with_retry"]

logger: logging.Logger = LoggerUtils.get_logger(__name__)


@dataclass(frozen=True)
class RetryConfig:
    """Retry policy.

    Attributes:
        max_retries (int): Additional attempts after the first one.
        base_delay (float): Delay in seconds before the first retry.
        max_delay (float): Upper bound for any single delay in seconds.
    """

    max_retries: int = 3
    base_delay: float = 1.0
    max_delay: float = 30.0

    def delay_for(self, retry: int) -> float:
        """Return the delay before the given retry (1-based): ``min(base * 2**(retry-1), max)``."""
        return min(self.base_delay * (2 ** (retry - 1)), self.max_delay)


def is_retryable(err: BaseException) -> bool:
    """Check whether an error was marked as transient by the engine that raised it.

    Only ProviderError instances carry the flag; every other error, including cancellation
    and timeouts raised by the caller, is not retryable.
    """
    return isinstance(err, ProviderError) and err.retryable


async def with_retry[T](config: RetryConfig, operation: Callable[[], Awaitable[T]]) -> T:
    """Run an operation, retrying retryable failures with exponential backoff.

    The operation is attempted at most ``1 + max_retries`` times. Non-retryable errors and
    cancellation propagate immediately; after the last attempt the last error is raised.

    Args:
        config (RetryConfig): Retry policy.
        operation (Callable[[], Awaitable[T]]): Zero-argument coroutine factory.

    Returns:
        T: The operation's result.

    Raises:
        ProviderError: The last retryable error once all attempts are used.
        Exception: Any non-retryable error raised by the operation.
    """
    attempt: int = 0
    while True:
        try:
            return await operation()
        except ProviderError as err:
            if not err.retryable or attempt >= config.max_retries:
                raise
            attempt += 1
            delay: float = config.delay_for(attempt)
            logger.warning(
                "Retryable translation error (retry %d/%d in %.1fs): %s", attempt, config.max_retries, delay, err
            )
            await asyncio.sleep(delay)


class RetryableEngine(TransInterface):
    """Engine wrapper that retries transient backend failures.

    Args:
        engine (TransInterface): Engine to decorate.
        config (RetryConfig | None): Retry policy. Defaults are used if None.
    """

    def __init__(self, engine: TransInterface, config: RetryConfig | None = None) -> None:
        self._engine: TransInterface = engine
        self._config: RetryConfig = config if config is not None else RetryConfig()

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
    def config(self) -> RetryConfig:
        return self._config

    async def translate(self, request: TranslateRequest) -> list[str]:
        return await with_retry(self._config, lambda: self._engine.translate(request))

    async def close(self) -> None:
        await self._engine.close()
