"""Translation engines and the wrappers applied around them.

The engine contract and its exceptions live in ``core.trans.interface``; rate limiting and retry
are decorators over any engine. The orchestrator lives in ``core.trans.translator`` and is
exported from ``core``.
"""

from core.trans.interface import (
    CountMismatchError,
    ProcessorError,
    ProviderError,
    TransInterface,
    TranslateExceptionError,
    TranslationRateLimitError,
)
from core.trans.ratelimit import RateLimitedEngine, RateLimiter
from core.trans.retry import RetryableEngine, RetryConfig, is_retryable, with_retry

__all__: list[str] = [
    "CountMismatchError",
    "ProcessorError",
    "ProviderError",
    "RateLimitedEngine",
    "RateLimiter",
    "RetryConfig",
    "RetryableEngine",
    "TransInterface",
    "TranslateExceptionError",
    "TranslationRateLimitError",
    "is_retryable",
    "with_retry",
]
