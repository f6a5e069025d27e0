"""Tests for with_retry and RetryableEngine."""

from __future__ import annotations

import asyncio
from unittest.mock import AsyncMock

import pytest

from core.trans.interface import (
    CountMismatchError,
    ProviderError,
    TransInterface,
    TranslationRateLimitError,
)
from core.trans.ratelimit import RateLimitedEngine, RateLimiter
from core.trans.retry import RetryableEngine, RetryConfig, is_retryable, with_retry
from models.translation_models import TranslateRequest


class ScriptedEngine(TransInterface):
    """Engine that raises the queued errors in order, then echoes the texts."""

    def __init__(self, errors: list[Exception]) -> None:
        self.errors: list[Exception] = list(errors)
        self.calls: int = 0

    @staticmethod
    def fetch_engine_name() -> str:
        return ""

    async def translate(self, request: TranslateRequest) -> list[str]:
        self.calls += 1
        if self.errors:
            raise self.errors.pop(0)
        return [text.upper() for text in request.texts]


@pytest.fixture
def sleep_mock(monkeypatch: pytest.MonkeyPatch) -> AsyncMock:
    mock = AsyncMock()
    monkeypatch.setattr("core.trans.retry.asyncio.sleep", mock)
    return mock


def _request() -> TranslateRequest:
    return TranslateRequest(texts=["hola"], target_lang="es")


def test_delay_schedule_is_capped() -> None:
    config = RetryConfig(max_retries=5, base_delay=1.0, max_delay=5.0)
    assert [config.delay_for(retry) for retry in range(1, 6)] == [1.0, 2.0, 4.0, 5.0, 5.0]


def test_is_retryable() -> None:
    assert is_retryable(ProviderError("x", retryable=True)) is True
    assert is_retryable(ProviderError("x")) is False
    assert is_retryable(TranslationRateLimitError("429")) is True
    assert is_retryable(CountMismatchError(2, 1)) is False
    assert is_retryable(TimeoutError()) is False


@pytest.mark.asyncio
async def test_retries_transient_errors_until_success(sleep_mock: AsyncMock) -> None:
    engine = ScriptedEngine([ProviderError("503", retryable=True), TranslationRateLimitError("429")])
    wrapped = RetryableEngine(engine, RetryConfig(max_retries=3, base_delay=0.5, max_delay=10.0))

    assert await wrapped.translate(_request()) == ["HOLA"]
    assert engine.calls == 3
    assert [call.args[0] for call in sleep_mock.await_args_list] == [0.5, 1.0]


@pytest.mark.asyncio
async def test_gives_up_after_max_retries(sleep_mock: AsyncMock) -> None:
    errors: list[Exception] = [ProviderError(f"fail {n}", retryable=True) for n in range(5)]
    engine = ScriptedEngine(errors)
    wrapped = RetryableEngine(engine, RetryConfig(max_retries=2))

    with pytest.raises(ProviderError, match="fail 2"):
        await wrapped.translate(_request())

    assert engine.calls == 3
    assert sleep_mock.await_count == 2


@pytest.mark.asyncio
async def test_non_retryable_error_is_raised_immediately(sleep_mock: AsyncMock) -> None:
    engine = ScriptedEngine([ProviderError("401 unauthorized")])

    with pytest.raises(ProviderError, match="401"):
        await RetryableEngine(engine).translate(_request())

    assert engine.calls == 1
    sleep_mock.assert_not_awaited()


@pytest.mark.asyncio
async def test_count_mismatch_is_not_retried(sleep_mock: AsyncMock) -> None:
    engine = ScriptedEngine([CountMismatchError(expected=1, got=0)])

    with pytest.raises(CountMismatchError):
        await RetryableEngine(engine).translate(_request())

    assert engine.calls == 1
    sleep_mock.assert_not_awaited()


@pytest.mark.asyncio
async def test_zero_retries_makes_single_attempt(sleep_mock: AsyncMock) -> None:
    engine = ScriptedEngine([ProviderError("503", retryable=True)])

    with pytest.raises(ProviderError):
        await with_retry(RetryConfig(max_retries=0), lambda: engine.translate(_request()))

    assert engine.calls == 1
    sleep_mock.assert_not_awaited()


@pytest.mark.asyncio
async def test_cancellation_during_backoff_propagates() -> None:
    engine = ScriptedEngine([ProviderError("503", retryable=True)] * 3)
    wrapped = RetryableEngine(engine, RetryConfig(max_retries=3, base_delay=60.0))

    task: asyncio.Task[list[str]] = asyncio.create_task(wrapped.translate(_request()))
    await asyncio.sleep(0)
    task.cancel()

    with pytest.raises(asyncio.CancelledError):
        await task
    assert engine.calls == 1


@pytest.mark.asyncio
async def test_wrappers_compose_in_either_order(sleep_mock: AsyncMock) -> None:
    limiter = RateLimiter(requests_per_minute=600, burst_size=10)
    inner = ScriptedEngine([ProviderError("503", retryable=True)])
    outer_retry = RetryableEngine(RateLimitedEngine(inner, limiter), RetryConfig(max_retries=1))
    assert await outer_retry.translate(_request()) == ["HOLA"]

    other = ScriptedEngine([ProviderError("503", retryable=True)])
    outer_limit = RateLimitedEngine(RetryableEngine(other, RetryConfig(max_retries=1)), limiter)
    assert await outer_limit.translate(_request()) == ["HOLA"]

    assert sleep_mock.await_count == 2
