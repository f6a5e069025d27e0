"""Tests for OpenAITranslation.

HTTP is replaced either at the ``_post_chat`` seam or by a fake aiohttp session.
"""

from __future__ import annotations

import json
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import aiohttp
import pytest

from core.trans.engines.openai_engine import OpenAITranslation
from core.trans.interface import (
    CountMismatchError,
    ProviderError,
    TransInterface,
    TranslationRateLimitError,
)
from models.translation_models import TranslateRequest, TranslationStyle


class FakeResponse:
    def __init__(self, status: int, body: str) -> None:
        self.status: int = status
        self._body: str = body

    async def text(self) -> str:
        return self._body

    async def __aenter__(self) -> FakeResponse:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        _ = exc_type, exc_val, exc_tb


class FakeSession:
    def __init__(self, response: FakeResponse | None = None, error: Exception | None = None) -> None:
        self.response: FakeResponse | None = response
        self.error: Exception | None = error
        self.closed: bool = False
        self.calls: list[dict[str, Any]] = []

    def post(self, url: str, **kwargs: Any) -> FakeResponse:
        self.calls.append({"url": url, **kwargs})
        if self.error is not None:
            raise self.error
        assert self.response is not None
        return self.response

    async def close(self) -> None:
        self.closed = True


def _completion(content: str) -> dict[str, Any]:
    return {"choices": [{"message": {"role": "assistant", "content": content}}]}


def _engine(session: Any = None) -> OpenAITranslation:
    return OpenAITranslation(api_key="sk-test", session=session)


def _request(**kwargs: Any) -> TranslateRequest:
    return TranslateRequest(texts=kwargs.pop("texts", ["Hello", "World"]), target_lang="es_MX", **kwargs)


def test_engine_is_registered() -> None:
    engine: TransInterface = TransInterface.create("openai", api_key="sk-test", model="gpt-4o")

    assert isinstance(engine, OpenAITranslation)
    assert engine.engine_name == "openai"
    assert engine.model_name == "gpt-4o"


def test_api_key_defaults_to_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("OPENAI_API_KEY", "sk-env")

    assert OpenAITranslation()._api_key == "sk-env"  # noqa: SLF001


@pytest.mark.asyncio
async def test_translate_builds_payload_and_parses_translations(monkeypatch: pytest.MonkeyPatch) -> None:
    engine: OpenAITranslation = _engine()
    post = AsyncMock(return_value=_completion('{"translations": ["Hola", "Mundo"]}'))
    monkeypatch.setattr(engine, "_post_chat", post)

    result: list[str] = await engine.translate(_request())

    assert result == ["Hola", "Mundo"]
    payload: dict[str, Any] = post.await_args.args[0]
    assert payload["model"] == "gpt-4o-mini"
    assert payload["temperature"] == pytest.approx(0.3)
    assert payload["response_format"] == {"type": "json_object"}
    assert [message["role"] for message in payload["messages"]] == ["system", "user"]
    assert json.loads(payload["messages"][1]["content"]) == ["Hello", "World"]


@pytest.mark.asyncio
async def test_empty_batch_skips_the_backend(monkeypatch: pytest.MonkeyPatch) -> None:
    engine: OpenAITranslation = _engine()
    post = AsyncMock()
    monkeypatch.setattr(engine, "_post_chat", post)

    assert await engine.translate(_request(texts=[])) == []
    post.assert_not_awaited()


@pytest.mark.asyncio
async def test_missing_choices_is_retryable(monkeypatch: pytest.MonkeyPatch) -> None:
    engine: OpenAITranslation = _engine()
    monkeypatch.setattr(engine, "_post_chat", AsyncMock(return_value={"choices": []}))

    with pytest.raises(ProviderError) as exc_info:
        await engine.translate(_request())

    assert exc_info.value.retryable is True


def test_system_prompt_sections() -> None:
    request: TranslateRequest = _request(
        context="E-commerce website",
        glossary={"cart": "carrito"},
        excluded_terms=["Acme", "SKU"],
        style=TranslationStyle.FORMAL,
    )

    prompt: str = OpenAITranslation.build_system_prompt(request)

    assert "from English (United States) to Spanish (Mexico)" in prompt
    assert "The content is for: E-commerce website." in prompt
    assert TranslationStyle.FORMAL.register in prompt
    assert "Mexican Spanish" in prompt
    assert '- "cart" → carrito' in prompt
    assert "# Exclusions" in prompt
    assert "- Acme\n- SKU" in prompt
    assert '"translations"' in prompt


def test_system_prompt_defaults() -> None:
    prompt: str = OpenAITranslation.build_system_prompt(TranslateRequest(texts=["x"], target_lang="xx_YY"))

    assert "The content is general web content." in prompt
    assert "into idiomatic xx_YY" in prompt
    assert "# Glossary" not in prompt
    assert "# Exclusions" not in prompt


def test_user_message_with_contexts() -> None:
    request: TranslateRequest = _request(text_contexts=["in <button>", ""])

    message: Any = json.loads(OpenAITranslation.build_user_message(request))

    assert message == {"items": [{"text": "Hello", "context": "in <button>"}, {"text": "World"}]}


@pytest.mark.parametrize(
    ("content", "expected"),
    [
        ('{"translations": ["a", "b"]}', ["a", "b"]),
        ('{"result": ["a", "b"]}', ["a", "b"]),
        ('["a", "b"]', ["a", "b"]),
        ('{"translations": ["a", 2]}', ["a", "2"]),
    ],
)
def test_parse_response_shapes(content: str, expected: list[str]) -> None:
    assert OpenAITranslation.parse_response(content, 2) == expected


def test_parse_response_count_mismatch() -> None:
    with pytest.raises(CountMismatchError) as exc_info:
        OpenAITranslation.parse_response('{"translations": ["a"]}', 2)

    assert (exc_info.value.expected, exc_info.value.got) == (2, 1)


@pytest.mark.parametrize("content", ["not json", '{"translations": "a"}', '"a"'])
def test_parse_response_invalid_format_is_not_retryable(content: str) -> None:
    with pytest.raises(ProviderError, match="invalid response format") as exc_info:
        OpenAITranslation.parse_response(content, 1)

    assert exc_info.value.retryable is False


@pytest.mark.asyncio
async def test_post_chat_success() -> None:
    session = FakeSession(FakeResponse(200, json.dumps(_completion('["Hola"]'))))
    engine: OpenAITranslation = _engine(session)

    assert await engine.translate(_request(texts=["Hello"])) == ["Hola"]
    call: dict[str, Any] = session.calls[0]
    assert call["url"] == "https://api.openai.com/v1/chat/completions"
    assert call["headers"]["Authorization"] == "Bearer sk-test"
    assert isinstance(call["timeout"], aiohttp.ClientTimeout)


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("status", "error_type", "retryable"),
    [
        (429, TranslationRateLimitError, True),
        (500, ProviderError, True),
        (503, ProviderError, True),
        (400, ProviderError, False),
        (401, ProviderError, False),
    ],
)
async def test_post_chat_status_classification(status: int, error_type: type[Exception], *, retryable: bool) -> None:
    engine: OpenAITranslation = _engine(FakeSession(FakeResponse(status, '{"error": "x"}')))

    with pytest.raises(error_type) as exc_info:
        await engine.translate(_request())

    assert exc_info.value.retryable is retryable


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "error",
    [TimeoutError(), aiohttp.ServerDisconnectedError(), aiohttp.ClientConnectionError("refused")],
)
async def test_transport_failures_are_retryable(error: Exception) -> None:
    engine: OpenAITranslation = _engine(FakeSession(error=error))

    with pytest.raises(ProviderError) as exc_info:
        await engine.translate(_request())

    assert exc_info.value.retryable is True


@pytest.mark.asyncio
async def test_invalid_json_body_is_not_retryable() -> None:
    engine: OpenAITranslation = _engine(FakeSession(FakeResponse(200, "<html>gateway</html>")))

    with pytest.raises(ProviderError) as exc_info:
        await engine.translate(_request())

    assert exc_info.value.retryable is False


@pytest.mark.asyncio
async def test_close_keeps_external_session_open() -> None:
    session = FakeSession()
    engine: OpenAITranslation = _engine(session)

    await engine.close()

    assert session.closed is False


@pytest.mark.asyncio
async def test_close_closes_owned_session(monkeypatch: pytest.MonkeyPatch) -> None:
    session = MagicMock(closed=False)
    session.close = AsyncMock()
    monkeypatch.setattr("core.trans.engines.openai_engine.ClientSession", MagicMock(return_value=session))
    engine = OpenAITranslation(api_key="sk-test")

    assert engine.session is session
    await engine.close()

    session.close.assert_awaited_once()
