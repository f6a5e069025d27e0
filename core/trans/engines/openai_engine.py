"""OpenAI chat-completions translation engine over aiohttp."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any, ClassVar, Final

import aiohttp
from aiohttp import ClientSession

from core.trans.interface import (
    CountMismatchError,
    ProviderError,
    TransInterface,
    TranslationRateLimitError,
)
from utils.lang_utils import LangUtils
from utils.logger_utils import LoggerUtils

if TYPE_CHECKING:
    import logging

    from models.translation_models import TranslateRequest

__all__: list[str] = ["OpenAITranslation"]

logger: logging.Logger = LoggerUtils.get_logger(__name__)

DEFAULT_MODEL: Final[str] = "gpt-4o-mini"
DEFAULT_TEMPERATURE: Final[float] = 0.3
DEFAULT_BASE_URL: Final[str] = "https://api.openai.com/v1"
DEFAULT_TIMEOUT: Final[float] = 60.0
CONNECT_TIMEOUT: Final[float] = 5.0

HTTP_TOO_MANY_REQUESTS: Final[int] = 429
HTTP_SERVER_ERROR: Final[int] = 500
HTTP_CLIENT_ERROR: Final[int] = 400

_RETRYABLE_PATTERNS: Final[tuple[str, ...]] = (
    "rate limit",
    "timeout",
    "connection refused",
    "temporary",
    "503",
    "502",
    "429",
)

_STYLE_GUIDE: Final[str] = """# Style Guide
- **Natural Flow**: Avoid literal translations. Rephrase sentences to sound completely natural to a native speaker.
- **Vocabulary**: Use precise, culturally relevant terminology. Avoid awkward "translationese" or robotic phrasing.
- **Tone**: Maintain the original intent but adapt the wording to fit the target culture's expectations.
- **Idioms**: Never translate idioms literally. Replace source-language idioms with natural {target} equivalents.
- **HTML/Code Safety**: Do NOT translate HTML tags, class names, IDs, attributes, URLs, email addresses, \
or content inside backticks or <code> blocks.
- **Interpolation**: Do NOT translate variables or placeholders (e.g., {{{{name}}}}, {{count}}, %s, $1).
- **Formatting**: Preserve meaningful whitespace. Use idiomatic punctuation for the target language.
- **Context Hints**: Items may carry a "context" describing where the text appears. Use it to disambiguate, \
but never include it in the output."""

_FORMAT_SECTION: Final[str] = """# Format
Return a valid JSON object with a single key "translations" containing an array of strings \
in the exact same order as the input.
Example: { "translations": ["translated string 1", "translated string 2"] }
- Do NOT wrap in Markdown code blocks.
- Return exactly one translation per input item."""


def _is_retryable_message(message: str) -> bool:
    lowered: str = message.lower()
    return any(pattern in lowered for pattern in _RETRYABLE_PATTERNS)


class OpenAITranslation(TransInterface):
    """Translation engine backed by an OpenAI-compatible chat-completions endpoint.

    The whole batch is sent in one request and the model is asked for a JSON object with
    a "translations" array. HTTP 429 raises TranslationRateLimitError; 5xx responses,
    timeouts and connection failures raise retryable ProviderErrors; other 4xx responses
    raise non-retryable ProviderErrors.

    Attributes:
        ENDPOINT (ClassVar[str]): Path appended to the base URL.
    """

    ENDPOINT: ClassVar[str] = "/chat/completions"

    def __init__(
        self,
        *,
        api_key: str | None = None,
        model: str = DEFAULT_MODEL,
        temperature: float = DEFAULT_TEMPERATURE,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
        session: ClientSession | None = None,
    ) -> None:
        """Initialize the engine.

        Args:
            api_key (str | None): API key. Read from OPENAI_API_KEY when None.
            model (str): Model identifier.
            temperature (float): Sampling temperature. Zero or negative uses 0.3.
            base_url (str): API base URL, for OpenAI-compatible gateways.
            timeout (float): Total request timeout in seconds. Zero or negative disables it.
            session (ClientSession | None): Externally owned session. One is created lazily if None.
        """
        self._api_key: str = api_key if api_key is not None else self.get_authentication_key()
        self._model: str = model or DEFAULT_MODEL
        self._temperature: float = temperature if temperature > 0 else DEFAULT_TEMPERATURE
        self._base_url: str = (base_url or DEFAULT_BASE_URL).rstrip("/")
        self._timeout: float = timeout
        self._session: ClientSession | None = session
        self._owns_session: bool = session is None
        if not self._api_key:
            logger.warning("No API key configured for the OpenAI engine; requests will be rejected")

    @staticmethod
    def fetch_engine_name() -> str:
        return "openai"

    @property
    def model_name(self) -> str:
        return self._model

    @property
    def session(self) -> ClientSession:
        """Return the HTTP session, creating it on first use."""
        if self._session is None or self._session.closed:
            self._session = ClientSession()
            self._owns_session = True
            logger.debug("%s session initialized", self.__class__.__name__)
        return self._session

    async def close(self) -> None:
        if self._owns_session and self._session is not None and not self._session.closed:
            await self._session.close()
            logger.info("%s session closed", self.__class__.__name__)
        self._session = None

    async def translate(self, request: TranslateRequest) -> list[str]:
        if not request.texts:
            return []

        payload: dict[str, Any] = {
            "model": self._model,
            "messages": [
                {"role": "system", "content": self.build_system_prompt(request)},
                {"role": "user", "content": self.build_user_message(request)},
            ],
            "temperature": self._temperature,
            "response_format": {"type": "json_object"},
        }
        response: dict[str, Any] = await self._post_chat(payload)

        try:
            content: str = response["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError) as err:
            msg = "no response from OpenAI"
            raise ProviderError(msg, retryable=True) from err

        return self.parse_response(content, len(request.texts))

    def _client_timeout(self) -> aiohttp.ClientTimeout:
        if self._timeout <= 0:
            return aiohttp.ClientTimeout(total=None)
        if self._timeout < CONNECT_TIMEOUT:
            return aiohttp.ClientTimeout(total=self._timeout)
        return aiohttp.ClientTimeout(connect=CONNECT_TIMEOUT, total=self._timeout)

    async def _post_chat(self, payload: dict[str, Any]) -> dict[str, Any]:
        """POST a chat-completions request and return the decoded JSON body.

        Raises:
            TranslationRateLimitError: On HTTP 429.
            ProviderError: On any other HTTP or transport failure.
        """
        url: str = f"{self._base_url}{self.ENDPOINT}"
        headers: dict[str, str] = {
            "Authorization": f"Bearer {self._api_key}",
            "Content-Type": "application/json",
        }
        logger.debug("[POST] url=%s model=%s", url, self._model)

        msg: str
        try:
            async with self.session.post(
                url, json=payload, headers=headers, timeout=self._client_timeout()
            ) as resp:
                body: str = await resp.text()
                status: int = resp.status
        except TimeoutError as err:
            msg = "OpenAI API call failed: request timeout"
            raise ProviderError(msg, retryable=True) from err
        except aiohttp.ClientConnectionError as err:
            msg = f"OpenAI API call failed: connection error: {err}"
            raise ProviderError(msg, retryable=True) from err
        except aiohttp.ClientError as err:
            msg = f"OpenAI API call failed: {err}"
            raise ProviderError(msg, retryable=_is_retryable_message(str(err))) from err

        if status == HTTP_TOO_MANY_REQUESTS:
            msg = f"OpenAI API rate limit exceeded: {body[:200]}"
            raise TranslationRateLimitError(msg)
        if status >= HTTP_SERVER_ERROR:
            msg = f"OpenAI API server error {status}: {body[:200]}"
            raise ProviderError(msg, retryable=True)
        if status >= HTTP_CLIENT_ERROR:
            msg = f"OpenAI API rejected the request ({status}): {body[:200]}"
            raise ProviderError(msg, retryable=False)

        try:
            decoded: Any = json.loads(body)
        except json.JSONDecodeError as err:
            msg = "invalid JSON body from OpenAI"
            raise ProviderError(msg, retryable=False) from err
        if not isinstance(decoded, dict):
            msg = "unexpected response body from OpenAI"
            raise ProviderError(msg, retryable=False)
        return decoded

    @staticmethod
    def build_system_prompt(request: TranslateRequest) -> str:
        """Build the system prompt from the request's languages, register and options.

        Args:
            request (TranslateRequest): The batch being translated.

        Returns:
            str: Markdown-sectioned instructions for the model.
        """
        target: str = LangUtils.language_name(request.target_lang)
        source: str = LangUtils.language_name(request.source_lang or "en")
        context_text: str = (
            f"The content is for: {request.context}. Adapt the tone to be appropriate for this context."
            if request.context
            else "The content is general web content."
        )

        sections: list[str] = [
            "# Role\n"
            f"You are an expert native translator. You translate content from {source} to {target} "
            "with the fluency and nuance of a highly educated native speaker.",
            f"# Context\n{context_text}",
            f"# Register\n{request.style.register}",
            f"# Task\nTranslate the provided texts into idiomatic {target}.",
            _STYLE_GUIDE.format(target=target),
        ]

        locale_hint: str = LangUtils.locale_clarification(request.target_lang)
        if locale_hint:
            sections[-1] += f"\n- **Locale**: {locale_hint}"

        if request.glossary:
            lines: list[str] = [
                "# Glossary",
                "When you encounter these phrases, prefer these translations (unless context demands otherwise):",
            ]
            lines.extend(f'- "{src}" → {tgt}' for src, tgt in request.glossary.items())
            sections.append("\n".join(lines))

        sections.append(
            "# Quality Check\n"
            f"After translating each string, verify it sounds like native {target} and not a calque. "
            "If any phrase sounds like a literal translation, rewrite it naturally."
        )
        sections.append(_FORMAT_SECTION)

        if request.excluded_terms:
            terms: str = "\n- ".join(request.excluded_terms)
            sections.append(
                "# Exclusions\n"
                f"Do NOT translate the following terms. Keep them exactly as they appear in the source:\n- {terms}"
            )

        return "\n\n".join(sections)

    @staticmethod
    def build_user_message(request: TranslateRequest) -> str:
        """Encode the texts as a JSON array, or as ``{"items": [...]}`` when any text carries context."""
        if not request.has_text_contexts():
            return json.dumps(request.texts, ensure_ascii=False)

        items: list[dict[str, str]] = []
        for index, text in enumerate(request.texts):
            item: dict[str, str] = {"text": text}
            context: str = request.text_contexts[index] if index < len(request.text_contexts) else ""
            if context:
                item["context"] = context
            items.append(item)
        return json.dumps({"items": items}, ensure_ascii=False)

    @staticmethod
    def parse_response(content: str, expected_count: int) -> list[str]:
        """Extract the translations array from the model output.

        Looks for a "translations" key, then for the first array value of the object, then for
        a bare JSON array.

        Args:
            content (str): Raw message content returned by the model.
            expected_count (int): Number of texts sent.

        Returns:
            list[str]: Translations in input order.

        Raises:
            CountMismatchError: If the array length differs from expected_count.
            ProviderError: If no array can be found (not retryable).
        """
        try:
            decoded: Any = json.loads(content)
        except (json.JSONDecodeError, TypeError) as err:
            msg = "invalid response format from OpenAI"
            raise ProviderError(msg, retryable=False) from err

        values: list[Any] | None = None
        if isinstance(decoded, dict):
            translations: Any = decoded.get("translations")
            if isinstance(translations, list):
                values = translations
            else:
                values = next((value for value in decoded.values() if isinstance(value, list)), None)
        elif isinstance(decoded, list):
            values = decoded

        if values is None:
            msg = "invalid response format from OpenAI"
            raise ProviderError(msg, retryable=False)

        results: list[str] = [value if isinstance(value, str) else str(value) for value in values]
        if len(results) != expected_count:
            raise CountMismatchError(expected=expected_count, got=len(results))
        return results
