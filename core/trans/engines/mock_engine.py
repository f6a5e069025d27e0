"""Deterministic in-memory engine for tests and offline runs."""

from __future__ import annotations

from typing import TYPE_CHECKING, Final

from core.trans.interface import TransInterface
from utils.logger_utils import LoggerUtils

if TYPE_CHECKING:
    import logging

    from models.translation_models import TranslateRequest

__all__: list[str] = ["DEFAULT_MOCK_TRANSLATIONS", "MockTranslation"]

logger: logging.Logger = LoggerUtils.get_logger(__name__)

DEFAULT_MOCK_TRANSLATIONS: Final[dict[str, str]] = {
    "Hello": "Hola",
    "World": "Mundo",
    "Hello World": "Hola Mundo",
    "Welcome to our site.": "Bienvenido a nuestro sitio.",
}


class MockTranslation(TransInterface):
    """Engine that looks texts up in a fixed table.

    Unknown texts come back wrapped in brackets so untranslated output is easy to spot.

    Attributes:
        translations (dict[str, str]): Lookup table of source text to translation.
        call_count (int): Number of ``translate`` calls since creation or the last reset.
        last_request (TranslateRequest | None): The most recent request.
    """

    def __init__(self, translations: dict[str, str] | None = None, **kwargs) -> None:
        _ = kwargs
        self.translations: dict[str, str] = (
            dict(translations) if translations is not None else dict(DEFAULT_MOCK_TRANSLATIONS)
        )
        self.call_count: int = 0
        self.last_request: TranslateRequest | None = None

    @staticmethod
    def fetch_engine_name() -> str:
        return "mock"

    @property
    def model_name(self) -> str:
        return "mock"

    async def translate(self, request: TranslateRequest) -> list[str]:
        self.call_count += 1
        self.last_request = request
        logger.debug("Mock translating %d texts to %s", len(request.texts), request.target_lang)
        return [self.translations.get(text, f"[{text}]") for text in request.texts]

    def reset(self) -> None:
        self.call_count = 0
        self.last_request = None
