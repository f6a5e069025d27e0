"""This module defines the abstract base class for translation engines and the translation exceptions.

Engines receive a whole batch of texts in one TranslateRequest and must return exactly one
translated string per input text. Backend errors carry a retryability flag consumed by the
retry wrapper.
"""

from __future__ import annotations

import os
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, ClassVar, Self

from utils.logger_utils import LoggerUtils

if TYPE_CHECKING:
    import logging

    from models.translation_models import TranslateRequest

__all__: list[str] = [
    "CountMismatchError",
    "ProcessorError",
    "ProviderError",
    "TransInterface",
    "TranslateExceptionError",
    "TranslationRateLimitError",
]

logger: logging.Logger = LoggerUtils.get_logger(__name__)


class TranslateExceptionError(Exception):
    """An error occurred during the translation process."""


class ProviderError(TranslateExceptionError):
    """The translation backend failed.

    Attributes:
        retryable (bool): Whether the failure is transient and the request may be retried.
    """

    def __init__(self, message: str, *, retryable: bool = False) -> None:
        super().__init__(message)
        self.retryable: bool = retryable


class TranslationRateLimitError(ProviderError):
    """The translation request was rate-limited by the API. Always retryable."""

    def __init__(self, message: str) -> None:
        super().__init__(message, retryable=True)


class CountMismatchError(TranslateExceptionError):
    """The backend returned a different number of results than texts requested. Never retried."""

    def __init__(self, expected: int, got: int) -> None:
        super().__init__(f"translation count mismatch: expected {expected}, got {got}")
        self.expected: int = expected
        self.got: int = got


class ProcessorError(TranslateExceptionError):
    """Extracting units from content or reinserting translations failed.

    Attributes:
        content_type (str): Content type of the processor involved.
    """

    def __init__(self, message: str, content_type: str = "") -> None:
        super().__init__(message)
        self.content_type: str = content_type


class TransInterface(ABC):
    """Abstract base class for translation engines.

    Subclasses must implement batch translation. Wrappers that decorate another engine
    (rate limiting, retry) implement the same interface so they are interchangeable with it.

    Attributes:
        registered (ClassVar[dict[str, type[TransInterface]]]): A class variable that holds a dictionary of
            registered translation engine classes, keyed by their distinguished names.
    """

    registered: ClassVar[dict[str, type[TransInterface]]] = {}

    def __init_subclass__(cls, **kwargs) -> None:
        """Register the subclass in the registered dictionary.

        Subclasses whose fetch_engine_name() returns an empty string are not registered;
        this is used by wrapper engines.

        Args:
            **kwargs: Additional keyword arguments passed to parent class.
        """
        super().__init_subclass__(**kwargs)
        if not hasattr(cls, "fetch_engine_name") or not callable(cls.fetch_engine_name):
            msg = "Subclasses of TransInterface must implement the static method fetch_engine_name()."
            raise TypeError(msg)

        name: object = cls.fetch_engine_name()
        if not isinstance(name, str) or name == "":
            return

        if name in cls.registered:
            msg: str = f"A translation engine with the name '{name}' is already registered."
            raise ValueError(msg)

        cls.registered[name] = cls

    @classmethod
    def create(cls, name: str, **kwargs) -> TransInterface:
        """Instantiate a registered engine by name.

        Args:
            name (str): Distinguished engine name.
            **kwargs: Keyword arguments for the engine constructor.

        Returns:
            TransInterface: The new engine.

        Raises:
            ValueError: If no engine is registered under the name.
        """
        engine_cls: type[TransInterface] | None = cls.registered.get(name)
        if engine_cls is None:
            known: str = ", ".join(sorted(cls.registered)) or "none"
            msg: str = f"Unknown translation engine '{name}'. Registered engines: {known}"
            raise ValueError(msg)
        logger.debug("Creating translation engine '%s'", name)
        return engine_cls(**kwargs)

    @property
    def engine_name(self) -> str:
        """Get the distinguished name of the translation engine."""
        return self.fetch_engine_name()

    @property
    def model_name(self) -> str:
        """Identifier of the model behind the engine, or an empty string if not applicable."""
        return ""

    @staticmethod
    @abstractmethod
    def fetch_engine_name() -> str:
        """Fetch the distinguished name of the translation engine.

        This method is called during class registration in __init_subclass__, so the
        implementation must be available at subclass definition time.

        Returns:
            str: The distinguished name of the translation engine.
        """
        raise NotImplementedError

    @abstractmethod
    async def translate(self, request: TranslateRequest) -> list[str]:
        """Translate a batch of texts.

        Args:
            request (TranslateRequest): Texts, per-text contexts, languages, and translation options.

        Returns:
            list[str]: One translation per input text, in input order.

        Raises:
            ProviderError: If the backend fails. ``retryable`` tells whether a retry may succeed.
            TranslationRateLimitError: If the request is rate-limited by the API.
            CountMismatchError: If the backend returns the wrong number of results.
        """
        raise NotImplementedError

    async def close(self) -> None:  # noqa: B027
        """Release resources held by the engine. The default does nothing."""

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        _ = exc_type, exc_val, exc_tb
        await self.close()

    def get_authentication_key(self) -> str:
        """Retrieve the API key from environment variables.

        The key is read from a variable named after the engine's distinguished name with the
        suffix "_API_KEY". For example, the "openai" engine reads "OPENAI_API_KEY".

        Returns:
            str: The API key, or an empty string if the environment variable is not set.
        """
        return os.getenv(f"{self.engine_name.upper()}_API_KEY", "")
