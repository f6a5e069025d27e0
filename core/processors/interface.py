"""Content processor contract.

A processor turns one content type into TextUnits and puts translations back. The translator
treats the parsed form returned by ``extract`` as opaque and hands it back unchanged to ``apply``.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, ClassVar

from utils.logger_utils import LoggerUtils

if TYPE_CHECKING:
    import logging

    from models.text_models import TextUnit

__all__: list[str] = ["ContentProcessor"]

logger: logging.Logger = LoggerUtils.get_logger(__name__)


class ContentProcessor(ABC):
    """Abstract base class for format-specific extraction and reinsertion.

    Processors must not keep per-call state: one instance serves many concurrent calls.

    Attributes:
        registered (ClassVar[dict[str, type[ContentProcessor]]]): Processor classes keyed by content type.
    """

    registered: ClassVar[dict[str, type[ContentProcessor]]] = {}

    def __init_subclass__(cls, **kwargs) -> None:
        """Register the subclass under its content type.

        Subclasses returning an empty content type are not registered.
        """
        super().__init_subclass__(**kwargs)
        name: object = cls.content_type()
        if not isinstance(name, str) or name == "":
            return

        if name in cls.registered:
            msg: str = f"A content processor for '{name}' is already registered."
            raise ValueError(msg)

        cls.registered[name] = cls

    @classmethod
    def default_processors(cls) -> dict[str, ContentProcessor]:
        """Instantiate one processor per registered content type."""
        return {name: processor_cls() for name, processor_cls in cls.registered.items()}

    @staticmethod
    @abstractmethod
    def content_type() -> str:
        """Return the content type used as the registry key (e.g., 'html')."""
        raise NotImplementedError

    @abstractmethod
    def extract(self, content: str) -> tuple[Any, list[TextUnit]]:
        """Parse content and collect its translatable units.

        Args:
            content (str): Raw content.

        Returns:
            tuple[Any, list[TextUnit]]: Opaque parsed form and the extracted units.

        Raises:
            ProcessorError: If the content cannot be parsed.
        """
        raise NotImplementedError

    @abstractmethod
    def apply(self, parsed: Any, units: list[TextUnit], translations: dict[str, str]) -> str:
        """Substitute translations into the parsed form and render it.

        Every unit whose fingerprint is in ``translations`` receives that text, keeping its
        original surrounding whitespace.

        Args:
            parsed (Any): Parsed form returned by ``extract``.
            units (list[TextUnit]): Units returned by ``extract``.
            translations (dict[str, str]): Translated text keyed by fingerprint.

        Returns:
            str: Rendered content.

        Raises:
            ProcessorError: If reinsertion fails.
        """
        raise NotImplementedError

    def finalize(self, content: str, target_lang: str) -> str:
        """Apply content-type-specific markers after reinsertion. The default returns content unchanged."""
        _ = target_lang
        return content
