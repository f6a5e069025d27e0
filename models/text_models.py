"""Models for translatable text spans and processing results.

Defines TextUnit, the unit of work passed between content processors and the translator,
and ProcessedContent, the outcome of one translation pass.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Self

from utils.hash_utils import HashUtils

__all__: list[str] = ["ProcessedContent", "TextUnit", "UnitType"]


class UnitType:
    """Well-known origin discriminators for TextUnit.unit_type.

    The value is opaque to the translator; processors may use any string.
    """

    MARKUP_TEXT: str = "markup-text"
    SOURCE_COMMENT: str = "source-comment"
    SOURCE_STRING: str = "source-string"
    PLAIN_TEXT: str = "plain-text"


@dataclass
class TextUnit:
    """One translatable span of content.

    Attributes:
        id (str): Position/identity token scoped to one extraction (used for diff matching).
        text (str): Content already trimmed of surrounding whitespace.
        fingerprint (str): Content hash of text. Units with equal fingerprints share one translation.
        unit_type (str): Origin discriminator such as 'markup-text' or 'source-comment'.
        disambiguation_context (str): Hint about surrounding structure. Never part of a cache key.
        attributes (dict[str, str]): Processor-specific metadata (e.g., originating tag name).
    """

    id: str
    text: str
    fingerprint: str
    unit_type: str = UnitType.PLAIN_TEXT
    disambiguation_context: str = ""
    attributes: dict[str, str] = field(default_factory=dict)

    @classmethod
    def create(
        cls,
        unit_id: str,
        text: str,
        unit_type: str = UnitType.PLAIN_TEXT,
        *,
        disambiguation_context: str = "",
        attributes: dict[str, str] | None = None,
    ) -> Self:
        """Build a unit from raw text, trimming it and computing its fingerprint.

        Args:
            unit_id (str): Identity token within the extraction.
            text (str): Raw text; surrounding whitespace is removed.
            unit_type (str): Origin discriminator.
            disambiguation_context (str): Structural hint for the backend.
            attributes (dict[str, str] | None): Processor-specific metadata.

        Returns:
            Self: The new TextUnit.
        """
        trimmed: str = text.strip()
        return cls(
            id=unit_id,
            text=trimmed,
            fingerprint=HashUtils.fingerprint(trimmed),
            unit_type=unit_type,
            disambiguation_context=disambiguation_context,
            attributes=dict(attributes) if attributes else {},
        )


@dataclass
class ProcessedContent:
    """Result of a translation pass over one piece of content.

    Attributes:
        content (str): Translated content (or the input unchanged when nothing was translated).
        total_units (int): Number of extracted units, duplicates included.
        translated_count (int): Unique fingerprints newly translated by the backend.
        cached_count (int): Units whose translation came from the cache.
        cache_errors (int): Cache writes that failed during write-back.
    """

    content: str
    total_units: int = 0
    translated_count: int = 0
    cached_count: int = 0
    cache_errors: int = 0
