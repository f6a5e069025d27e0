"""Models for translation requests.

Defines the TranslationStyle register and the TranslateRequest batch passed to engines.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Self

__all__: list[str] = ["TranslateRequest", "TranslationStyle"]


class TranslationStyle(StrEnum):
    """Tone and register requested from the translation engine."""

    NEUTRAL = "neutral"
    FORMAL = "formal"
    CASUAL = "casual"
    TECHNICAL = "technical"
    MARKETING = "marketing"

    @property
    def register(self) -> str:
        """Prompt description of the register."""
        return _STYLE_REGISTERS[self]

    @classmethod
    def from_name(cls, name: str) -> Self:
        """Look up a style by case-insensitive name.

        Args:
            name (str): Style name such as 'formal'.

        Returns:
            Self: The matching style.

        Raises:
            ValueError: If the name is not a known style.
        """
        try:
            return cls(name.strip().lower())
        except ValueError as err:
            known: str = ", ".join(style.value for style in cls)
            msg: str = f"Unknown translation style '{name}'. Known styles: {known}"
            raise ValueError(msg) from err


_STYLE_REGISTERS: dict[TranslationStyle, str] = {
    TranslationStyle.NEUTRAL: "Use a neutral, natural register suitable for general audiences.",
    TranslationStyle.FORMAL: "Use a formal, polite register. Prefer formal pronouns and complete sentences.",
    TranslationStyle.CASUAL: "Use a casual, friendly register. Informal pronouns and contractions are fine.",
    TranslationStyle.TECHNICAL: (
        "Use precise technical language. Keep established technical terms and do not paraphrase them."
    ),
    TranslationStyle.MARKETING: "Use persuasive, engaging marketing copy while keeping the original meaning.",
}


@dataclass
class TranslateRequest:
    """A batch of texts to translate in one engine call.

    Attributes:
        texts (list[str]): Source texts. The engine must return exactly one result per text.
        target_lang (str): Target locale code.
        source_lang (str): Source locale code.
        text_contexts (list[str]): Per-text disambiguation hints, aligned with texts.
        excluded_terms (list[str]): Terms that must not be translated.
        context (str): Global description of the content being translated.
        glossary (dict[str, str]): Preferred translations for specific terms.
        style (TranslationStyle): Requested register.
    """

    texts: list[str]
    target_lang: str
    source_lang: str = "en"
    text_contexts: list[str] = field(default_factory=list)
    excluded_terms: list[str] = field(default_factory=list)
    context: str = ""
    glossary: dict[str, str] = field(default_factory=dict)
    style: TranslationStyle = TranslationStyle.NEUTRAL

    def has_text_contexts(self) -> bool:
        """Check whether any text carries a non-empty disambiguation hint."""
        return any(ctx for ctx in self.text_contexts)
