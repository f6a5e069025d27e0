"""Core translation pipeline for tlai.

This package contains the translator, the content processors, the translation cache,
content diffing, and the translation engines with their rate-limit and retry wrappers.
"""

from core.trans.translator import Translator, TranslatorConfig
from core.version import VERSION

__all__: list[str] = [
    "VERSION",
    "Translator",
    "TranslatorConfig",
]
