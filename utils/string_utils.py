from __future__ import annotations

import re
from typing import Final, NamedTuple

__all__: list[str] = ["StringUtils", "WhitespaceParts"]

_LEADING_WS_PATTERN: Final[re.Pattern[str]] = re.compile(r"^\s*")
_TRAILING_WS_PATTERN: Final[re.Pattern[str]] = re.compile(r"\s*$")

MIN_TRANSLATABLE_LENGTH: Final[int] = 2
MIN_FORMAT_STRING_LENGTH: Final[int] = 5


class WhitespaceParts(NamedTuple):
    """A string split into leading whitespace, content, and trailing whitespace."""

    leading: str
    body: str
    trailing: str


class StringUtils:
    """Utility class for string manipulation shared by the content processors.

    Provides static methods for whitespace handling and for deciding whether a literal
    looks like human-readable text.
    """

    @staticmethod
    def ensure_str(value: str | None) -> str:
        """Ensure that the value is a string, returning an empty string if None.

        Note: Does not use strip(); surrounding whitespace is significant during reinsertion.

        Args:
            value (str | None): The value to ensure as a string.

        Returns:
            str: The value as a string, or empty string if None.
        """
        if not isinstance(value, str):
            value = str(value) if value is not None else ""
        return value

    @staticmethod
    def compress_blanks(value: str) -> str:
        """Compress runs of whitespace into a single space and strip both ends."""
        value = StringUtils.ensure_str(value)
        return " ".join(value.split())

    @staticmethod
    def split_whitespace(value: str) -> WhitespaceParts:
        """Split a string into its leading whitespace, stripped body, and trailing whitespace.

        A whitespace-only string is returned entirely as leading whitespace.

        Args:
            value (str): The string to split.

        Returns:
            WhitespaceParts: The three parts; joining them reproduces the input.
        """
        value = StringUtils.ensure_str(value)
        leading_match: re.Match[str] | None = _LEADING_WS_PATTERN.match(value)
        leading: str = leading_match.group(0) if leading_match else ""
        if len(leading) == len(value):
            return WhitespaceParts(leading=value, body="", trailing="")

        trailing_match: re.Match[str] | None = _TRAILING_WS_PATTERN.search(value)
        trailing: str = trailing_match.group(0) if trailing_match else ""
        body: str = value[len(leading) : len(value) - len(trailing)]
        return WhitespaceParts(leading=leading, body=body, trailing=trailing)

    @staticmethod
    def preserve_whitespace(original: str, replacement: str) -> str:
        """Wrap a replacement in the leading and trailing whitespace of the original text.

        Args:
            original (str): Text whose surrounding whitespace is kept.
            replacement (str): New content; its own surrounding whitespace is discarded.

        Returns:
            str: Replacement text with the original whitespace restored.
        """
        parts: WhitespaceParts = StringUtils.split_whitespace(original)
        return f"{parts.leading}{replacement.strip()}{parts.trailing}"

    @staticmethod
    def is_translatable_string(value: str) -> bool:
        """Heuristically decide whether a source-code string literal is human-readable text.

        Rejects strings that are too short, look like paths or URLs, are bare format
        specifiers, are upper-case constants, or contain no letters at all.

        Args:
            value (str): Literal contents without quotes.

        Returns:
            bool: True if the literal should be offered for translation.
        """
        text: str = value.strip()
        if len(text) < MIN_TRANSLATABLE_LENGTH:
            return False
        if "/" in text and " " not in text:
            return False
        if text.startswith("%") and len(text) < MIN_FORMAT_STRING_LENGTH:
            return False
        if text.isupper() and " " not in text:
            return False
        if text.isidentifier() and " " not in text and "_" in text:
            # snake_case keys such as "user_id"
            return False
        return any(char.isalpha() for char in text)
