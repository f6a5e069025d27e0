"""Python source processor: translates comments and human-readable string literals."""

from __future__ import annotations

import ast
import io
import keyword
import re
import tokenize
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Final

from core.processors.interface import ContentProcessor
from core.trans.interface import ProcessorError
from models.text_models import TextUnit, UnitType
from utils.hash_utils import HashUtils
from utils.logger_utils import LoggerUtils
from utils.string_utils import StringUtils

if TYPE_CHECKING:
    import logging

__all__: list[str] = ["PythonSourceProcessor"]

logger: logging.Logger = LoggerUtils.get_logger(__name__)

_STRING_PATTERN: Final[re.Pattern[str]] = re.compile(
    r"^(?P<prefix>[A-Za-z]*)(?P<quote>'''|\"\"\"|'|\")(?P<body>.*)(?P=quote)$", re.DOTALL
)
_COMMENT_PATTERN: Final[re.Pattern[str]] = re.compile(r"^(?P<lead>#+\s*)(?P<body>.*?)(?P<trail>\s*)$", re.DOTALL)
# directives that tools read from comments and that must stay verbatim
_DIRECTIVE_PREFIXES: Final[tuple[str, ...]] = (
    "!",
    "-*-",
    "noqa",
    "type:",
    "pragma",
    "fmt:",
    "pylint:",
    "mypy:",
    "ruff:",
)
_STATEMENT_BOUNDARY_TOKENS: Final[frozenset[int]] = frozenset(
    {tokenize.NEWLINE, tokenize.NL, tokenize.INDENT, tokenize.DEDENT, tokenize.ENCODING}
)
_CLOSING_BRACKETS: Final[frozenset[int]] = frozenset({tokenize.RPAR, tokenize.RSQB, tokenize.RBRACE})


@dataclass
class _Occurrence:
    start: int
    end: int
    fingerprint: str
    original: str
    is_comment: bool
    lead: str = ""
    trail: str = ""
    prefix: str = ""
    quote: str = ""


@dataclass
class _ParsedSource:
    content: str
    occurrences: list[_Occurrence] = field(default_factory=list)


class PythonSourceProcessor(ContentProcessor):
    """Extracts comments and plain string literals from Python source.

    Bytes, raw and formatted strings are never touched, nor are strings that look like
    identifiers, paths or format specifiers. Subscript keys and literals nested in f-string
    replacement fields are code and are skipped too. Docstrings and other string statements
    are skipped unless ``translate_docstrings`` is enabled. Untouched code is reproduced byte
    for byte because translations are spliced in at the original token positions.
    """

    def __init__(
        self,
        *,
        translate_comments: bool = True,
        translate_strings: bool = True,
        translate_docstrings: bool = False,
    ) -> None:
        self._translate_comments: bool = translate_comments
        self._translate_strings: bool = translate_strings
        self._translate_docstrings: bool = translate_docstrings

    @staticmethod
    def content_type() -> str:
        return "python"

    def extract(self, content: str) -> tuple[Any, list[TextUnit]]:
        tokens: list[tokenize.TokenInfo] = self._tokenize(content)
        line_offsets: list[int] = self._line_offsets(content)
        parsed = _ParsedSource(content=content)
        units: list[TextUnit] = []
        seen: set[str] = set()
        fstring_depth: int = 0

        for index, tok in enumerate(tokens):
            if tok.type == tokenize.FSTRING_START:
                fstring_depth += 1
                continue
            if tok.type == tokenize.FSTRING_END:
                fstring_depth -= 1
                continue

            occurrence: _Occurrence | None = None
            unit_type: str = ""
            if tok.type == tokenize.COMMENT and self._translate_comments:
                occurrence = self._comment_occurrence(tok, line_offsets)
                unit_type = UnitType.SOURCE_COMMENT
            elif tok.type == tokenize.STRING and self._translate_strings:
                if fstring_depth > 0 or self._is_subscript_key(tokens, index):
                    continue
                if not self._translate_docstrings and self._is_string_statement(tokens, index):
                    continue
                occurrence = self._string_occurrence(tok, line_offsets)
                unit_type = UnitType.SOURCE_STRING
            if occurrence is None:
                continue

            parsed.occurrences.append(occurrence)
            if occurrence.fingerprint in seen:
                continue
            seen.add(occurrence.fingerprint)

            row, col = tok.start
            kind: str = "comment" if occurrence.is_comment else "string"
            attributes: dict[str, str] = {"line": str(row)}
            if occurrence.quote:
                attributes["quote"] = occurrence.quote
            units.append(
                TextUnit(
                    id=f"{kind}-{row}:{col}",
                    text=occurrence.original.strip(),
                    fingerprint=occurrence.fingerprint,
                    unit_type=unit_type,
                    disambiguation_context=(
                        "Python source comment" if occurrence.is_comment else "Python string literal"
                    ),
                    attributes=attributes,
                )
            )

        logger.debug("Extracted %d unique units from %d Python tokens", len(units), len(parsed.occurrences))
        return parsed, units

    def apply(self, parsed: Any, units: list[TextUnit], translations: dict[str, str]) -> str:
        _ = units
        if not isinstance(parsed, _ParsedSource):
            msg = "invalid parsed content type"
            raise ProcessorError(msg, content_type=self.content_type())

        result: str = parsed.content
        # splice from the end so earlier offsets stay valid
        for occurrence in sorted(parsed.occurrences, key=lambda occ: occ.start, reverse=True):
            translated: str | None = translations.get(occurrence.fingerprint)
            if translated is None:
                continue
            rendered: str = (
                self._render_comment(occurrence, translated)
                if occurrence.is_comment
                else self._render_string(occurrence, translated)
            )
            result = f"{result[: occurrence.start]}{rendered}{result[occurrence.end :]}"
        return result

    def _tokenize(self, content: str) -> list[tokenize.TokenInfo]:
        try:
            return list(tokenize.generate_tokens(io.StringIO(content).readline))
        except (tokenize.TokenError, SyntaxError) as err:
            msg: str = f"failed to tokenize Python source: {err}"
            raise ProcessorError(msg, content_type=self.content_type()) from err

    @staticmethod
    def _line_offsets(content: str) -> list[int]:
        offsets: list[int] = [0, 0]  # tokenize rows are 1-based
        for line in io.StringIO(content):
            offsets.append(offsets[-1] + len(line))
        return offsets

    @staticmethod
    def _span(tok: tokenize.TokenInfo, line_offsets: list[int]) -> tuple[int, int]:
        return line_offsets[tok.start[0]] + tok.start[1], line_offsets[tok.end[0]] + tok.end[1]

    @staticmethod
    def _is_string_statement(tokens: list[tokenize.TokenInfo], index: int) -> bool:
        """Check whether a STRING token is a whole expression statement, such as a docstring."""
        before: int = index - 1
        while before >= 0 and tokens[before].type == tokenize.COMMENT:
            before -= 1
        after: int = index + 1
        while after < len(tokens) and tokens[after].type == tokenize.COMMENT:
            after += 1

        starts_statement: bool = before < 0 or tokens[before].type in _STATEMENT_BOUNDARY_TOKENS
        ends_statement: bool = after >= len(tokens) or tokens[after].type in {tokenize.NEWLINE, tokenize.ENDMARKER}
        return starts_statement and ends_statement

    @staticmethod
    def _is_subscript_key(tokens: list[tokenize.TokenInfo], index: int) -> bool:
        """Check whether a STRING token indexes a container, as in ``data['key']``."""
        if index < 2 or tokens[index - 1].exact_type != tokenize.LSQB:
            return False
        subject: tokenize.TokenInfo = tokens[index - 2]
        if subject.type == tokenize.NAME:
            return not keyword.iskeyword(subject.string)
        return subject.type == tokenize.STRING or subject.exact_type in _CLOSING_BRACKETS

    def _comment_occurrence(self, tok: tokenize.TokenInfo, line_offsets: list[int]) -> _Occurrence | None:
        match: re.Match[str] | None = _COMMENT_PATTERN.match(tok.string)
        if match is None:
            return None
        body: str = match.group("body")
        if not body or body.startswith(_DIRECTIVE_PREFIXES) or not any(char.isalpha() for char in body):
            return None
        start, end = self._span(tok, line_offsets)
        return _Occurrence(
            start=start,
            end=end,
            fingerprint=HashUtils.fingerprint(body),
            original=body,
            is_comment=True,
            lead=match.group("lead"),
            trail=match.group("trail"),
        )

    def _string_occurrence(self, tok: tokenize.TokenInfo, line_offsets: list[int]) -> _Occurrence | None:
        match: re.Match[str] | None = _STRING_PATTERN.match(tok.string)
        if match is None:
            return None
        prefix: str = match.group("prefix")
        if set(prefix.lower()) & {"b", "r", "f", "t"}:
            return None
        try:
            value: Any = ast.literal_eval(tok.string)
        except (ValueError, SyntaxError):
            return None
        if not isinstance(value, str) or not StringUtils.is_translatable_string(value):
            return None
        start, end = self._span(tok, line_offsets)
        return _Occurrence(
            start=start,
            end=end,
            fingerprint=HashUtils.fingerprint(value),
            original=value,
            is_comment=False,
            prefix=prefix,
            quote=match.group("quote"),
        )

    @staticmethod
    def _render_comment(occurrence: _Occurrence, translated: str) -> str:
        text: str = " ".join(translated.split())
        return f"{occurrence.lead}{text}{occurrence.trail}"

    @staticmethod
    def _render_string(occurrence: _Occurrence, translated: str) -> str:
        value: str = StringUtils.preserve_whitespace(occurrence.original, translated)
        quote: str = occurrence.quote
        body: str = value.replace("\\", "\\\\").replace(quote[0], f"\\{quote[0]}")
        if len(quote) == 1:
            body = body.replace("\n", "\\n").replace("\r", "\\r")
        return f"{occurrence.prefix}{quote}{body}{quote}"
