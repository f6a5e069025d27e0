"""HTML content processor built on BeautifulSoup."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, ClassVar, Final

from bs4 import BeautifulSoup, NavigableString, Tag
from bs4.element import PageElement, PreformattedString

from core.processors.interface import ContentProcessor
from core.trans.interface import ProcessorError
from models.text_models import TextUnit, UnitType
from utils.hash_utils import HashUtils
from utils.lang_utils import LangUtils
from utils.logger_utils import LoggerUtils
from utils.string_utils import StringUtils

if TYPE_CHECKING:
    import logging
    from collections.abc import Iterator

__all__: list[str] = ["DEFAULT_IGNORED_TAGS", "HtmlProcessor"]

logger: logging.Logger = LoggerUtils.get_logger(__name__)

DEFAULT_IGNORED_TAGS: Final[frozenset[str]] = frozenset({"script", "style", "code", "pre", "textarea", "noscript"})
NO_TRANSLATE_ATTRIBUTE: Final[str] = "data-no-translate"

_MAX_SIBLINGS: Final[int] = 3
_MAX_SIBLING_LENGTH: Final[int] = 100
_MAX_ANCESTORS: Final[int] = 3
_SKIPPED_ANCESTORS: Final[frozenset[str]] = frozenset({"html", "body", BeautifulSoup.ROOT_TAG_NAME})


@dataclass
class _ParsedHtml:
    soup: BeautifulSoup
    text_nodes: list[NavigableString] = field(default_factory=list)


def _is_text_node(node: Any) -> bool:
    # comments, doctypes and CDATA are NavigableString subclasses too
    return isinstance(node, NavigableString) and not isinstance(node, PreformattedString)


class HtmlProcessor(ContentProcessor):
    """Extracts visible text nodes from HTML and writes translations back in place.

    Text inside ignored tags or inside elements carrying ``data-no-translate`` is left alone.
    Units are deduplicated by fingerprint at extraction; every text node sharing a fingerprint
    receives the same translation at apply time.

    Attributes:
        PARSER (ClassVar[str]): BeautifulSoup parser name.
    """

    PARSER: ClassVar[str] = "html.parser"

    def __init__(self, ignored_tags: list[str] | None = None) -> None:
        """Initialize the processor.

        Args:
            ignored_tags (list[str] | None): Tag names whose content is never translated.
                Defaults to script, style, code, pre, textarea and noscript.
        """
        self._ignored_tags: frozenset[str] = (
            frozenset(tag.lower() for tag in ignored_tags) if ignored_tags is not None else DEFAULT_IGNORED_TAGS
        )

    @staticmethod
    def content_type() -> str:
        return "html"

    def _parse(self, content: str) -> BeautifulSoup:
        try:
            return BeautifulSoup(content, self.PARSER)
        except (ValueError, TypeError, AssertionError) as err:
            msg: str = f"failed to parse HTML: {err}"
            raise ProcessorError(msg, content_type=self.content_type()) from err

    def _is_skipped(self, tag: Tag) -> bool:
        return (tag.name or "").lower() in self._ignored_tags or tag.has_attr(NO_TRANSLATE_ATTRIBUTE)

    def _walk(self, root: Tag, found: list[NavigableString]) -> None:
        # explicit stack so nesting depth is not bounded by the interpreter's recursion limit
        stack: list[Iterator[PageElement]] = [iter(root.children)]
        while stack:
            child: PageElement | None = next(stack[-1], None)
            if child is None:
                stack.pop()
            elif isinstance(child, Tag):
                if not self._is_skipped(child):
                    stack.append(iter(child.children))
            elif _is_text_node(child) and child.strip():
                found.append(child)

    def extract(self, content: str) -> tuple[Any, list[TextUnit]]:
        soup: BeautifulSoup = self._parse(content)
        parsed = _ParsedHtml(soup=soup)
        self._walk(soup, parsed.text_nodes)

        units: list[TextUnit] = []
        seen: set[str] = set()
        for node in parsed.text_nodes:
            text: str = str(node).strip()
            fingerprint: str = HashUtils.fingerprint(text)
            if fingerprint in seen:
                continue
            seen.add(fingerprint)

            attributes: dict[str, str] = {}
            if node.parent is not None and node.parent.name:
                attributes["parent_tag"] = node.parent.name
            units.append(
                TextUnit(
                    id=f"node-{len(units)}",
                    text=text,
                    fingerprint=fingerprint,
                    unit_type=UnitType.MARKUP_TEXT,
                    disambiguation_context=self.build_context(node),
                    attributes=attributes,
                )
            )

        logger.debug("Extracted %d unique text units from %d HTML text nodes", len(units), len(parsed.text_nodes))
        return parsed, units

    def apply(self, parsed: Any, units: list[TextUnit], translations: dict[str, str]) -> str:
        _ = units
        if not isinstance(parsed, _ParsedHtml):
            msg = "invalid parsed content type"
            raise ProcessorError(msg, content_type=self.content_type())

        for node in parsed.text_nodes:
            original: str = str(node)
            translated: str | None = translations.get(HashUtils.fingerprint(original))
            if translated is not None:
                node.replace_with(NavigableString(StringUtils.preserve_whitespace(original, translated)))
        return str(parsed.soup)

    def finalize(self, content: str, target_lang: str) -> str:
        """Set ``lang`` and ``dir`` on the ``<html>`` element when the document has one."""
        soup: BeautifulSoup = self._parse(content)
        html_tag: Tag | None = soup.find("html")
        if html_tag is None:
            return content
        html_tag["lang"] = LangUtils.to_html_lang(target_lang)
        html_tag["dir"] = LangUtils.direction(target_lang)
        return str(soup)

    @staticmethod
    def build_context(node: NavigableString) -> str:
        """Describe where a text node sits so the backend can disambiguate short strings.

        The description combines the parent tag (with its class or id), up to three sibling
        text snippets, and up to three enclosing ancestors, joined by " | ".

        Args:
            node (NavigableString): Text node to describe.

        Returns:
            str: Context such as ``in <button class="primary"> | inside: form > div``.
        """
        parent: Tag | None = node.parent
        if parent is None:
            return ""

        parts: list[str] = []
        class_attr: str | list[str] | None = parent.get("class")
        if isinstance(class_attr, list):
            class_attr = " ".join(class_attr)
        id_attr: Any = parent.get("id")
        if class_attr:
            parts.append(f'in <{parent.name} class="{class_attr}">')
        elif id_attr:
            parts.append(f'in <{parent.name} id="{id_attr}">')
        else:
            parts.append(f"in <{parent.name}>")

        siblings: list[str] = []
        for sibling in parent.children:
            if sibling is node or not _is_text_node(sibling):
                continue
            sibling_text: str = sibling.strip()
            if sibling_text and len(sibling_text) < _MAX_SIBLING_LENGTH:
                siblings.append(sibling_text)
        if siblings:
            parts.append(f"with: {', '.join(siblings[:_MAX_SIBLINGS])}")

        ancestors: list[str] = []
        ancestor: Tag | None = parent.parent
        for _ in range(_MAX_ANCESTORS):
            if ancestor is None:
                break
            if ancestor.name not in _SKIPPED_ANCESTORS:
                ancestors.append(ancestor.name)
            ancestor = ancestor.parent
        if ancestors:
            parts.append(f"inside: {' > '.join(reversed(ancestors))}")

        return " | ".join(parts)
