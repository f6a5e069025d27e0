from __future__ import annotations

import pytest
from bs4 import BeautifulSoup

from core.processors.html_processor import HtmlProcessor
from core.trans.interface import ProcessorError
from models.text_models import UnitType
from utils.hash_utils import HashUtils


@pytest.fixture
def processor() -> HtmlProcessor:
    return HtmlProcessor()


def test_extract_collects_visible_text(processor: HtmlProcessor) -> None:
    html: str = """
    <html><head><title>Shop</title><style>p { color: red; }</style></head>
    <body>
      <h1>Welcome</h1>
      <p>Buy <b>now</b></p>
      <script>var x = "Hello";</script>
      <pre>raw text</pre>
      <code>print()</code>
      <!-- a comment -->
    </body></html>
    """

    _, units = processor.extract(html)

    assert [unit.text for unit in units] == ["Shop", "Welcome", "Buy", "now"]
    assert all(unit.unit_type == UnitType.MARKUP_TEXT for unit in units)
    assert units[0].id == "node-0"
    assert units[1].attributes == {"parent_tag": "h1"}


def test_extract_skips_no_translate_elements(processor: HtmlProcessor) -> None:
    _, units = processor.extract('<div><span data-no-translate>Acme</span><span>Products</span></div>')

    assert [unit.text for unit in units] == ["Products"]


def test_extract_deduplicates_by_fingerprint(processor: HtmlProcessor) -> None:
    _, units = processor.extract("<ul><li>Item</li><li> Item </li><li>Other</li></ul>")

    assert [unit.text for unit in units] == ["Item", "Other"]


def test_custom_ignored_tags() -> None:
    _, units = HtmlProcessor(ignored_tags=["H1"]).extract("<h1>Title</h1><code>shown()</code>")

    assert [unit.text for unit in units] == ["shown()"]


def test_extract_handles_deeply_nested_documents(processor: HtmlProcessor) -> None:
    depth: int = 1500
    html: str = "<div>" * depth + "Hello" + "</div>" * depth + "<p>World</p>"

    parsed, units = processor.extract(html)
    result: str = processor.apply(parsed, units, {HashUtils.fingerprint("Hello"): "Hola"})

    assert [unit.text for unit in units] == ["Hello", "World"]
    assert units[0].disambiguation_context == "in <div> | inside: div > div > div"
    assert "Hola" in result
    assert "Hello" not in result


def test_extract_skips_deep_text_under_ignored_ancestor(processor: HtmlProcessor) -> None:
    html: str = "<div data-no-translate>" + "<span>" * 50 + "Brand" + "</span>" * 50 + "</div><p>Text</p>"

    _, units = processor.extract(html)

    assert [unit.text for unit in units] == ["Text"]


def test_apply_replaces_every_occurrence_and_keeps_whitespace(processor: HtmlProcessor) -> None:
    parsed, units = processor.extract("<p>\n  Hello\n</p><span>Hello</span><em>World</em>")
    translations: dict[str, str] = {HashUtils.fingerprint("Hello"): "Hola"}

    result: str = processor.apply(parsed, units, translations)

    assert result == "<p>\n  Hola\n</p><span>Hola</span><em>World</em>"


def test_apply_escapes_markup_in_translations(processor: HtmlProcessor) -> None:
    parsed, units = processor.extract("<p>Fish and chips</p>")

    result: str = processor.apply(parsed, units, {units[0].fingerprint: "Fish & <chips>"})

    assert result == "<p>Fish &amp; &lt;chips&gt;</p>"


def test_apply_rejects_foreign_parsed_form(processor: HtmlProcessor) -> None:
    with pytest.raises(ProcessorError):
        processor.apply(object(), [], {})


def test_finalize_sets_lang_and_direction(processor: HtmlProcessor) -> None:
    result: str = processor.finalize("<html><body><p>x</p></body></html>", "ar_SA")
    html_tag = BeautifulSoup(result, "html.parser").find("html")

    assert html_tag["lang"] == "ar-SA"
    assert html_tag["dir"] == "rtl"


def test_finalize_leaves_fragments_untouched(processor: HtmlProcessor) -> None:
    assert processor.finalize("<p>Hola</p>", "es_ES") == "<p>Hola</p>"


def test_build_context_describes_position(processor: HtmlProcessor) -> None:
    html: str = '<form><div><button class="primary">Submit<i>!</i>or cancel</button></div></form>'
    _, units = processor.extract(html)

    submit = next(unit for unit in units if unit.text == "Submit")
    assert submit.disambiguation_context == 'in <button class="primary"> | with: or cancel | inside: form > div'


def test_build_context_prefers_id_without_class(processor: HtmlProcessor) -> None:
    _, units = processor.extract('<html><body><p id="intro">Hello</p></body></html>')

    assert units[0].disambiguation_context == 'in <p id="intro">'
