from __future__ import annotations

import pytest

from utils.lang_utils import LangUtils


@pytest.mark.parametrize(
    ("lang_a", "lang_b", "expected"),
    [
        ("en", "en_US", True),
        ("EN-gb", "en", True),
        ("es_ES", "es_MX", True),
        ("en", "es_ES", False),
        ("pt_BR", "pt-PT", True),
    ],
)
def test_same_base_language(lang_a: str, lang_b: str, *, expected: bool) -> None:
    assert LangUtils.same_base_language(lang_a, lang_b) is expected


def test_locale_conversions() -> None:
    assert LangUtils.normalize_locale("es-ES") == "es_ES"
    assert LangUtils.to_html_lang("es_ES") == "es-ES"
    assert LangUtils.base_language("zh_TW") == "zh"


def test_language_name_expands_short_codes_and_falls_back() -> None:
    assert LangUtils.language_name("ja_JP") == "Japanese (Japan)"
    assert LangUtils.language_name("es-MX") == "Spanish (Mexico)"
    assert LangUtils.language_name("ja") == "Japanese (Japan)"
    assert LangUtils.language_name("xx_YY") == "xx_YY"


@pytest.mark.parametrize("lang", ["ar", "ar_SA", "he_IL", "fa", "ur_PK", "ps", "sd", "ug"])
def test_rtl_languages(lang: str) -> None:
    assert LangUtils.is_rtl(lang) is True
    assert LangUtils.direction(lang) == "rtl"


def test_ltr_languages() -> None:
    assert LangUtils.is_rtl("es_ES") is False
    assert LangUtils.direction("ja") == "ltr"


def test_locale_clarification() -> None:
    assert "Mexican" in LangUtils.locale_clarification("es_MX")
    assert "Traditional" in LangUtils.locale_clarification("zh-TW")
    assert LangUtils.locale_clarification("de_DE") == ""
