from __future__ import annotations

from textwrap import dedent

import pytest

from core.processors.python_processor import PythonSourceProcessor
from core.trans.interface import ProcessorError
from models.text_models import UnitType


@pytest.fixture
def processor() -> PythonSourceProcessor:
    return PythonSourceProcessor()


SOURCE: str = dedent(
    '''\
    #!/usr/bin/env python
    # -*- coding: utf-8 -*-
    """Module docstring stays."""

    import os  # noqa: F401

    # Show the greeting
    def greet(name):
        """Return a greeting."""
        message = "Hello there"
        path = "/usr/share/data"
        key = "user_id"
        raw = r"Raw text here"
        formatted = f"Hi {name}"
        return message  # Send it back
    '''
)


def test_extract_comments_and_strings(processor: PythonSourceProcessor) -> None:
    _, units = processor.extract(SOURCE)

    assert [unit.text for unit in units] == ["Show the greeting", "Hello there", "Send it back"]
    assert [unit.unit_type for unit in units] == [
        UnitType.SOURCE_COMMENT,
        UnitType.SOURCE_STRING,
        UnitType.SOURCE_COMMENT,
    ]
    assert units[0].id == "comment-7:0"
    assert units[0].disambiguation_context == "Python source comment"
    assert units[1].attributes == {"line": "10", "quote": '"'}


def test_docstrings_are_opt_in() -> None:
    _, units = PythonSourceProcessor(translate_comments=False, translate_docstrings=True).extract(SOURCE)

    assert [unit.text for unit in units] == ["Module docstring stays.", "Return a greeting.", "Hello there"]


def test_apply_splices_translations_and_keeps_code(processor: PythonSourceProcessor) -> None:
    parsed, units = processor.extract(SOURCE)
    translations: dict[str, str] = {
        units[0].fingerprint: "Mostrar el saludo",
        units[1].fingerprint: 'Hola "amigo"',
        units[2].fingerprint: "Devuélvelo",
    }

    result: str = processor.apply(parsed, units, translations)

    assert "# Mostrar el saludo\n" in result
    assert 'message = "Hola \\"amigo\\""' in result
    assert "return message  # Devuélvelo\n" in result
    assert '"""Module docstring stays."""' in result
    assert "# -*- coding: utf-8 -*-" in result
    assert 'path = "/usr/share/data"' in result


def test_apply_without_translations_is_identity(processor: PythonSourceProcessor) -> None:
    parsed, units = processor.extract(SOURCE)

    assert processor.apply(parsed, units, {}) == SOURCE


def test_repeated_strings_share_one_unit(processor: PythonSourceProcessor) -> None:
    source: str = 'a = "Try again"\nb = \'Try again\'\n'
    parsed, units = processor.extract(source)

    assert len(units) == 1
    result: str = processor.apply(parsed, units, {units[0].fingerprint: "Inténtalo de nuevo"})
    assert result == "a = \"Inténtalo de nuevo\"\nb = 'Inténtalo de nuevo'\n"


def test_single_quoted_translation_escapes_newlines(processor: PythonSourceProcessor) -> None:
    parsed, units = processor.extract("x = 'Line one'\n")

    result: str = processor.apply(parsed, units, {units[0].fingerprint: "Línea\nuno"})

    assert result == "x = 'Línea\\nuno'\n"


def test_invalid_source_raises_processor_error(processor: PythonSourceProcessor) -> None:
    with pytest.raises(ProcessorError) as exc_info:
        processor.extract('x = """unterminated\n')

    assert exc_info.value.content_type == "python"


def test_subscript_keys_and_fstring_fields_are_left_alone(processor: PythonSourceProcessor) -> None:
    source: str = dedent(
        """\
        label = data['user name']
        title = rows[0]["display title"]
        banner = f"{data['user name']} says {"hello world"}"
        choices = ["Save changes", "Discard changes"]
        """
    )

    _, units = processor.extract(source)

    assert [unit.text for unit in units] == ["Save changes", "Discard changes"]
