from __future__ import annotations

from core.diff import diff_content, diff_content_with_context
from models.text_models import TextUnit


def _unit(unit_id: str, text: str, context: str = "") -> TextUnit:
    return TextUnit.create(unit_id, text, disambiguation_context=context)


def test_identical_inputs_are_unchanged() -> None:
    units: list[TextUnit] = [_unit("0", "Hello"), _unit("1", "World")]

    result = diff_content(units, list(units))

    assert result.unchanged == units
    assert result.added == []
    assert result.removed == []
    assert result.has_changes() is False
    assert result.needs_translation() == []


def test_added_and_removed_follow_input_order() -> None:
    old: list[TextUnit] = [_unit("0", "Keep"), _unit("1", "Gone A"), _unit("2", "Gone B")]
    new: list[TextUnit] = [_unit("0", "New B"), _unit("1", "Keep"), _unit("2", "New A")]

    result = diff_content(old, new)

    assert [unit.text for unit in result.unchanged] == ["Keep"]
    assert [unit.text for unit in result.removed] == ["Gone A", "Gone B"]
    assert [unit.text for unit in result.added] == ["New B", "New A"]


def test_repeated_fingerprints_are_reported_once() -> None:
    old: list[TextUnit] = [_unit("0", "Same"), _unit("1", "Same")]
    new: list[TextUnit] = [_unit("0", "Other"), _unit("1", "Other")]

    result = diff_content(old, new)

    assert len(result.removed) == 1
    assert len(result.added) == 1


def test_unchanged_units_come_from_old_side() -> None:
    old_unit: TextUnit = _unit("old-id", "Hello")
    new_unit: TextUnit = _unit("new-id", "Hello")

    result = diff_content([old_unit], [new_unit])

    assert result.unchanged[0].id == "old-id"


def test_modification_detected_by_id() -> None:
    old: list[TextUnit] = [_unit("node-0", "Hello"), _unit("node-1", "World")]
    new: list[TextUnit] = [_unit("node-0", "Hi"), _unit("node-1", "World")]

    result = diff_content_with_context(old, new)

    assert result.added == []
    assert result.removed == []
    assert len(result.modified) == 1
    assert result.modified[0].old.text == "Hello"
    assert result.modified[0].new.text == "Hi"
    assert [unit.text for unit in result.needs_translation()] == ["Hi"]
    stats = result.stats()
    assert (stats.added, stats.removed, stats.unchanged, stats.modified) == (0, 0, 1, 1)


def test_modification_detected_by_context() -> None:
    old: list[TextUnit] = [_unit("a", "Buy now", "in <button>")]
    new: list[TextUnit] = [_unit("b", "Order today", "in <button>")]

    result = diff_content_with_context(old, new)

    assert len(result.modified) == 1
    assert result.modified[0].new.text == "Order today"


def test_empty_context_never_pairs_units() -> None:
    old: list[TextUnit] = [_unit("a", "Old text")]
    new: list[TextUnit] = [_unit("b", "New text")]

    result = diff_content_with_context(old, new)

    assert result.modified == []
    assert [unit.text for unit in result.removed] == ["Old text"]
    assert [unit.text for unit in result.added] == ["New text"]
    assert [unit.text for unit in result.needs_translation()] == ["New text"]


def test_first_candidate_matching_id_or_context_wins() -> None:
    old: list[TextUnit] = [_unit("x", "Old", "in <h1>")]
    new: list[TextUnit] = [_unit("y", "Context match", "in <h1>"), _unit("x", "Id match", "in <p>")]

    result = diff_content_with_context(old, new)

    assert result.modified[0].new.text == "Context match"
    assert [unit.text for unit in result.added] == ["Id match"]


def test_each_added_unit_pairs_at_most_once() -> None:
    old: list[TextUnit] = [_unit("a", "One", "in <li>"), _unit("b", "Two", "in <li>")]
    new: list[TextUnit] = [_unit("c", "Uno", "in <li>")]

    result = diff_content_with_context(old, new)

    assert len(result.modified) == 1
    assert result.modified[0].old.text == "One"
    assert [unit.text for unit in result.removed] == ["Two"]
