"""JSON reports printed by the command-line tool."""

from __future__ import annotations

from dataclasses import dataclass, field

from dataclasses_json import DataClassJsonMixin

__all__: list[str] = ["DiffReport", "DiffReportStats", "DryRunReport", "ModifiedText", "TranslationReport"]


@dataclass
class DryRunReport(DataClassJsonMixin):
    """Units that a translation run would send, without contacting the backend.

    Attributes:
        input_file (str): Input file name, or 'stdin'.
        target_lang (str): Requested target locale.
        unit_count (int): Number of unique units extracted.
        texts (list[str]): Unit texts in extraction order.
    """

    input_file: str
    target_lang: str
    unit_count: int = 0
    texts: list[str] = field(default_factory=list)


@dataclass
class DiffReportStats(DataClassJsonMixin):
    added: int = 0
    removed: int = 0
    modified: int = 0
    unchanged: int = 0


@dataclass
class ModifiedText(DataClassJsonMixin):
    old: str
    new: str


@dataclass
class DiffReport(DataClassJsonMixin):
    """Comparison of the input against a previous version.

    Attributes:
        input_file (str): Current version file name.
        previous_file (str): Previous version file name.
        target_lang (str): Requested target locale.
        stats (DiffReportStats): Counts per category.
        needs_translation (list[str]): Texts that require a backend call.
        added (list[str]): Texts only in the current version.
        removed (list[str]): Texts only in the previous version.
        modified (list[ModifiedText]): Replaced texts.
    """

    input_file: str
    previous_file: str
    target_lang: str
    stats: DiffReportStats = field(default_factory=DiffReportStats)
    needs_translation: list[str] = field(default_factory=list)
    added: list[str] = field(default_factory=list)
    removed: list[str] = field(default_factory=list)
    modified: list[ModifiedText] = field(default_factory=list)


@dataclass
class TranslationReport(DataClassJsonMixin):
    """Translated content and counters.

    Attributes:
        content (str): Translated content.
        target_lang (str): Target locale.
        total_units (int): Units extracted.
        translated_count (int): Unique texts translated by the backend.
        cached_count (int): Units served from the cache.
        cache_errors (int): Cache writes that failed.
        duration_ms (int): Wall-clock duration of the run.
    """

    content: str
    target_lang: str
    total_units: int = 0
    translated_count: int = 0
    cached_count: int = 0
    cache_errors: int = 0
    duration_ms: int = 0
