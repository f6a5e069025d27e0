"""Data models for tlai.

This package contains dataclass definitions for configuration, text units, translation requests,
cache snapshots, and content diffs used throughout the application.
"""

from __future__ import annotations

from models.cache_models import EXPORT_FORMAT_VERSION, ExportDocument, ExportEntry, ImportResult
from models.config_models import Config
from models.diff_models import DiffResult, DiffStats, ModifiedUnit
from models.report_models import DiffReport, DiffReportStats, DryRunReport, ModifiedText, TranslationReport
from models.text_models import ProcessedContent, TextUnit, UnitType
from models.translation_models import TranslateRequest, TranslationStyle

__all__: list[str] = [
    "EXPORT_FORMAT_VERSION",
    "Config",
    "DiffReport",
    "DiffReportStats",
    "DiffResult",
    "DiffStats",
    "DryRunReport",
    "ExportDocument",
    "ExportEntry",
    "ImportResult",
    "ModifiedText",
    "ModifiedUnit",
    "ProcessedContent",
    "TextUnit",
    "TranslateRequest",
    "TranslationReport",
    "TranslationStyle",
    "UnitType",
]
