"""Models for translation cache snapshots.

Defines the export document written by CacheExporter and the counts reported by CacheImporter.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Final

from dataclasses_json import DataClassJsonMixin

__all__: list[str] = ["EXPORT_FORMAT_VERSION", "ExportDocument", "ExportEntry", "ImportResult"]

EXPORT_FORMAT_VERSION: Final[str] = "1.0"


@dataclass
class ExportEntry(DataClassJsonMixin):
    """One cached translation.

    Attributes:
        key (str): Composite cache key.
        value (str): Translated text.
    """

    key: str
    value: str


@dataclass
class ExportDocument(DataClassJsonMixin):
    """Versioned snapshot of a cache.

    Attributes:
        version (str): Format version tag.
        exported_at (str): RFC 3339 UTC timestamp of the export.
        entries (list[ExportEntry]): Entries ordered by key.
        metadata (dict[str, str]): Free-form information about the export.
    """

    version: str = EXPORT_FORMAT_VERSION
    exported_at: str = ""
    entries: list[ExportEntry] = field(default_factory=list)
    metadata: dict[str, str] = field(default_factory=dict)


@dataclass
class ImportResult:
    """Outcome of re-populating a cache from an export document.

    Attributes:
        version (str): Format version tag of the imported document.
        metadata (dict[str, str]): Metadata carried by the imported document.
        imported (int): Entries written successfully.
        failed (int): Entries whose write raised an error.
    """

    version: str = ""
    metadata: dict[str, str] = field(default_factory=dict)
    imported: int = 0
    failed: int = 0

    @property
    def total(self) -> int:
        return self.imported + self.failed
