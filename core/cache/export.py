"""Snapshot and restore translation caches as versioned JSON documents."""

from __future__ import annotations

import json
from datetime import UTC, datetime
from pathlib import Path
from typing import TYPE_CHECKING

from core.cache.interface import CacheError, ExportableCache
from models.cache_models import EXPORT_FORMAT_VERSION, ExportDocument, ExportEntry, ImportResult
from utils.logger_utils import LoggerUtils

if TYPE_CHECKING:
    import logging

    from core.cache.interface import CacheInterface

__all__: list[str] = ["CacheExporter", "CacheImporter"]

logger: logging.Logger = LoggerUtils.get_logger(__name__)


class CacheExporter:
    """Writes the live entries of an exportable cache to an ExportDocument."""

    def __init__(self, cache: CacheInterface) -> None:
        self._cache: CacheInterface = cache

    async def export(self, metadata: dict[str, str] | None = None) -> ExportDocument:
        """Build an export document from the cache.

        Args:
            metadata (dict[str, str] | None): Free-form information stored with the snapshot.

        Returns:
            ExportDocument: Entries ordered by key, stamped with the current UTC time.

        Raises:
            CacheError: If the cache cannot enumerate its entries.
        """
        if not isinstance(self._cache, ExportableCache):
            msg: str = f"Cache type {type(self._cache).__name__} does not support export"
            raise CacheError(msg)

        data: dict[str, str] = await self._cache.entries()
        document = ExportDocument(
            version=EXPORT_FORMAT_VERSION,
            exported_at=datetime.now(UTC).strftime("%Y-%m-%dT%H:%M:%SZ"),
            entries=[ExportEntry(key=key, value=data[key]) for key in sorted(data)],
            metadata=dict(metadata) if metadata else {},
        )
        logger.info("Exported %d cache entries", len(document.entries))
        return document

    async def export_to_file(self, path: str | Path, metadata: dict[str, str] | None = None) -> ExportDocument:
        """Export the cache and write it to a UTF-8 JSON file.

        Raises:
            CacheError: If the cache cannot be exported or the file cannot be written.
        """
        document: ExportDocument = await self.export(metadata)
        try:
            Path(path).write_text(document.to_json(indent=2, ensure_ascii=False), encoding="utf-8")
        except OSError as err:
            msg: str = f"Failed to write cache export '{path}': {err}"
            raise CacheError(msg) from err
        return document


class CacheImporter:
    """Re-populates a cache from an ExportDocument, one entry at a time."""

    def __init__(self, cache: CacheInterface) -> None:
        self._cache: CacheInterface = cache

    @staticmethod
    def parse(raw: str) -> ExportDocument:
        """Decode an export document from JSON text.

        Raises:
            CacheError: If the text is not a valid export document.
        """
        try:
            return ExportDocument.from_json(raw)
        except (json.JSONDecodeError, AttributeError, KeyError, TypeError, ValueError) as err:
            msg: str = f"Invalid cache export document: {err}"
            raise CacheError(msg) from err

    async def import_document(self, document: ExportDocument | str) -> ImportResult:
        """Write every entry of the document into the cache.

        A failed write is counted and skipped; the import never stops early.

        Args:
            document (ExportDocument | str): Parsed document or its JSON text.

        Returns:
            ImportResult: Imported and failed counts plus the document's version and metadata.

        Raises:
            CacheError: If a JSON string cannot be parsed.
        """
        if isinstance(document, str):
            document = self.parse(document)

        if document.version != EXPORT_FORMAT_VERSION:
            logger.warning("Importing cache export with unexpected version '%s'", document.version)

        result = ImportResult(version=document.version, metadata=dict(document.metadata))
        for entry in document.entries:
            try:
                await self._cache.set(entry.key, entry.value)
            except CacheError as err:
                logger.warning("Failed to import cache entry %s: %s", entry.key[:16], err)
                result.failed += 1
            else:
                result.imported += 1

        logger.info("Imported %d cache entries (%d failed)", result.imported, result.failed)
        return result

    async def import_from_file(self, path: str | Path) -> ImportResult:
        """Read an export document from a file and import it.

        Raises:
            CacheError: If the file cannot be read or parsed.
        """
        try:
            raw: str = Path(path).read_text(encoding="utf-8")
        except OSError as err:
            msg: str = f"Failed to read cache export '{path}': {err}"
            raise CacheError(msg) from err
        return await self.import_document(raw)
