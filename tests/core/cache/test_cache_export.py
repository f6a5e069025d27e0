"""Tests for cache export and import."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

import pytest

from core.cache.export import CacheExporter, CacheImporter
from core.cache.interface import CacheError, CacheInterface
from core.cache.memory_cache import MemoryCache
from models.cache_models import EXPORT_FORMAT_VERSION, ExportDocument, ExportEntry

if TYPE_CHECKING:
    from pathlib import Path


class FlakyCache(CacheInterface):
    """Cache that rejects writes for keys starting with 'bad'."""

    def __init__(self) -> None:
        self.data: dict[str, str] = {}

    async def get(self, key: str) -> str | None:
        return self.data.get(key)

    async def set(self, key: str, value: str) -> None:
        if key.startswith("bad"):
            msg = "write rejected"
            raise CacheError(msg)
        self.data[key] = value


@pytest.mark.asyncio
async def test_export_orders_entries_and_stamps_time() -> None:
    cache = MemoryCache()
    await cache.set("b:es", "dos")
    await cache.set("a:es", "uno")

    document: ExportDocument = await CacheExporter(cache).export({"source": "test"})

    assert document.version == EXPORT_FORMAT_VERSION
    assert [entry.key for entry in document.entries] == ["a:es", "b:es"]
    assert document.metadata == {"source": "test"}
    assert document.exported_at.endswith("Z")


@pytest.mark.asyncio
async def test_export_requires_enumerable_cache() -> None:
    with pytest.raises(CacheError, match="does not support export"):
        await CacheExporter(FlakyCache()).export()


@pytest.mark.asyncio
async def test_file_round_trip_restores_entries(tmp_path: Path) -> None:
    source = MemoryCache()
    await source.set("fp1:ja_JP", "こんにちは")
    await source.set("fp2:ja_JP", "世界")
    path: Path = tmp_path / "cache.json"

    await CacheExporter(source).export_to_file(path, {"target_lang": "ja_JP"})
    raw: dict = json.loads(path.read_text(encoding="utf-8"))
    assert raw["version"] == "1.0"
    assert "こんにちは" in path.read_text(encoding="utf-8")

    target = MemoryCache()
    result = await CacheImporter(target).import_from_file(path)

    assert (result.imported, result.failed, result.total) == (2, 0, 2)
    assert result.metadata == {"target_lang": "ja_JP"}
    assert await target.entries() == await source.entries()


@pytest.mark.asyncio
async def test_import_counts_failures_without_stopping() -> None:
    cache = FlakyCache()
    document = ExportDocument(
        entries=[ExportEntry("good1", "a"), ExportEntry("bad1", "b"), ExportEntry("good2", "c")],
    )

    result = await CacheImporter(cache).import_document(document)

    assert result.imported == 2
    assert result.failed == 1
    assert cache.data == {"good1": "a", "good2": "c"}


@pytest.mark.asyncio
async def test_import_rejects_malformed_json() -> None:
    with pytest.raises(CacheError, match="Invalid cache export document"):
        await CacheImporter(MemoryCache()).import_document("{not json")


@pytest.mark.asyncio
async def test_import_missing_file_raises_cache_error(tmp_path: Path) -> None:
    with pytest.raises(CacheError, match="Failed to read"):
        await CacheImporter(MemoryCache()).import_from_file(tmp_path / "missing.json")
