"""Translation orchestrator.

Ties together content processors, the translation cache and a translation engine:
extract units, resolve them against the cache, send every miss to the engine in one batch,
write results back to the cache, and reinsert the translations into the content.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Self

from core.cache.interface import CacheError
from core.cache.parallel import DEFAULT_PARALLEL_THRESHOLD, parallel_cache_lookup, sequential_cache_lookup
from core.processors import ContentProcessor
from core.trans.interface import CountMismatchError, ProcessorError
from models.text_models import ProcessedContent, TextUnit, UnitType
from models.translation_models import TranslateRequest, TranslationStyle
from utils.hash_utils import HashUtils
from utils.lang_utils import LangUtils
from utils.logger_utils import LoggerUtils
from utils.string_utils import StringUtils

if TYPE_CHECKING:
    import logging

    from core.cache.interface import CacheInterface
    from core.trans.interface import TransInterface

__all__: list[str] = ["Translator", "TranslatorConfig"]

logger: logging.Logger = LoggerUtils.get_logger(__name__)


@dataclass
class TranslatorConfig:
    """Settings for one Translator.

    Attributes:
        target_lang (str): Target locale code (e.g., 'es_ES').
        source_lang (str): Source locale code.
        cache (CacheInterface | None): Shared translation cache. None disables caching.
        excluded_terms (list[str]): Terms the engine must keep verbatim.
        context (str): Global description of the content.
        glossary (dict[str, str]): Preferred translations for specific terms.
        style (TranslationStyle): Requested register.
        processors (dict[str, ContentProcessor] | None): Processors keyed by content type.
            None registers one instance of every built-in processor.
        parallel_threshold (int): Unit count at which cache lookups run concurrently.
            Zero or negative always uses sequential lookups.
        model_scoped_cache (bool): Include source language and engine model in cache keys.
    """

    target_lang: str
    source_lang: str = "en"
    cache: CacheInterface | None = None
    excluded_terms: list[str] = field(default_factory=list)
    context: str = ""
    glossary: dict[str, str] = field(default_factory=dict)
    style: TranslationStyle = TranslationStyle.NEUTRAL
    processors: dict[str, ContentProcessor] | None = None
    parallel_threshold: int = DEFAULT_PARALLEL_THRESHOLD
    model_scoped_cache: bool = False


@dataclass
class _BatchResult:
    translations: dict[str, str] = field(default_factory=dict)
    translated_count: int = 0
    cached_count: int = 0
    cache_errors: int = 0


class Translator:
    """Translates structured content through a pluggable engine, with caching and deduplication.

    One instance may serve concurrent ``process`` calls; the cache and any rate limiter wrapped
    around the engine are shared between them. The owner constructs the cache and closes it,
    either explicitly through ``close`` or by using the translator as an async context manager.

    Args:
        config (TranslatorConfig): Translator settings.
        engine (TransInterface | None): Translation engine, possibly wrapped with rate limiting
            and retry. None runs in cache-only mode: misses are left untranslated.
    """

    def __init__(self, config: TranslatorConfig, engine: TransInterface | None = None) -> None:
        self._config: TranslatorConfig = config
        self._engine: TransInterface | None = engine
        self._processors: dict[str, ContentProcessor] = (
            dict(config.processors) if config.processors is not None else ContentProcessor.default_processors()
        )
        logger.debug(
            "Translator created (source=%s, target=%s, processors=%s)",
            config.source_lang,
            config.target_lang,
            ", ".join(sorted(self._processors)),
        )

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        _ = exc_type, exc_val, exc_tb
        await self.close()

    async def close(self) -> None:
        """Close the cache and the engine."""
        if self._config.cache is not None:
            await self._config.cache.close()
        if self._engine is not None:
            await self._engine.close()

    @property
    def config(self) -> TranslatorConfig:
        return self._config

    @property
    def target_lang(self) -> str:
        return self._config.target_lang

    @property
    def source_lang(self) -> str:
        return self._config.source_lang

    @property
    def processors(self) -> dict[str, ContentProcessor]:
        return dict(self._processors)

    def register_processor(self, processor: ContentProcessor) -> None:
        """Register or replace the processor for its content type."""
        self._processors[processor.content_type()] = processor

    def is_source_lang(self, target_lang: str | None = None) -> bool:
        """Check whether the target shares the source's base language, so no translation is needed.

        Args:
            target_lang (str | None): Target to check instead of the configured one.
        """
        return LangUtils.same_base_language(target_lang or self._config.target_lang, self._config.source_lang)

    def is_rtl(self, target_lang: str | None = None) -> bool:
        return LangUtils.is_rtl(target_lang or self._config.target_lang)

    def direction(self, target_lang: str | None = None) -> str:
        return LangUtils.direction(target_lang or self._config.target_lang)

    async def process(self, content: str, content_type: str) -> ProcessedContent:
        """Translate one piece of content.

        Args:
            content (str): Raw content.
            content_type (str): Registered content type such as 'html' or 'python'.

        Returns:
            ProcessedContent: Translated content and counters.

        Raises:
            ProcessorError: If no processor is registered for the type, or extraction/reinsertion fails.
            ProviderError: If the engine fails (after any retries).
            CountMismatchError: If the engine returns the wrong number of results.
        """
        if self.is_source_lang():
            logger.debug("Source and target share a base language; returning content unchanged")
            return ProcessedContent(content=content)

        processor: ContentProcessor | None = self._processors.get(content_type)
        if processor is None:
            msg: str = f"no processor registered for content type '{content_type}'"
            raise ProcessorError(msg, content_type=content_type)

        parsed: Any
        units: list[TextUnit]
        parsed, units = processor.extract(content)
        if not units:
            return ProcessedContent(content=content)

        batch: _BatchResult = await self._translate_batch(units)

        result: str = processor.apply(parsed, units, batch.translations)
        result = processor.finalize(result, self._config.target_lang)

        logger.info(
            "Processed %s content: %d units, %d translated, %d cached",
            content_type,
            len(units),
            batch.translated_count,
            batch.cached_count,
        )
        return ProcessedContent(
            content=result,
            total_units=len(units),
            translated_count=batch.translated_count,
            cached_count=batch.cached_count,
            cache_errors=batch.cache_errors,
        )

    async def process_html(self, html: str) -> ProcessedContent:
        return await self.process(html, "html")

    async def translate_texts(self, texts: list[str]) -> list[str]:
        """Translate plain strings through the same cache and batching path, without a processor.

        Surrounding whitespace of each input is kept. Blank strings are returned unchanged.

        Args:
            texts (list[str]): Source strings.

        Returns:
            list[str]: Translations aligned with the input.
        """
        if self.is_source_lang():
            return list(texts)

        units: list[TextUnit] = [
            TextUnit.create(f"text-{index}", text, UnitType.PLAIN_TEXT) for index, text in enumerate(texts)
        ]
        translatable: list[TextUnit] = [unit for unit in units if unit.text]
        if not translatable:
            return list(texts)

        batch: _BatchResult = await self._translate_batch(translatable)
        results: list[str] = []
        for text, unit in zip(texts, units, strict=True):
            translated: str | None = batch.translations.get(unit.fingerprint) if unit.text else None
            results.append(StringUtils.preserve_whitespace(text, translated) if translated is not None else text)
        return results

    def _cache_key(self, fingerprint: str) -> str:
        if self._config.model_scoped_cache:
            model: str = self._engine.model_name if self._engine is not None else ""
            return HashUtils.cache_key_extended(
                fingerprint, self._config.source_lang, self._config.target_lang, model
            )
        return HashUtils.cache_key(fingerprint, self._config.target_lang)

    async def _translate_batch(self, units: list[TextUnit]) -> _BatchResult:
        """Resolve units against the cache, translate the unique misses, and write them back."""
        cache: CacheInterface | None = self._config.cache
        threshold: int = self._config.parallel_threshold
        lookup = (
            parallel_cache_lookup
            if cache is not None and threshold > 0 and len(units) >= threshold
            else sequential_cache_lookup
        )
        hits, misses = await lookup(cache, units, self._config.target_lang, key_builder=self._cache_key)

        batch = _BatchResult(translations=dict(hits))
        batch.cached_count = sum(1 for unit in units if unit.fingerprint in hits)

        # without a cache the lookup returns every unit; keep the first of each fingerprint
        to_translate: list[TextUnit] = []
        seen: set[str] = set()
        for unit in misses:
            if unit.fingerprint not in seen:
                seen.add(unit.fingerprint)
                to_translate.append(unit)

        if not to_translate:
            return batch
        if self._engine is None:
            logger.warning("No translation engine configured; %d units left untranslated", len(to_translate))
            return batch

        request = TranslateRequest(
            texts=[unit.text for unit in to_translate],
            target_lang=self._config.target_lang,
            source_lang=self._config.source_lang,
            text_contexts=[unit.disambiguation_context for unit in to_translate],
            excluded_terms=list(self._config.excluded_terms),
            context=self._config.context,
            glossary=dict(self._config.glossary),
            style=self._config.style,
        )
        logger.debug("Dispatching %d texts to engine '%s'", len(request.texts), self._engine.engine_name)
        results: list[str] = await self._engine.translate(request)
        if len(results) != len(to_translate):
            raise CountMismatchError(expected=len(to_translate), got=len(results))

        for unit, translated in zip(to_translate, results, strict=True):
            batch.translations[unit.fingerprint] = translated
            batch.translated_count += 1
            if cache is None:
                continue
            key: str = self._cache_key(unit.fingerprint)
            try:
                await cache.set(key, translated)
            except CacheError as err:
                batch.cache_errors += 1
                logger.warning("Failed to write cache entry %s: %s", key[:16], err)

        return batch
