"""Command-line front end for tlai.

Translates an HTML document or a Python source file into a target language, or inspects what
would be translated (dry run, diff against a previous version) without calling the backend.

Progress and statistics go to stderr; translated content goes to stdout or the output file.
"""

from __future__ import annotations

import argparse
import asyncio
import sys
import time
from pathlib import Path
from typing import TYPE_CHECKING, Final, NoReturn, TextIO

from config.loader import Config, ConfigLoader, ConfigLoaderError
from core import VERSION, Translator, TranslatorConfig
from core.cache import CacheError, CacheExporter, CacheImporter, MemoryCache, RedisCache
from core.diff import diff_content_with_context
from core.processors import ContentProcessor
from core.trans import (
    RateLimitedEngine,
    RateLimiter,
    RetryableEngine,
    RetryConfig,
    TransInterface,
    TranslateExceptionError,
)
from core.trans.engines import MockTranslation, OpenAITranslation
from models.report_models import DiffReport, DiffReportStats, DryRunReport, ModifiedText, TranslationReport
from models.translation_models import TranslationStyle
from utils.logger_utils import LoggerUtils

if TYPE_CHECKING:
    import logging

    from core.cache import CacheInterface
    from models.cache_models import ImportResult
    from models.diff_models import DiffResult
    from models.text_models import ProcessedContent, TextUnit
    from utils.logger_utils import LevelType

CFG_FILE: Final[str] = "tlai.ini"
PROGRAM_NAME: Final[str] = "tlai"
STDIN_NAME: Final[str] = "stdin"

_EXTENSION_TYPES: Final[dict[str, str]] = {
    ".html": "html",
    ".htm": "html",
    ".xhtml": "html",
    ".py": "python",
    ".pyi": "python",
}
_PREVIEW_LENGTH: Final[int] = 60

# the engine modules must be imported for their registration side effect
_ENGINES: Final[tuple[type[TransInterface], ...]] = (OpenAITranslation, MockTranslation)

logger: logging.Logger = LoggerUtils.get_logger(__name__)


class _ArgumentParser(argparse.ArgumentParser):
    def error(self, message: str) -> NoReturn:
        print(f"\n{message}\n", file=sys.stderr)
        self.print_help(sys.stderr)
        raise SystemExit(2)


def parse_arguments(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments.

    Args:
        argv (list[str] | None): Arguments without the program name. Defaults to sys.argv.

    Returns:
        argparse.Namespace: Parsed arguments.
    """
    parser = _ArgumentParser(
        prog=PROGRAM_NAME,
        description="Translate HTML documents and Python sources with an AI translation backend",
        epilog="Example: python tlai.py index.html --lang es_ES -o index.es.html",
    )
    parser.add_argument("input", nargs="?", metavar="INPUT", help="Input file (default: stdin)")
    parser.add_argument("--lang", dest="target_lang", metavar="LANG", help="Target language code (e.g., es_ES)")
    parser.add_argument("--source", dest="source_lang", metavar="LANG", help="Source language code (default: en)")
    parser.add_argument(
        "--type",
        dest="content_type",
        metavar="TYPE",
        help="Content type: html or python (default: inferred from the file extension)",
    )
    parser.add_argument("-o", "--output", dest="output", metavar="FILE", help="Output file (default: stdout)")
    parser.add_argument(
        "--config", dest="config", metavar="FILE", help=f"Configuration file (default: {CFG_FILE} if present)"
    )
    parser.add_argument("--context", dest="context", help="Description of the content (e.g., 'E-commerce website')")
    parser.add_argument("--exclude", dest="exclude", metavar="TERMS", help="Comma-separated terms to never translate")
    parser.add_argument("--style", dest="style", choices=[style.value for style in TranslationStyle])
    parser.add_argument("--cache-ttl", dest="cache_ttl", type=int, metavar="SECONDS", help="Cache entry lifetime")
    parser.add_argument("--engine", dest="engine", metavar="NAME", help="Translation engine: openai or mock")
    parser.add_argument("--model", dest="model", help="Model used by the translation engine")
    parser.add_argument("--api-key", dest="api_key", help="API key (default: OPENAI_API_KEY environment variable)")
    parser.add_argument(
        "--dry-run", dest="dry_run", action="store_true", help="List the units that would be translated"
    )
    parser.add_argument("--json", dest="json", action="store_true", help="Print results as JSON")
    parser.add_argument("--diff", dest="diff", metavar="OLD", help="Compare the input with a previous version")
    parser.add_argument(
        "--update", dest="update", action="store_true", help="With --diff, report only the strings to re-translate"
    )
    parser.add_argument("--export-cache", dest="export_cache", metavar="FILE", help="Write the cache to a file")
    parser.add_argument("--import-cache", dest="import_cache", metavar="FILE", help="Load the cache from a file")
    parser.add_argument("--quiet", dest="quiet", action="store_true", help="Suppress progress output")
    parser.add_argument("--debug", dest="debug", action="store_true", help="Enable debug logging")
    parser.add_argument("--version", action="version", version=f"{PROGRAM_NAME} {VERSION}")
    return parser.parse_args(argv)


def load_config(args: argparse.Namespace) -> Config:
    """Load the configuration file and apply command-line overrides.

    An explicitly named file must exist; the default file is optional.

    Raises:
        ConfigLoaderError: If the configuration cannot be loaded or is invalid.
    """
    config_filename: str = args.config or (CFG_FILE if Path(CFG_FILE).exists() else "")
    overrides: dict[str, object] = {key: value for key, value in vars(args).items() if key != "config"}
    config: Config = ConfigLoader(
        config_filename=config_filename, script_name=Path(sys.argv[0]).name, **overrides
    ).config
    config.GENERAL.VERSION = VERSION
    return config


def detect_content_type(input_path: str | None, explicit: str | None) -> str:
    """Return the explicit content type, else the one implied by the extension, else 'html'."""
    if explicit:
        return explicit.strip().lower()
    if input_path:
        return _EXTENSION_TYPES.get(Path(input_path).suffix.lower(), "html")
    return "html"


def read_input(input_path: str | None) -> tuple[str, str]:
    """Read the input file, or stdin when no path is given.

    Returns:
        tuple[str, str]: Content and a display name.
    """
    if not input_path:
        return sys.stdin.read(), STDIN_NAME
    path = Path(input_path)
    return path.read_text(encoding="utf-8"), path.name


async def build_cache(config: Config) -> CacheInterface | None:
    """Create the cache backend selected in the configuration.

    Raises:
        CacheError: If the Redis server cannot be reached.
    """
    match config.CACHE.BACKEND:
        case "redis":
            return await RedisCache.from_url(
                config.CACHE.REDIS_URL, ttl_seconds=config.CACHE.TTL, key_prefix=config.CACHE.KEY_PREFIX
            )
        case "none":
            return None
        case _:
            return MemoryCache(ttl_seconds=config.CACHE.TTL)


def build_engine(config: Config, api_key: str | None = None) -> TransInterface:
    """Create the configured engine wrapped with rate limiting and retry.

    Retry is the outer wrapper so that every attempt takes its own rate-limit token.
    """
    engine: TransInterface = TransInterface.create(
        config.ENGINE.NAME,
        api_key=api_key,
        model=config.ENGINE.MODEL,
        temperature=config.ENGINE.TEMPERATURE,
        base_url=config.ENGINE.BASE_URL,
        timeout=config.ENGINE.TIMEOUT,
    )
    limiter = RateLimiter(config.RATE_LIMIT.REQUESTS_PER_MINUTE, config.RATE_LIMIT.BURST_SIZE)
    retry_config = RetryConfig(
        max_retries=config.RETRY.MAX_RETRIES,
        base_delay=config.RETRY.BASE_DELAY,
        max_delay=config.RETRY.MAX_DELAY,
    )
    return RetryableEngine(RateLimitedEngine(engine, limiter), retry_config)


def _preview(text: str) -> str:
    return text if len(text) <= _PREVIEW_LENGTH else f"{text[: _PREVIEW_LENGTH - 3]}..."


def run_dry_run(
    processor: ContentProcessor, content: str, input_name: str, target_lang: str, *, as_json: bool, out: TextIO
) -> None:
    """Print the units a translation run would send to the backend."""
    units: list[TextUnit]
    _, units = processor.extract(content)

    if as_json:
        report = DryRunReport(
            input_file=input_name, target_lang=target_lang, unit_count=len(units), texts=[u.text for u in units]
        )
        print(report.to_json(indent=2, ensure_ascii=False), file=out)
        return

    print(f"Dry run: {input_name} -> {target_lang}", file=out)
    print(f"Found {len(units)} translatable text units:\n", file=out)
    for index, unit in enumerate(units, start=1):
        print(f"{index:3d}. {_preview(unit.text)!r}", file=out)
        if unit.disambiguation_context:
            print(f"     Context: {unit.disambiguation_context}", file=out)


def run_diff(
    processor: ContentProcessor,
    content: str,
    input_name: str,
    previous_path: str,
    target_lang: str,
    *,
    as_json: bool,
    out: TextIO,
    update: bool = False,
) -> DiffResult:
    """Compare the input with a previous version and print what needs translation.

    With ``update`` the text report ends with a note on how many strings an incremental
    pass would send to the engine.

    Raises:
        OSError: If the previous version cannot be read.
        ProcessorError: If either version cannot be parsed.
    """
    previous = Path(previous_path)
    old_units: list[TextUnit]
    new_units: list[TextUnit]
    _, old_units = processor.extract(previous.read_text(encoding="utf-8"))
    _, new_units = processor.extract(content)

    diff: DiffResult = diff_content_with_context(old_units, new_units)
    stats = diff.stats()

    if as_json:
        report = DiffReport(
            input_file=input_name,
            previous_file=previous.name,
            target_lang=target_lang,
            stats=DiffReportStats(
                added=stats.added, removed=stats.removed, modified=stats.modified, unchanged=stats.unchanged
            ),
            needs_translation=[unit.text for unit in diff.needs_translation()],
            added=[unit.text for unit in diff.added],
            removed=[unit.text for unit in diff.removed],
            modified=[ModifiedText(old=pair.old.text, new=pair.new.text) for pair in diff.modified],
        )
        print(report.to_json(indent=2, ensure_ascii=False), file=out)
        return diff

    print(f"Diff: {input_name} vs {previous.name}", file=out)
    print(f"Target language: {target_lang}\n", file=out)
    print("Summary:", file=out)
    print(f"  Unchanged: {stats.unchanged}", file=out)
    print(f"  Added:     {stats.added}", file=out)
    print(f"  Removed:   {stats.removed}", file=out)
    print(f"  Modified:  {stats.modified}", file=out)

    if not diff.has_changes():
        print("\nNo changes detected.", file=out)
        return diff

    needs: list[TextUnit] = diff.needs_translation()
    print(f"\nNeeds translation ({len(needs)}):", file=out)
    for unit in needs:
        print(f"  + {_preview(unit.text)!r}", file=out)
    if diff.removed:
        print(f"\nRemoved ({len(diff.removed)}):", file=out)
        for unit in diff.removed:
            print(f"  - {_preview(unit.text)!r}", file=out)
    if update:
        print(f"\nUpdate mode: only the {len(needs)} new or modified strings would be translated.", file=out)
        print("Run without --diff to perform the translation.", file=out)
    return diff


def _build_translator_config(config: Config, cache: CacheInterface | None) -> TranslatorConfig:
    return TranslatorConfig(
        target_lang=config.TRANSLATION.TARGET_LANG,
        source_lang=config.TRANSLATION.SOURCE_LANG,
        cache=cache,
        excluded_terms=list(config.TRANSLATION.EXCLUDED_TERMS),
        context=config.TRANSLATION.CONTEXT,
        glossary=dict(config.TRANSLATION.GLOSSARY),
        style=TranslationStyle.from_name(config.TRANSLATION.STYLE),
        parallel_threshold=config.TRANSLATION.PARALLEL_THRESHOLD,
    )


async def run_translation(
    args: argparse.Namespace, config: Config, content: str, input_name: str, content_type: str
) -> int:
    """Translate the content and write the result.

    Returns:
        int: Process exit code.
    """
    engine: TransInterface = build_engine(config, api_key=args.api_key)
    cache: CacheInterface | None = await build_cache(config)
    target_lang: str = config.TRANSLATION.TARGET_LANG

    async with Translator(_build_translator_config(config, cache), engine) as translator:
        if args.import_cache:
            if cache is None:
                print("Warning: --import-cache ignored because caching is disabled.", file=sys.stderr)
            else:
                imported: ImportResult = await CacheImporter(cache).import_from_file(args.import_cache)
                if not args.quiet:
                    print(f"Imported {imported.imported} cache entries ({imported.failed} failed)", file=sys.stderr)

        if not args.quiet:
            print(f"Translating {input_name} to {target_lang}...", file=sys.stderr)
        started: float = time.perf_counter()
        result: ProcessedContent = await translator.process(content, content_type)
        elapsed_ms: int = int((time.perf_counter() - started) * 1000)

        if args.export_cache:
            if cache is None:
                print("Warning: --export-cache ignored because caching is disabled.", file=sys.stderr)
            else:
                await CacheExporter(cache).export_to_file(
                    args.export_cache, metadata={"target_lang": target_lang, "version": VERSION}
                )

    output: str = result.content
    if args.json:
        output = TranslationReport(
            content=result.content,
            target_lang=target_lang,
            total_units=result.total_units,
            translated_count=result.translated_count,
            cached_count=result.cached_count,
            cache_errors=result.cache_errors,
            duration_ms=elapsed_ms,
        ).to_json(indent=2, ensure_ascii=False)

    if args.output:
        Path(args.output).write_text(output, encoding="utf-8")
    else:
        sys.stdout.write(output)
        if args.json:
            sys.stdout.write("\n")

    if not args.quiet:
        print(f"\nDone in {elapsed_ms} ms", file=sys.stderr)
        print(f"  Units found:  {result.total_units}", file=sys.stderr)
        print(f"  Translated:   {result.translated_count}", file=sys.stderr)
        print(f"  From cache:   {result.cached_count}", file=sys.stderr)
        if result.cache_errors:
            print(f"  Cache errors: {result.cache_errors}", file=sys.stderr)
    return 0


async def main(argv: list[str] | None = None) -> int:
    """Main entry point.

    Performs the following steps:
    1. Parse command-line arguments and load configuration
    2. Configure logging
    3. Read the input and pick a content processor
    4. Run the diff, the dry run, or the translation

    Returns:
        int: Process exit code.
    """
    args: argparse.Namespace = parse_arguments(argv)
    try:
        config: Config = load_config(args)
    except ConfigLoaderError as err:
        print(f"Error: failed to load configuration: {err}", file=sys.stderr)
        return 1

    console_level: LevelType = "DEBUG" if config.GENERAL.DEBUG else "ERROR" if args.quiet else "WARNING"
    logger_utils = LoggerUtils(config.GENERAL.LOG_FILE, console_level=console_level)
    logger_utils.set_level("DEBUG" if config.GENERAL.DEBUG else "INFO")
    logger.debug("%s %s started with %s", PROGRAM_NAME, VERSION, vars(args))

    target_lang: str = config.TRANSLATION.TARGET_LANG
    if not target_lang:
        print("Error: --lang is required (or set TRANSLATION.TARGET_LANG in the configuration)", file=sys.stderr)
        return 2
    if args.update and not args.diff:
        print("Error: --update requires --diff", file=sys.stderr)
        return 2

    content_type: str = detect_content_type(args.input, args.content_type)
    processor_cls: type[ContentProcessor] | None = ContentProcessor.registered.get(content_type)
    if processor_cls is None:
        known: str = ", ".join(sorted(ContentProcessor.registered))
        print(f"Error: unsupported content type '{content_type}' (known: {known})", file=sys.stderr)
        return 2

    try:
        content, input_name = read_input(args.input)
        if args.diff:
            run_diff(
                processor_cls(),
                content,
                input_name,
                args.diff,
                target_lang,
                as_json=args.json,
                update=args.update,
                out=sys.stdout,
            )
            return 0
        if args.dry_run:
            run_dry_run(processor_cls(), content, input_name, target_lang, as_json=args.json, out=sys.stdout)
            return 0
        return await run_translation(args, config, content, input_name, content_type)
    except TranslateExceptionError as err:
        logger.error("Translation failed: %s", err)
        print(f"Error: translation failed: {err}", file=sys.stderr)
    except CacheError as err:
        logger.error("Cache failure: %s", err)
        print(f"Error: cache failure: {err}", file=sys.stderr)
    except (OSError, ValueError) as err:
        print(f"Error: {err}", file=sys.stderr)
    return 1


def cli() -> None:
    """Console script entry point."""
    try:
        sys.exit(asyncio.run(main()))
    except KeyboardInterrupt:
        print("\nCancelled by user.", file=sys.stderr)
        sys.exit(130)


if __name__ == "__main__":
    cli()
