"""Configuration file loader and validator.

Handles reading, formatting, and validating settings from the INI configuration file.
Raises exceptions for any issues encountered during loading.
"""

from __future__ import annotations

import ast
import configparser
from configparser import ConfigParser
from dataclasses import fields
from pathlib import Path
from typing import TYPE_CHECKING, Any

from models.config_models import Config
from models.translation_models import TranslationStyle
from utils.logger_utils import LoggerUtils

if TYPE_CHECKING:
    import logging
    from collections.abc import Callable
    from dataclasses import Field as DataclassField
else:
    from dataclasses import Field as DataclassField

__all__: list[str] = [
    "ALLOWED_CACHE_BACKENDS",
    "ALLOWED_TRANSLATION_ENGINES",
    "Config",
    "ConfigFileNotFoundError",
    "ConfigFormatError",
    "ConfigLoader",
    "ConfigLoaderError",
    "ConfigTypeError",
    "ConfigValueError",
]

logger: logging.Logger = LoggerUtils.get_logger(__name__)

ALLOWED_TRANSLATION_ENGINES: list[str] = ["openai", "mock"]
ALLOWED_CACHE_BACKENDS: list[str] = ["memory", "redis", "none"]


class ConfigLoaderError(Exception):
    """An error occurred while processing the configuration file."""


class ConfigFileNotFoundError(ConfigLoaderError):
    """The specified configuration file does not exist."""


class ConfigFormatError(ConfigLoaderError):
    """The configuration file is not formatted correctly."""


class ConfigValueError(ConfigFormatError):
    """The configuration file contains an invalid value."""


class ConfigTypeError(ConfigFormatError):
    """The configuration file contains an invalid type."""


class ConfigLoader:
    """Handles loading and validation of configuration settings.

    Reads the INI file into a Config object, applies keyword overrides coming from the
    command line, then validates the result.

    Args:
        config_filename (str): INI file name to load. An empty name skips the file and uses defaults.
        script_name (str): Executing script name, used in error messaging.
        **args: Optional overrides (target_lang, source_lang, context, exclude, cache_ttl,
            engine, model, style, debug).

    Raises:
        ConfigFileNotFoundError: If the configuration file does not exist.
        ConfigFormatError: If the file cannot be parsed or contains invalid values/types.
    """

    def __init__(
        self,
        *,
        config_filename: str,
        script_name: str,
        **args,
    ) -> None:
        self.config = Config()
        self.config.GENERAL.SCRIPT_NAME = script_name

        if config_filename:
            parser: ConfigParser = self._read_file(config_filename, script_name)
            self._convert_settings(parser)
        else:
            logger.debug("No configuration file given; using defaults")

        self._apply_overrides(args)
        self._validate_settings()

    @staticmethod
    def _read_file(config_filename: str, script_name: str) -> ConfigParser:
        config_path = Path(config_filename)
        msg: str
        if not config_path.exists():
            msg = (
                f"Configuration file '{config_filename}' not found. "
                f"Please create '{config_filename}' in the same directory as '{script_name}'."
            )
            raise ConfigFileNotFoundError(msg)

        parser: ConfigParser = ConfigParser()
        try:
            parser.read(config_filename, encoding="utf-8")
        except configparser.Error as err:
            msg = f"Failed to parse configuration file '{config_filename}': {err}"
            raise ConfigFormatError(msg) from None
        return parser

    def _convert_settings(self, parser: ConfigParser) -> None:
        """Convert configuration settings from the parser to the Config object.

        Args:
            parser (ConfigParser): Parsed INI data.

        Raises:
            ConfigFormatError: If a value cannot be parsed or coerced to the expected type.
        """
        formatter = _ConfigFormatter(self.config, parser)
        for section in fields(self.config):
            if not parser.has_section(section.name):
                logger.debug("Skipping undefined section: '%s'", section.name)
                continue
            self._convert_section_field(parser, formatter, section)

    def _convert_section_field(
        self, parser: ConfigParser, formatter: _ConfigFormatter, section: DataclassField[Any]
    ) -> None:
        """Convert all fields in a configuration section.

        Args:
            parser (ConfigParser): Parsed INI data.
            formatter (_ConfigFormatter): Formatter used to coerce string values to typed values.
            section (Field[Any]): Target configuration section dataclass field.

        Raises:
            ConfigFormatError: If a value fails to format correctly.
        """
        for key in fields(getattr(self.config, section.name)):
            try:
                parser[section.name][key.name]
            except KeyError:
                logger.debug("Skipping undefined setting: '%s.%s'", section.name, key.name)
                continue

            formatted_value = formatter.apply_format(section, key)
            setattr(getattr(self.config, section.name), key.name, formatted_value)

    def _apply_overrides(self, args: dict[str, Any]) -> None:
        """Apply command-line overrides on top of the file settings."""
        overrides: dict[str, tuple[str, str]] = {
            "target_lang": ("TRANSLATION", "TARGET_LANG"),
            "source_lang": ("TRANSLATION", "SOURCE_LANG"),
            "context": ("TRANSLATION", "CONTEXT"),
            "style": ("TRANSLATION", "STYLE"),
            "cache_ttl": ("CACHE", "TTL"),
            "engine": ("ENGINE", "NAME"),
            "model": ("ENGINE", "MODEL"),
        }
        for arg_name, (section_name, key_name) in overrides.items():
            if args.get(arg_name) is not None:
                setattr(getattr(self.config, section_name), key_name, args[arg_name])

        exclude: str | list[str] | None = args.get("exclude")
        if exclude is not None:
            terms: list[str] = exclude.split(",") if isinstance(exclude, str) else list(exclude)
            self.config.TRANSLATION.EXCLUDED_TERMS = [term.strip() for term in terms if term.strip()]
        if args.get("debug", False):
            self.config.GENERAL.DEBUG = True

    def _validate_settings(self) -> None:
        """Validate the style, cache backend, engine name, and numeric limits.

        Raises:
            ConfigFormatError: If validation fails for any setting.
        """
        self._inspect_defined_item("CACHE", "BACKEND", ALLOWED_CACHE_BACKENDS)
        self._inspect_defined_item("ENGINE", "NAME", ALLOWED_TRANSLATION_ENGINES)
        self._inspect_defined_item("TRANSLATION", "STYLE", [style.value for style in TranslationStyle])
        for section_name, key_name in (
            ("CACHE", "TTL"),
            ("RATE_LIMIT", "REQUESTS_PER_MINUTE"),
            ("RATE_LIMIT", "BURST_SIZE"),
            ("RETRY", "MAX_RETRIES"),
            ("RETRY", "BASE_DELAY"),
            ("RETRY", "MAX_DELAY"),
            ("ENGINE", "TIMEOUT"),
        ):
            self._validate_non_negative(section_name, key_name)

    def _inspect_defined_item(self, section_name: str, key_name: str, defined_list: list[str]) -> None:
        """Verify that a configuration value is one of the allowed options.

        Args:
            section_name (str): Section name in the config model.
            key_name (str): Field name to inspect.
            defined_list (list[str]): Allowed values.

        Raises:
            ConfigTypeError: If the configured value is not a str.
            ConfigValueError: If the value is not in the allowed list.
        """
        value: Any = getattr(getattr(self.config, section_name), key_name)
        field_name: str = f"{section_name}.{key_name}"

        if not isinstance(value, str):
            msg: str = f"Unsupported type used for '{field_name}': {type(value)}"
            raise ConfigTypeError(msg)

        normalized: str = value.strip().lower()
        if normalized not in defined_list:
            msg = f"Unknown value '{value}' is set for '{field_name}'. Allowed values: {', '.join(defined_list)}"
            raise ConfigValueError(msg)
        setattr(getattr(self.config, section_name), key_name, normalized)

    def _validate_non_negative(self, section_name: str, key_name: str) -> None:
        value: int | float = getattr(getattr(self.config, section_name), key_name)
        if value < 0:
            msg: str = f"'{section_name}.{key_name}' must not be negative: {value}"
            raise ConfigValueError(msg)


class _ConfigFormatter:
    """Converts INI string values to typed Python objects (str, bool, int, float, list, dict)."""

    def __init__(self, config: Config, parser: ConfigParser) -> None:
        self.config: Config = config
        self.parser: ConfigParser = parser

    def apply_format(self, section: DataclassField[Any], key: DataclassField[Any]) -> Any:
        """Convert INI value to the expected Python type based on the Config field type.

        Args:
            section (DataclassField[Any]): Configuration section field containing the key.
            key (DataclassField[Any]): Target field within the section.

        Returns:
            Any: Parsed value coerced to the type declared in the config dataclass.

        Raises:
            ConfigValueError: If a value cannot be coerced to the expected type.
            ConfigFormatError: If literal evaluation fails due to invalid syntax.
            ConfigTypeError: If an unexpected type is encountered during coercion.
        """
        formatters: dict[
            type[str | bool | int | float],
            Callable[[DataclassField[Any], DataclassField[Any]], str | bool | int | float],
        ] = {
            str: self.parse_as_string,
            bool: self.parse_as_boolean,
            int: self.parse_as_integer,
            float: self.parse_as_float,
        }

        expected: Any = getattr(getattr(self.config, section.name), key.name)
        formatter: Callable[[DataclassField[Any], DataclassField[Any]], str | bool | int | float] | None = (
            formatters.get(type(expected))
        )
        if formatter:
            try:
                return formatter(section, key)
            except ValueError as err:
                msg = f"Invalid value for {section.name}.{key.name}: {err}"
                raise ConfigValueError(msg) from err
            except TypeError as err:
                msg = f"Invalid value for {section.name}.{key.name}: {err}"
                raise ConfigTypeError(msg) from err

        value_str: str = self.parser[section.name][key.name]
        try:
            value: Any = ast.literal_eval(value_str)
        except ValueError as err:
            msg = f"Invalid literal for {section.name}.{key.name}: {value_str}"
            raise ConfigValueError(msg) from err
        except SyntaxError as err:
            msg = f"Invalid literal for {section.name}.{key.name}: {value_str}"
            raise ConfigFormatError(msg) from err

        if not isinstance(value, type(expected)):
            msg = f"Expected {type(expected).__name__} for {section.name}.{key.name}, got {type(value).__name__}"
            raise ConfigTypeError(msg)
        return value

    def parse_as_string(self, section: DataclassField[Any], key: DataclassField[Any]) -> str:
        """Return the INI string with one level of surrounding quotes removed."""
        value: str = self.parser.get(section.name, key.name).strip()
        for char in ("'", '"'):
            if len(value) >= 2 and value.startswith(char) and value.endswith(char):
                return value[1:-1]
        return value

    def parse_as_float(self, section: DataclassField[Any], key: DataclassField[Any]) -> float:
        """Convert INI string to float."""
        value: str = self.parser.get(section.name, key.name)
        for char in ("'", '"'):
            value = value.removeprefix(char).removesuffix(char)
        return float(value)

    def parse_as_integer(self, section: DataclassField[Any], key: DataclassField[Any]) -> int:
        """Convert INI string to integer."""
        value: str = self.parser.get(section.name, key.name)
        for char in ("'", '"'):
            value = value.removeprefix(char).removesuffix(char)
        return int(float(value))

    def parse_as_boolean(self, section: DataclassField[Any], key: DataclassField[Any]) -> bool:
        """Convert INI string to boolean."""
        return self.parser.getboolean(section.name, key.name)
