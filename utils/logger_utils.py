from __future__ import annotations

import logging
import sys
import warnings
from logging import Formatter, StreamHandler
from logging.handlers import RotatingFileHandler
from typing import TYPE_CHECKING, ClassVar, Final, Literal, Self, TextIO

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path

__all__: list[str] = ["LoggerUtils"]

type LevelType = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

_LOG_FILE_SIZE: Final[int] = 2 * 1024 * 1024  # 2MB
_LOG_BACKUP_COUNT: Final[int] = 2
_FILE_FORMAT: Final[str] = "%(asctime)s %(levelname)-8s %(name)-36s\t%(funcName)s\t%(message)s"

DEFAULT_LOG_LEVEL: Final[int] = logging.INFO
LOGGER_NAMESPACE: Final[str] = "TLAI"


class LoggerUtils:
    """Configure-once logging setup for the tlai command line.

    Library modules only ever call ``LoggerUtils.get_logger(__name__)``; handlers are attached
    when the CLI instantiates ``LoggerUtils``. Until then, records propagate to whatever the
    host application configured.

    Attributes:
        _configured (bool): Whether handlers have already been attached.
        _instance (LoggerUtils | None): The singleton instance.
        _saved_showwarning (Callable | None): ``warnings.showwarning`` before it was redirected.
    """

    _configured: ClassVar[bool] = False
    _instance: ClassVar[Self | None] = None
    _saved_showwarning: ClassVar[Callable[..., None] | None] = None

    def __new__(cls, *args, **kwargs) -> Self:
        _ = args, kwargs
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self, filename: str | Path = "", *, console_level: LevelType = "WARNING") -> None:
        """Attach a stderr handler and, when a file name is given, a rotating file handler.

        Calling this a second time only updates the console level.

        Args:
            filename (str | Path): Log file path. If empty, no file handler is attached.
            console_level (LevelType): Minimum level printed to stderr.
        """
        self.root_logger: logging.Logger = logging.getLogger(LOGGER_NAMESPACE)
        if LoggerUtils._configured:
            self._set_console_level(console_level)
            return

        # the logger level must not be higher than the handler levels
        self.root_logger.setLevel(DEFAULT_LOG_LEVEL)
        self._console_handler: StreamHandler[TextIO] = StreamHandler(sys.stderr)
        self._console_handler.setFormatter(Formatter("%(levelname)s: %(message)s"))
        self.root_logger.addHandler(self._console_handler)
        self._set_console_level(console_level)

        if str(filename).strip():
            self._file_logging(str(filename))

        LoggerUtils._saved_showwarning = warnings.showwarning
        warnings.showwarning = self.warning_to_log
        LoggerUtils._configured = True

    def _set_console_level(self, level: LevelType) -> None:
        self._console_handler.setLevel(logging.getLevelNamesMapping().get(level.upper(), logging.WARNING))

    def warning_to_log(
        self,
        message: Warning | str,
        category: type[Warning],
        filename: str,
        lineno: int,
        file: TextIO | None = None,
        line: str | None = None,
    ) -> None:
        """Route ``warnings.warn`` output into the log; matches ``warnings.showwarning``."""
        _ = file, line
        self.root_logger.warning("%s:%d: %s: %s", filename, lineno, category.__name__, message)

    def _file_logging(self, filename: str) -> None:
        try:
            file_handler = RotatingFileHandler(
                filename=filename,
                maxBytes=_LOG_FILE_SIZE,
                backupCount=_LOG_BACKUP_COUNT,
                encoding="utf-8",
            )
        except (FileNotFoundError, PermissionError):
            self.root_logger.error("Cannot open log file %s; file logging is disabled.", filename)
            return

        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(Formatter(_FILE_FORMAT))
        self.root_logger.addHandler(file_handler)

    def set_level(self, level: LevelType) -> None:
        """Set the namespace root level, falling back to INFO for unknown names.

        Args:
            level (LevelType): Level name.
        """
        level_value: int | None = logging.getLevelNamesMapping().get(level.upper())
        if level_value is None:
            self.root_logger.setLevel(DEFAULT_LOG_LEVEL)
            self.root_logger.warning("Unknown logging level '%s'; using INFO.", level)
            return
        self.root_logger.setLevel(level_value)

    @classmethod
    def reset(cls) -> None:
        """Detach and close every handler so the next instantiation configures from scratch."""
        root_logger: logging.Logger = logging.getLogger(LOGGER_NAMESPACE)
        for handler in list(root_logger.handlers):
            root_logger.removeHandler(handler)
            handler.close()
        if cls._saved_showwarning is not None:
            warnings.showwarning = cls._saved_showwarning
            cls._saved_showwarning = None
        cls._configured = False
        cls._instance = None

    @staticmethod
    def get_logger(name: str | None = None) -> logging.Logger:
        """Return a logger nested under the ``TLAI`` namespace.

        Args:
            name (str | None): Module name. If None, the namespace root logger is returned.

        Returns:
            logging.Logger: The logger instance.
        """
        return logging.getLogger(f"{LOGGER_NAMESPACE}.{name}" if name else LOGGER_NAMESPACE)
