from __future__ import annotations

import logging
import warnings
from typing import TYPE_CHECKING

import pytest

from utils.logger_utils import LoggerUtils

if TYPE_CHECKING:
    from collections.abc import Iterator
    from pathlib import Path


@pytest.fixture(autouse=True)
def _fresh_logging() -> Iterator[None]:
    LoggerUtils.reset()
    yield
    LoggerUtils.reset()


def test_get_logger_nests_under_namespace() -> None:
    assert LoggerUtils.get_logger("core.diff").name == "TLAI.core.diff"
    assert LoggerUtils.get_logger().name == "TLAI"


def test_file_handler_receives_debug_records(tmp_path: Path) -> None:
    log_file: Path = tmp_path / "tlai.log"
    logger_utils = LoggerUtils(log_file)
    logger_utils.set_level("DEBUG")

    LoggerUtils.get_logger("tests").debug("cache lookup finished")
    for handler in logger_utils.root_logger.handlers:
        handler.flush()

    assert "cache lookup finished" in log_file.read_text(encoding="utf-8")


def test_console_level_follows_latest_instantiation() -> None:
    LoggerUtils(console_level="ERROR")
    logger_utils = LoggerUtils(console_level="DEBUG")

    levels: list[int] = [
        handler.level for handler in logger_utils.root_logger.handlers if isinstance(handler, logging.StreamHandler)
    ]
    assert levels == [logging.DEBUG]


def test_unknown_level_falls_back_to_info() -> None:
    logger_utils = LoggerUtils()
    logger_utils.set_level("VERBOSE")  # type: ignore[arg-type]

    assert logger_utils.root_logger.level == logging.INFO


def test_warnings_are_routed_to_the_log(caplog: pytest.LogCaptureFixture) -> None:
    LoggerUtils()

    with caplog.at_level(logging.WARNING, logger="TLAI"):
        warnings.warn("old export format", UserWarning, stacklevel=1)

    assert "UserWarning: old export format" in caplog.text


def test_reset_restores_showwarning() -> None:
    original = warnings.showwarning
    LoggerUtils()
    assert warnings.showwarning is not original

    LoggerUtils.reset()

    assert warnings.showwarning is original
