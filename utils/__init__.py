"""Utility modules for tlai.

This package provides utility functions for logging, content fingerprinting,
language codes, and string manipulation.
"""

from utils.hash_utils import HashUtils
from utils.lang_utils import LangUtils
from utils.logger_utils import LoggerUtils
from utils.string_utils import StringUtils

__all__: list[str] = ["HashUtils", "LangUtils", "LoggerUtils", "StringUtils"]
