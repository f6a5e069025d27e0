"""Configuration data models for tlai settings.

Each dataclass mirrors one section of the INI file. Field names are the INI keys;
their default values also determine the type the loader coerces each value to.
"""

from __future__ import annotations

from dataclasses import dataclass, field

__all__: list[str] = [
    "Cache",
    "Config",
    "Engine",
    "General",
    "RateLimit",
    "Retry",
    "Translation",
]


@dataclass
class General:
    DEBUG: bool = False
    LOG_FILE: str = ""
    VERSION: str = ""
    SCRIPT_NAME: str = ""


@dataclass
class Translation:
    TARGET_LANG: str = ""
    SOURCE_LANG: str = "en"
    EXCLUDED_TERMS: list[str] = field(default_factory=list)
    CONTEXT: str = ""
    GLOSSARY: dict[str, str] = field(default_factory=dict)
    STYLE: str = "neutral"
    PARALLEL_THRESHOLD: int = 5


@dataclass
class Cache:
    BACKEND: str = "memory"
    TTL: int = 0
    REDIS_URL: str = "redis://localhost:6379/0"
    KEY_PREFIX: str = "tlai:"


@dataclass
class Engine:
    NAME: str = "openai"
    MODEL: str = "gpt-4o-mini"
    TEMPERATURE: float = 0.3
    BASE_URL: str = "https://api.openai.com/v1"
    TIMEOUT: float = 60.0


@dataclass
class RateLimit:
    REQUESTS_PER_MINUTE: int = 60
    BURST_SIZE: int = 0


@dataclass
class Retry:
    MAX_RETRIES: int = 3
    BASE_DELAY: float = 1.0
    MAX_DELAY: float = 30.0


@dataclass
class Config:
    GENERAL: General = field(default_factory=General)
    TRANSLATION: Translation = field(default_factory=Translation)
    CACHE: Cache = field(default_factory=Cache)
    ENGINE: Engine = field(default_factory=Engine)
    RATE_LIMIT: RateLimit = field(default_factory=RateLimit)
    RETRY: Retry = field(default_factory=Retry)
