"""Translation engine implementations.

Importing this package registers every engine with TransInterface so that
``TransInterface.create(name)`` can build them from configuration.

Modules:
- OpenAITranslation: OpenAI-compatible chat-completions engine.
- MockTranslation: Table-driven engine for tests and offline runs.
"""

from core.trans.engines.mock_engine import DEFAULT_MOCK_TRANSLATIONS, MockTranslation
from core.trans.engines.openai_engine import OpenAITranslation

__all__: list[str] = [
    "DEFAULT_MOCK_TRANSLATIONS",
    "MockTranslation",
    "OpenAITranslation",
]
