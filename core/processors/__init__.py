"""Content processors.

Each processor extracts translatable text units from one content type and writes
translations back. Importing this package registers the built-in processors.
"""

from core.processors.html_processor import HtmlProcessor
from core.processors.interface import ContentProcessor
from core.processors.python_processor import PythonSourceProcessor

__all__: list[str] = ["ContentProcessor", "HtmlProcessor", "PythonSourceProcessor"]
