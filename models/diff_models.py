"""Models for differences between two versions of extracted content."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from models.text_models import TextUnit

__all__: list[str] = ["DiffResult", "DiffStats", "ModifiedUnit"]


@dataclass
class ModifiedUnit:
    """An old unit paired with the new unit that replaced it.

    Attributes:
        old (TextUnit): Unit from the previous version.
        new (TextUnit): Unit from the current version.
    """

    old: TextUnit
    new: TextUnit


@dataclass
class DiffStats:
    added: int = 0
    removed: int = 0
    unchanged: int = 0
    modified: int = 0


@dataclass
class DiffResult:
    """Classification of two unit collections.

    Attributes:
        added (list[TextUnit]): Units only present in the new version.
        removed (list[TextUnit]): Units only present in the old version.
        unchanged (list[TextUnit]): Units present in both, taken from the old version.
        modified (list[ModifiedUnit]): Removed/added pairs matched by id or context.
    """

    added: list[TextUnit] = field(default_factory=list)
    removed: list[TextUnit] = field(default_factory=list)
    unchanged: list[TextUnit] = field(default_factory=list)
    modified: list[ModifiedUnit] = field(default_factory=list)

    def needs_translation(self) -> list[TextUnit]:
        """Return the units that require a backend call: added units plus the new side of modified pairs."""
        return [*self.added, *(pair.new for pair in self.modified)]

    def stats(self) -> DiffStats:
        return DiffStats(
            added=len(self.added),
            removed=len(self.removed),
            unchanged=len(self.unchanged),
            modified=len(self.modified),
        )

    def has_changes(self) -> bool:
        return bool(self.added or self.removed or self.modified)
