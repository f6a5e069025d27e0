"""Incremental translation support: compare two extractions of the same content.

Only units that are new or whose text changed need a backend call; everything else can be
served from a previous translation.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from models.diff_models import DiffResult, ModifiedUnit
from utils.logger_utils import LoggerUtils

if TYPE_CHECKING:
    import logging

    from models.text_models import TextUnit

__all__: list[str] = ["diff_content", "diff_content_with_context"]

logger: logging.Logger = LoggerUtils.get_logger(__name__)


def _index_by_fingerprint(units: list[TextUnit]) -> dict[str, TextUnit]:
    indexed: dict[str, TextUnit] = {}
    for unit in units:
        indexed.setdefault(unit.fingerprint, unit)
    return indexed


def diff_content(old: list[TextUnit], new: list[TextUnit]) -> DiffResult:
    """Classify units by fingerprint.

    Args:
        old (list[TextUnit]): Units from the previous version.
        new (list[TextUnit]): Units from the current version.

    Returns:
        DiffResult: ``unchanged`` and ``removed`` follow the order of ``old``; ``added`` follows
            the order of ``new``. Repeated fingerprints are reported once.
    """
    old_by_fp: dict[str, TextUnit] = _index_by_fingerprint(old)
    new_by_fp: dict[str, TextUnit] = _index_by_fingerprint(new)

    result = DiffResult()
    for fingerprint, unit in old_by_fp.items():
        if fingerprint in new_by_fp:
            result.unchanged.append(unit)
        else:
            result.removed.append(unit)
    result.added = [unit for fingerprint, unit in new_by_fp.items() if fingerprint not in old_by_fp]
    return result


def diff_content_with_context(old: list[TextUnit], new: list[TextUnit]) -> DiffResult:
    """Classify units like ``diff_content``, then pair removed units with the added units that replaced them.

    For each removed unit, in order, the first still-unmatched added unit with the same id, or
    with the same non-empty disambiguation context, becomes its replacement. Paired units move
    from ``removed``/``added`` into ``modified``.

    Args:
        old (list[TextUnit]): Units from the previous version.
        new (list[TextUnit]): Units from the current version.

    Returns:
        DiffResult: The classification with modified pairs detected.
    """
    result: DiffResult = diff_content(old, new)
    if not result.added or not result.removed:
        return result

    matched_added: set[int] = set()
    matched_removed: set[int] = set()
    for removed_index, removed in enumerate(result.removed):
        for added_index, added in enumerate(result.added):
            if added_index in matched_added:
                continue
            same_context: bool = bool(removed.disambiguation_context) and (
                removed.disambiguation_context == added.disambiguation_context
            )
            if removed.id == added.id or same_context:
                result.modified.append(ModifiedUnit(old=removed, new=added))
                matched_added.add(added_index)
                matched_removed.add(removed_index)
                break

    result.added = [unit for index, unit in enumerate(result.added) if index not in matched_added]
    result.removed = [unit for index, unit in enumerate(result.removed) if index not in matched_removed]
    logger.debug("Diff: %s", result.stats())
    return result
