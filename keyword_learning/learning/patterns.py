"""
Correction pattern grouping.

A pattern is the ordered pair (predicted type, corrected type). Grouping
corrections by pattern lets the frequency analysis look at documents the
classifier got wrong in the same way.
"""

import logging
from collections import defaultdict
from dataclasses import dataclass
from typing import Iterable

from ..database.models import FilingCorrection

logger = logging.getLogger(__name__)


def normalize_keyword(keyword: str) -> str:
    """Canonical keyword form: trimmed and lower-cased."""
    return keyword.strip().lower()


@dataclass(frozen=True)
class CorrectionPattern:
    """Ordered (predicted, corrected) file type pair."""

    predicted_type: str
    corrected_type: str

    def __str__(self) -> str:
        return f"{self.predicted_type} → {self.corrected_type}"


def learning_corrections(corrections: Iterable[FilingCorrection]) -> list[FilingCorrection]:
    """Keep only corrections that changed the file type and carry keywords."""
    return [c for c in corrections if c.has_learning_signal]


def group_corrections(
    corrections: Iterable[FilingCorrection],
) -> dict[CorrectionPattern, list[FilingCorrection]]:
    """
    Partition corrections by (predicted type, corrected type).

    Corrections without a corrected type, with an unchanged type, or with
    no keywords are dropped before grouping. Within each group the input
    order is preserved, so callers passing corrections in creation order
    get reproducible provenance lists.

    Args:
        corrections: Correction history (or a filtered subset)

    Returns:
        Mapping of pattern to its qualifying corrections
    """
    groups: dict[CorrectionPattern, list[FilingCorrection]] = defaultdict(list)
    skipped = 0

    for correction in corrections:
        if not correction.has_learning_signal:
            skipped += 1
            continue
        pattern = CorrectionPattern(correction.predicted_type, correction.corrected_type)
        groups[pattern].append(correction)

    logger.debug(f"Grouped corrections into {len(groups)} patterns ({skipped} without signal)")
    return dict(groups)
