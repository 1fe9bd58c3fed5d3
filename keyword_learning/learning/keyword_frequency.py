"""
Keyword frequency analysis for one correction group.
"""

import logging
from collections import Counter
from dataclasses import dataclass
from typing import Sequence

from ..database.models import FilingCorrection
from .patterns import normalize_keyword

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class KeywordFrequency:
    """How often a normalized keyword occurs across a correction group."""

    keyword: str
    occurrences: int
    frequency: float

    def to_dict(self) -> dict:
        return {
            'keyword': self.keyword,
            'occurrences': self.occurrences,
            'frequency': self.frequency,
        }


def analyze_keyword_frequency(corrections: Sequence[FilingCorrection]) -> dict[str, KeywordFrequency]:
    """
    Count how many corrections mention each keyword.

    Keywords are normalized here, once, so "Valuation" and "valuation "
    are the same candidate. A keyword repeated inside one correction still
    counts once for that correction, which keeps frequency in [0, 1].

    Args:
        corrections: One correction group

    Returns:
        Mapping of normalized keyword to its KeywordFrequency
    """
    group_size = len(corrections)
    if group_size == 0:
        return {}

    counts: Counter[str] = Counter()
    for correction in corrections:
        normalized = {normalize_keyword(k) for k in correction.document_keywords or []}
        normalized.discard("")
        counts.update(normalized)

    frequencies = {
        keyword: KeywordFrequency(keyword, count, count / group_size)
        for keyword, count in counts.items()
    }

    logger.debug(f"Analyzed {len(frequencies)} distinct keywords across {group_size} corrections")
    return frequencies
