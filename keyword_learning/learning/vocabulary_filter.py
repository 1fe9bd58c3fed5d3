"""
Known-vocabulary filter.

Removes candidates a file type definition already knows, either from its
curated keyword list or from its learned keyword ledger. Membership is
case-insensitive.
"""

import logging
from typing import Optional, Sequence

from ..database.models import FileTypeDefinition
from .keyword_frequency import KeywordFrequency

logger = logging.getLogger(__name__)


def known_vocabulary(definition: Optional[FileTypeDefinition]) -> set[str]:
    """Normalized keyword set of a definition (empty if there is none)."""
    if definition is None:
        return set()
    return definition.known_keywords()


def filter_known_keywords(
    candidates: Sequence[KeywordFrequency],
    known: set[str],
) -> list[KeywordFrequency]:
    """
    Drop candidates already present in the known vocabulary.

    Args:
        candidates: Normalized candidate keywords
        known: Lower-cased known keywords

    Returns:
        Candidates not yet known, in their original order
    """
    new_keywords = [kf for kf in candidates if kf.keyword.lower() not in known]

    if len(new_keywords) < len(candidates):
        logger.debug(f"Filtered {len(candidates) - len(new_keywords)} already-known keywords")

    return new_keywords
