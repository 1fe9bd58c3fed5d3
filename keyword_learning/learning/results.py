"""
Result types returned by the keyword learner and the learning event log.

"Why nothing happened" outcomes are values, not exceptions, so batch
processing can aggregate per-type outcomes without try/except per type.
"""

import enum
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional

from .keyword_frequency import KeywordFrequency


class LearnOutcome(enum.Enum):
    """Outcome of one learning pass. Values are the reported reasons."""
    LEARNED = "Keywords learned"
    NOT_ENOUGH_CORRECTIONS = "Not enough corrections"
    NO_COMMON_KEYWORDS = "No common keywords found"
    DEFINITION_NOT_FOUND = "File type definition not found"
    ALREADY_LEARNED = "Keywords already learned"
    STORE_FAILURE = "Store failure"


@dataclass
class LearnResult:
    """Outcome of learning for one corrected file type."""

    file_type: str
    outcome: LearnOutcome
    keywords_learned: list[str] = field(default_factory=list)
    correction_count: int = 0
    file_type_id: Optional[int] = None
    event_ids: list[int] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def learned(self) -> bool:
        return self.outcome is LearnOutcome.LEARNED

    @property
    def reason(self) -> Optional[str]:
        """Why nothing was learned, or None on success."""
        if self.learned:
            return None
        if self.error:
            return f"{self.outcome.value}: {self.error}"
        return self.outcome.value

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            'file_type': self.file_type,
            'learned': self.learned,
            'correction_count': self.correction_count,
        }
        if self.learned:
            result['keywords_learned'] = list(self.keywords_learned)
            result['file_type_id'] = self.file_type_id
        else:
            result['reason'] = self.reason
        return result


@dataclass
class BatchLearnResult:
    """Per-type results of a batch learning run."""

    results: list[LearnResult] = field(default_factory=list)

    @property
    def processed(self) -> int:
        return len(self.results)

    @property
    def learned(self) -> int:
        """Number of file types that learned at least one keyword."""
        return sum(1 for r in self.results if r.learned)

    @property
    def keywords_learned(self) -> int:
        return sum(len(r.keywords_learned) for r in self.results)

    def to_dict(self) -> dict[str, Any]:
        return {
            'processed': self.processed,
            'learned': self.learned,
            'details': [r.to_dict() for r in self.results],
        }


@dataclass
class LearningCandidate:
    """A pattern with keywords ready to be learned (read-only preview)."""

    predicted_type: str
    corrected_type: str
    correction_count: int
    keywords: list[KeywordFrequency]
    correction_ids: list[int]

    def to_dict(self) -> dict[str, Any]:
        return {
            'predicted_type': self.predicted_type,
            'corrected_type': self.corrected_type,
            'correction_count': self.correction_count,
            'keywords': [kf.to_dict() for kf in self.keywords],
            'correction_ids': list(self.correction_ids),
        }


@dataclass
class UndoResult:
    success: bool
    keyword: str
    file_type: str
    keyword_removed: bool = True

    def to_dict(self) -> dict[str, Any]:
        return {
            'success': self.success,
            'keyword': self.keyword,
            'file_type': self.file_type,
            'keyword_removed': self.keyword_removed,
        }


@dataclass
class LearningEventView:
    """A learning event enriched with its file type's category and description."""

    id: int
    event_type: str
    file_type_id: int
    file_type: str
    keyword: str
    correction_count: int
    source_corrections: list[int]
    created_at: datetime
    dismissed: bool
    file_type_category: Optional[str] = None
    file_type_description: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            'id': self.id,
            'event_type': self.event_type,
            'file_type_id': self.file_type_id,
            'file_type': self.file_type,
            'keyword': self.keyword,
            'correction_count': self.correction_count,
            'source_corrections': list(self.source_corrections),
            'created_at': self.created_at.isoformat(),
            'dismissed': self.dismissed,
            'file_type_category': self.file_type_category,
            'file_type_description': self.file_type_description,
        }


@dataclass
class LearningStats:
    """Aggregate view of the learning event log."""

    total_learned: int = 0
    this_week: int = 0
    this_month: int = 0
    types_with_learning: int = 0
    total_corrections_contributed: int = 0

    def to_dict(self) -> dict[str, int]:
        return {
            'total_learned': self.total_learned,
            'this_week': self.this_week,
            'this_month': self.this_month,
            'types_with_learning': self.types_with_learning,
            'total_corrections_contributed': self.total_corrections_contributed,
        }
