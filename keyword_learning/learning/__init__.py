"""
Keyword learning from user corrections.

Pipeline (no model retraining involved):
- Pattern grouping: corrections keyed by (predicted type, corrected type)
- Frequency analysis: share of corrections mentioning each keyword
- Threshold gate: minimum group size and minimum keyword frequency
- Known-vocabulary filter: drop keywords the definition already has
- Learning: append to the learned keyword ledger with an audit event
- Event log: listing, statistics, dismiss and undo
"""

from .patterns import CorrectionPattern, group_corrections, normalize_keyword
from .keyword_frequency import KeywordFrequency, analyze_keyword_frequency
from .threshold_gate import LearningThresholds, MIN_CORRECTIONS, MIN_FREQUENCY
from .vocabulary_filter import filter_known_keywords, known_vocabulary
from .keyword_learner import KeywordLearner
from .event_log import (
    LearningEventLog,
    LearningEventNotFoundError,
    FileTypeDefinitionNotFoundError,
)
from .results import (
    LearnOutcome,
    LearnResult,
    BatchLearnResult,
    LearningCandidate,
    LearningEventView,
    LearningStats,
    UndoResult,
)

__all__ = [
    "CorrectionPattern",
    "group_corrections",
    "normalize_keyword",
    "KeywordFrequency",
    "analyze_keyword_frequency",
    "LearningThresholds",
    "MIN_CORRECTIONS",
    "MIN_FREQUENCY",
    "filter_known_keywords",
    "known_vocabulary",
    "KeywordLearner",
    "LearningEventLog",
    "LearningEventNotFoundError",
    "FileTypeDefinitionNotFoundError",
    "LearnOutcome",
    "LearnResult",
    "BatchLearnResult",
    "LearningCandidate",
    "LearningEventView",
    "LearningStats",
    "UndoResult",
]
