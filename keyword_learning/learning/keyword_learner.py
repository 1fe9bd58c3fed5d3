"""
Keyword learning from filing corrections.

When users keep correcting the same kind of misclassification, the
documents they correct tend to share vocabulary. This module mines that
vocabulary and appends it to the correct file type's learned keyword
ledger, without retraining anything:

1. User corrects: AI said "IMR" -> user chose "RedBook Valuation"
2. The correction stores the document's key terms
3. Once min_corrections such corrections exist, keywords present in at
   least min_frequency of them become candidates
4. Candidates the definition already knows are dropped
5. The rest are appended to the ledger, one learning event per keyword,
   in a single transaction
"""

import dataclasses
import logging
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError

from ..database.models import FilingCorrection, utcnow
from ..database.repositories import LearningStore
from ..utils.config_manager import ConfigManager
from .keyword_frequency import analyze_keyword_frequency
from .patterns import group_corrections, learning_corrections
from .results import BatchLearnResult, LearnOutcome, LearnResult, LearningCandidate
from .threshold_gate import LearningThresholds
from .vocabulary_filter import filter_known_keywords, known_vocabulary

logger = logging.getLogger(__name__)


class KeywordLearner:
    """
    Learns file type keywords from correction history.

    Every learning pass re-reads the definition's current vocabulary, so
    re-running learning after a successful learn is a no-op for keywords
    already learned.
    """

    def __init__(self, store: LearningStore, thresholds: Optional[LearningThresholds] = None):
        """
        Initialize the learner.

        Args:
            store: Repositories sharing one session
            thresholds: Gate thresholds (defaults: 3 corrections, 0.5 frequency)
        """
        self.store = store
        self.thresholds = thresholds or LearningThresholds()

    @classmethod
    def from_config(cls, store: LearningStore, config: ConfigManager) -> "KeywordLearner":
        return cls(store, LearningThresholds.from_config(config))

    def preview_learnable(self, min_corrections: Optional[int] = None) -> list[LearningCandidate]:
        """
        Find patterns with keywords ready to be learned, without writing.

        Args:
            min_corrections: Override of the group size threshold

        Returns:
            Candidates sorted by descending correction count; each lists
            only keywords the target definition does not know yet
        """
        thresholds = self.thresholds
        if min_corrections is not None:
            thresholds = dataclasses.replace(thresholds, min_corrections=min_corrections)

        groups = group_corrections(self.store.corrections.list_all())
        candidates: list[LearningCandidate] = []

        for pattern, corrections in groups.items():
            if not thresholds.is_eligible(len(corrections)):
                continue

            common = thresholds.select_candidates(analyze_keyword_frequency(corrections).values())
            if not common:
                continue

            definition = self.store.definitions.get_by_file_type(pattern.corrected_type)
            new_keywords = filter_known_keywords(common, known_vocabulary(definition))
            if not new_keywords:
                continue

            candidates.append(LearningCandidate(
                predicted_type=pattern.predicted_type,
                corrected_type=pattern.corrected_type,
                correction_count=len(corrections),
                keywords=new_keywords,
                correction_ids=[c.id for c in corrections],
            ))

        candidates.sort(key=lambda c: c.correction_count, reverse=True)
        logger.info(f"Found {len(candidates)} learnable patterns across {len(groups)} correction patterns")
        return candidates

    def learn_for_type(self, corrected_type: str) -> LearnResult:
        """
        Learn keywords for one corrected file type.

        All corrections whose user-chosen type is corrected_type are pooled,
        whatever the original prediction was.

        Args:
            corrected_type: The file type users corrected to

        Returns:
            LearnResult describing what was learned or why nothing was

        Raises:
            SQLAlchemyError: If the store rejects the write (rolled back)
        """
        corrections = learning_corrections(
            self.store.corrections.list_for_corrected_type(corrected_type)
        )
        correction_count = len(corrections)

        if not self.thresholds.is_eligible(correction_count):
            logger.debug(
                f"'{corrected_type}': {correction_count} corrections "
                f"< {self.thresholds.min_corrections} required"
            )
            return LearnResult(corrected_type, LearnOutcome.NOT_ENOUGH_CORRECTIONS,
                               correction_count=correction_count)

        common = self.thresholds.select_candidates(analyze_keyword_frequency(corrections).values())
        if not common:
            return LearnResult(corrected_type, LearnOutcome.NO_COMMON_KEYWORDS,
                               correction_count=correction_count)

        definition = self.store.definitions.get_by_file_type(corrected_type)
        if definition is None:
            logger.warning(f"No file type definition for '{corrected_type}', skipping learning")
            return LearnResult(corrected_type, LearnOutcome.DEFINITION_NOT_FOUND,
                               correction_count=correction_count)

        new_keywords = [kf.keyword for kf in filter_known_keywords(common, known_vocabulary(definition))]
        if not new_keywords:
            return LearnResult(corrected_type, LearnOutcome.ALREADY_LEARNED,
                               correction_count=correction_count, file_type_id=definition.id)

        event_ids = self._apply(definition, new_keywords, corrections)

        logger.info(
            f"Learned {len(new_keywords)} keywords for '{corrected_type}' "
            f"from {correction_count} corrections: {', '.join(new_keywords)}"
        )
        return LearnResult(
            corrected_type,
            LearnOutcome.LEARNED,
            keywords_learned=new_keywords,
            correction_count=correction_count,
            file_type_id=definition.id,
            event_ids=event_ids,
        )

    def learn_all_pending(self) -> BatchLearnResult:
        """
        Run learn_for_type once per corrected type seen in history.

        Types are processed sequentially. A store failure for one type is
        recorded in its result and does not stop the others.
        """
        batch = BatchLearnResult()

        for corrected_type in self.store.corrections.distinct_corrected_types():
            try:
                result = self.learn_for_type(corrected_type)
            except SQLAlchemyError as e:
                logger.error(f"Learning failed for '{corrected_type}': {e}")
                result = LearnResult(corrected_type, LearnOutcome.STORE_FAILURE, error=str(e))
            batch.results.append(result)

        logger.info(
            f"Batch learning complete: {batch.processed} types processed, "
            f"{batch.learned} learned {batch.keywords_learned} keywords"
        )
        return batch

    def _apply(self, definition, keywords: list[str], corrections: list[FilingCorrection]) -> list[int]:
        """Patch the ledger and record one event per keyword, atomically."""
        learned_at = utcnow()
        correction_ids = [c.id for c in corrections]

        with self.store.transaction() as store:
            store.definitions.append_learned_keywords(
                definition, keywords, correction_count=len(corrections), learned_at=learned_at,
            )
            events = [
                store.events.record(
                    definition,
                    keyword,
                    correction_count=len(corrections),
                    source_corrections=correction_ids,
                    created_at=learned_at,
                )
                for keyword in keywords
            ]

        return [e.id for e in events]
