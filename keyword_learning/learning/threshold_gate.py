"""
Learning threshold gate.

Two independent thresholds decide whether a correction group is ripe:
the group must hold at least min_corrections corrections, and a keyword
must appear in at least min_frequency of them to become a candidate.
"""

import logging
from dataclasses import dataclass
from typing import Iterable, Optional

from ..utils.config_manager import ConfigManager
from .keyword_frequency import KeywordFrequency

logger = logging.getLogger(__name__)


MIN_CORRECTIONS = 3
MIN_FREQUENCY = 0.5


@dataclass(frozen=True)
class LearningThresholds:
    """Gate thresholds. Both boundaries are inclusive."""

    min_corrections: int = MIN_CORRECTIONS
    min_frequency: float = MIN_FREQUENCY

    def __post_init__(self):
        if self.min_corrections < 1:
            raise ValueError(f"min_corrections must be at least 1, got {self.min_corrections}")
        if not 0.0 < self.min_frequency <= 1.0:
            raise ValueError(f"min_frequency must be in (0, 1], got {self.min_frequency}")

    @classmethod
    def from_config(cls, config: Optional[ConfigManager] = None) -> "LearningThresholds":
        """Build thresholds from the 'learning' config section."""
        if config is None:
            return cls()
        return cls(
            min_corrections=int(config.get_learning_param('min_corrections')),
            min_frequency=float(config.get_learning_param('min_frequency')),
        )

    def is_eligible(self, group_size: int) -> bool:
        """True if a group is large enough to learn from."""
        return group_size >= self.min_corrections

    def select_candidates(self, frequencies: Iterable[KeywordFrequency]) -> list[KeywordFrequency]:
        """
        Keywords whose frequency clears min_frequency.

        Returns:
            Candidates ordered by descending frequency, then keyword
        """
        candidates = [kf for kf in frequencies if kf.frequency >= self.min_frequency]
        candidates.sort(key=lambda kf: (-kf.frequency, kf.keyword))
        return candidates
