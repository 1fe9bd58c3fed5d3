"""
Tests for the learning threshold gate and the known-vocabulary filter.
"""

import pytest

from keyword_learning.database.models import FileTypeDefinition, LearnedKeyword
from keyword_learning.learning.keyword_frequency import KeywordFrequency, analyze_keyword_frequency
from keyword_learning.learning.threshold_gate import LearningThresholds, MIN_CORRECTIONS, MIN_FREQUENCY
from keyword_learning.learning.vocabulary_filter import filter_known_keywords, known_vocabulary
from keyword_learning.utils.config_manager import ConfigManager
from tests.fixtures.builders import group_of


# ============================================================================
# THRESHOLD GATE
# ============================================================================

class TestLearningThresholds:
    """Tests for LearningThresholds."""

    def test_defaults(self):
        thresholds = LearningThresholds()
        assert thresholds.min_corrections == MIN_CORRECTIONS == 3
        assert thresholds.min_frequency == MIN_FREQUENCY == 0.5

    def test_group_eligibility_boundary(self):
        thresholds = LearningThresholds()
        assert thresholds.is_eligible(2) is False
        assert thresholds.is_eligible(3) is True
        assert thresholds.is_eligible(10) is True

    def test_half_frequency_is_candidate(self):
        """2 of 4 corrections is exactly 0.5 and qualifies."""
        corrections = group_of([["rics", "lender"], ["rics"], ["valuation"], ["valuation"]])
        frequencies = analyze_keyword_frequency(corrections)

        candidates = LearningThresholds().select_candidates(frequencies.values())

        assert frequencies["rics"].frequency == 0.5
        assert "rics" in {kf.keyword for kf in candidates}

    def test_quarter_frequency_is_not_candidate(self):
        """1 of 4 corrections is 0.25 and does not qualify."""
        corrections = group_of([["rics", "lender"], ["rics"], ["valuation"], ["valuation"]])
        frequencies = analyze_keyword_frequency(corrections)

        candidates = LearningThresholds().select_candidates(frequencies.values())

        assert frequencies["lender"].frequency == 0.25
        assert "lender" not in {kf.keyword for kf in candidates}

    def test_candidates_sorted_by_frequency(self):
        frequencies = [
            KeywordFrequency("b", 2, 0.5),
            KeywordFrequency("a", 4, 1.0),
            KeywordFrequency("c", 3, 0.75),
            KeywordFrequency("aa", 2, 0.5),
        ]

        candidates = LearningThresholds().select_candidates(frequencies)

        assert [kf.keyword for kf in candidates] == ["a", "c", "aa", "b"]

    @pytest.mark.parametrize("kwargs", [
        {"min_corrections": 0},
        {"min_frequency": 0.0},
        {"min_frequency": 1.5},
    ])
    def test_invalid_thresholds_rejected(self, kwargs):
        with pytest.raises(ValueError):
            LearningThresholds(**kwargs)

    def test_from_config(self):
        config = ConfigManager()
        config.update_learning_param('min_corrections', 5)
        config.update_learning_param('min_frequency', 0.75)

        thresholds = LearningThresholds.from_config(config)

        assert thresholds == LearningThresholds(min_corrections=5, min_frequency=0.75)

    def test_from_config_none_uses_defaults(self):
        assert LearningThresholds.from_config(None) == LearningThresholds()


# ============================================================================
# KNOWN-VOCABULARY FILTER
# ============================================================================

class TestVocabularyFilter:
    """Tests for known_vocabulary and filter_known_keywords."""

    def test_known_vocabulary_lowercases_both_sources(self):
        definition = FileTypeDefinition(
            file_type="RedBook Valuation",
            keywords=["Valuation", "Market Value"],
        )
        definition.learned_keywords.append(LearnedKeyword(keyword="RICS", correction_count=3))

        assert known_vocabulary(definition) == {"valuation", "market value", "rics"}

    def test_known_vocabulary_trims_curated_keywords(self):
        definition = FileTypeDefinition(file_type="RedBook Valuation", keywords=["RICS ", " ", "\tSurveyor"])

        assert known_vocabulary(definition) == {"rics", "surveyor"}

    def test_known_vocabulary_without_definition(self):
        assert known_vocabulary(None) == set()

    def test_filters_case_insensitively(self):
        candidates = [
            KeywordFrequency("valuation", 3, 1.0),
            KeywordFrequency("rics", 2, 0.67),
        ]

        remaining = filter_known_keywords(candidates, {"valuation"})

        assert [kf.keyword for kf in remaining] == ["rics"]

    def test_all_known_yields_nothing(self):
        candidates = [KeywordFrequency("rics", 3, 1.0)]
        assert filter_known_keywords(candidates, {"rics"}) == []
