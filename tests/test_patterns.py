"""
Tests for correction pattern grouping and keyword frequency analysis.
"""

import pytest

from keyword_learning.learning.patterns import (
    CorrectionPattern,
    group_corrections,
    learning_corrections,
    normalize_keyword,
)
from keyword_learning.learning.keyword_frequency import analyze_keyword_frequency
from tests.fixtures.builders import group_of, make_correction


# ============================================================================
# NORMALIZATION
# ============================================================================

@pytest.mark.parametrize("raw, expected", [
    ("Valuation", "valuation"),
    ("valuation ", "valuation"),
    ("  RICS\t", "rics"),
    ("Red Book", "red book"),
])
def test_normalize_keyword(raw, expected):
    assert normalize_keyword(raw) == expected


# ============================================================================
# PATTERN GROUPER
# ============================================================================

class TestPatternGrouper:
    """Tests for group_corrections."""

    def test_groups_by_ordered_pair(self):
        corrections = [
            make_correction(["rics"], "IMR", "RedBook Valuation"),
            make_correction(["rics"], "Term Sheet", "RedBook Valuation"),
            make_correction(["rics"], "IMR", "RedBook Valuation"),
            make_correction(["lender"], "RedBook Valuation", "IMR"),
        ]

        groups = group_corrections(corrections)

        assert set(groups) == {
            CorrectionPattern("IMR", "RedBook Valuation"),
            CorrectionPattern("Term Sheet", "RedBook Valuation"),
            CorrectionPattern("RedBook Valuation", "IMR"),
        }
        assert len(groups[CorrectionPattern("IMR", "RedBook Valuation")]) == 2

    def test_excludes_corrections_without_signal(self):
        confirmed = make_correction(["rics"], "IMR", None)
        unchanged = make_correction(["rics"], "IMR", "IMR")
        no_keywords = make_correction([], "IMR", "RedBook Valuation")
        useful = make_correction(["rics"], "IMR", "RedBook Valuation")

        groups = group_corrections([confirmed, unchanged, no_keywords, useful])

        assert groups == {CorrectionPattern("IMR", "RedBook Valuation"): [useful]}
        assert learning_corrections([confirmed, unchanged, no_keywords, useful]) == [useful]

    def test_preserves_input_order_within_group(self):
        corrections = group_of([["a"], ["b"], ["c"]])

        groups = group_corrections(corrections)

        assert groups[CorrectionPattern("IMR", "RedBook Valuation")] == corrections

    def test_empty_history(self):
        assert group_corrections([]) == {}

    def test_pattern_str(self):
        assert str(CorrectionPattern("IMR", "RedBook Valuation")) == "IMR → RedBook Valuation"


# ============================================================================
# KEYWORD FREQUENCY ANALYZER
# ============================================================================

class TestKeywordFrequency:
    """Tests for analyze_keyword_frequency."""

    def test_counts_corrections_containing_keyword(self):
        corrections = group_of([
            ["rics", "valuation", "surveyor"],
            ["rics", "valuation"],
            ["rics", "surveyor", "redbook"],
        ])

        frequencies = analyze_keyword_frequency(corrections)

        assert frequencies["rics"].occurrences == 3
        assert frequencies["rics"].frequency == 1.0
        assert frequencies["valuation"].occurrences == 2
        assert frequencies["valuation"].frequency == pytest.approx(2 / 3)
        assert frequencies["redbook"].frequency == pytest.approx(1 / 3)

    def test_normalizes_before_counting(self):
        corrections = group_of([["Valuation"], ["valuation "], ["VALUATION"]])

        frequencies = analyze_keyword_frequency(corrections)

        assert list(frequencies) == ["valuation"]
        assert frequencies["valuation"].occurrences == 3

    def test_repeated_keyword_counts_once_per_correction(self):
        corrections = group_of([["rics", "RICS", "rics "], ["other"]])

        frequencies = analyze_keyword_frequency(corrections)

        assert frequencies["rics"].occurrences == 1
        assert frequencies["rics"].frequency == 0.5

    def test_blank_keywords_ignored(self):
        corrections = group_of([["  ", "rics"], [""]])

        frequencies = analyze_keyword_frequency(corrections)

        assert set(frequencies) == {"rics"}

    def test_empty_group(self):
        assert analyze_keyword_frequency([]) == {}
