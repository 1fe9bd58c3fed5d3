"""
Test data fixtures for keyword learning tests.

Provides:
- File type definitions with curated keywords
- Correction scenarios keyed by pattern
"""

from typing import Any, Dict, List


# ============================================================================
# FILE TYPE DEFINITIONS
# ============================================================================

SAMPLE_DEFINITIONS: List[Dict[str, Any]] = [
    {
        'file_type': 'RedBook Valuation',
        'category': 'Appraisals',
        'description': 'RICS Red Book compliant property valuation report.',
        'keywords': [],
    },
    {
        'file_type': 'Initial Monitoring Report',
        'category': 'Inspections',
        'description': 'First monitoring surveyor report on a development.',
        'keywords': ['monitoring', 'site visit'],
    },
    {
        'file_type': 'Facility Letter',
        'category': 'Legal Documents',
        'description': 'Loan facility letter setting out terms.',
        'keywords': ['Facility', 'borrower'],
    },
]


# ============================================================================
# CORRECTION SCENARIOS
# ============================================================================

# Three IMR -> RedBook Valuation corrections.
# rics 3/3, valuation 2/3, surveyor 2/3 qualify; redbook 1/3 does not.
REDBOOK_CORRECTIONS: List[Dict[str, Any]] = [
    {
        'predicted_type': 'IMR',
        'corrected_type': 'RedBook Valuation',
        'document_keywords': ['rics', 'valuation', 'surveyor'],
    },
    {
        'predicted_type': 'IMR',
        'corrected_type': 'RedBook Valuation',
        'document_keywords': ['rics', 'valuation'],
    },
    {
        'predicted_type': 'IMR',
        'corrected_type': 'RedBook Valuation',
        'document_keywords': ['rics', 'surveyor', 'redbook'],
    },
]

REDBOOK_EXPECTED_KEYWORDS = {'rics', 'valuation', 'surveyor'}

# Corrections that carry no learning signal
NO_SIGNAL_CORRECTIONS: List[Dict[str, Any]] = [
    # Only confirmed the prediction
    {
        'predicted_type': 'IMR',
        'corrected_type': None,
        'document_keywords': ['rics'],
    },
    # Same type chosen again
    {
        'predicted_type': 'RedBook Valuation',
        'corrected_type': 'RedBook Valuation',
        'document_keywords': ['rics'],
    },
    # No keywords extracted
    {
        'predicted_type': 'IMR',
        'corrected_type': 'RedBook Valuation',
        'document_keywords': [],
    },
]

# Facility letters mis-filed as term sheets
FACILITY_CORRECTIONS: List[Dict[str, Any]] = [
    {
        'predicted_type': 'Term Sheet',
        'corrected_type': 'Facility Letter',
        'document_keywords': ['Lender', 'drawdown', 'covenant'],
    },
    {
        'predicted_type': 'Term Sheet',
        'corrected_type': 'Facility Letter',
        'document_keywords': ['lender ', 'Drawdown'],
    },
    {
        'predicted_type': 'Term Sheet',
        'corrected_type': 'Facility Letter',
        'document_keywords': ['LENDER', 'facility', 'interest'],
    },
]

# Corrections pointing at a file type with no definition
ORPHAN_CORRECTIONS: List[Dict[str, Any]] = [
    {
        'predicted_type': 'Other',
        'corrected_type': 'Planning Decision Notice',
        'document_keywords': ['planning', 'consent'],
    },
    {
        'predicted_type': 'Other',
        'corrected_type': 'Planning Decision Notice',
        'document_keywords': ['planning', 'conditions'],
    },
    {
        'predicted_type': 'Other',
        'corrected_type': 'Planning Decision Notice',
        'document_keywords': ['planning', 'consent'],
    },
]
