"""Derived document views: confidence metrics and executive summary."""

from .confidence import (
    CATEGORIES,
    CLAUSE_COVERAGE,
    COMPLETENESS,
    LANGUAGE_PROCESSING,
    RISK_ASSESSMENT_ACCURACY,
    ConfidenceAggregator,
)
from .summary import ContractSummarizer

__all__ = [
    "CATEGORIES",
    "CLAUSE_COVERAGE",
    "COMPLETENESS",
    "LANGUAGE_PROCESSING",
    "RISK_ASSESSMENT_ACCURACY",
    "ConfidenceAggregator",
    "ContractSummarizer",
]
