"""Data models and enums for the Legal Review pipeline."""

from .enums import (
    ClauseType,
    Complexity,
    OutcomeStatus,
    RiskLevel,
    RunStatus,
    SuggestionStatus,
)
from .document import AppliedChange, ComposedDocument, Document, Page, TextSpan
from .clause import (
    Clause,
    ClauseOutcome,
    Suggestion,
    Translation,
    content_hash,
    make_clause_id,
)
from .metrics import ConfidenceMetric, DocumentMetrics, SummarySection

__all__ = [
    # Enums
    "ClauseType",
    "Complexity",
    "OutcomeStatus",
    "RiskLevel",
    "RunStatus",
    "SuggestionStatus",
    # Document models
    "Page",
    "TextSpan",
    "Document",
    "AppliedChange",
    "ComposedDocument",
    # Clause models
    "Clause",
    "ClauseOutcome",
    "Suggestion",
    "Translation",
    "content_hash",
    "make_clause_id",
    # Derived views
    "ConfidenceMetric",
    "DocumentMetrics",
    "SummarySection",
]
