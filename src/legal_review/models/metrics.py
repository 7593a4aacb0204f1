"""Derived, read-only views over an analysis run."""

from dataclasses import dataclass, field
from typing import Dict, List

from .enums import RiskLevel


@dataclass(frozen=True)
class ConfidenceMetric:
    """One named confidence category and the factors behind its score."""
    category: str
    score: int
    description: str
    factors: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class DocumentMetrics:
    """
    Document-level metrics.

    Always reconstructible from the clause and suggestion sets; it is
    cached but never treated as ground truth.
    """
    document_id: str
    run_id: str
    total_clauses: int
    risk_counts: Dict[RiskLevel, int]
    overall_confidence: int
    overall_risk_score: int
    average_readability: int
    metrics: List[ConfidenceMetric] = field(default_factory=list)
    review_progress: Dict[str, int] = field(default_factory=dict)

    @property
    def risky_clauses(self) -> int:
        return self.risk_counts.get(RiskLevel.HIGH, 0) + self.risk_counts.get(RiskLevel.MEDIUM, 0)

    @property
    def safe_clauses(self) -> int:
        return self.risk_counts.get(RiskLevel.SAFE, 0)

    def metric(self, category: str) -> ConfidenceMetric:
        for item in self.metrics:
            if item.category == category:
                return item
        raise KeyError(category)


@dataclass(frozen=True)
class SummarySection:
    """One section of the executive summary."""
    title: str
    content: str
    key_points: List[str]
    risk_level: RiskLevel
    page: int
