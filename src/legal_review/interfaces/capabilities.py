"""Pluggable analysis capability interfaces.

Classifier, risk scorer, translator and rewrite engine are black boxes to
the pipeline. Each is a pure function of (clause text, optional context)
to a result record: no shared mutable state, no dependency on call order.
Implementations must not raise for well-formed non-empty text; text that
is too short or malformed to analyze yields a neutral result
(``ClauseType.OTHER`` with confidence 0).
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from ..models.enums import ClauseType, Complexity, RiskLevel


@dataclass(frozen=True)
class AnalysisContext:
    """Read-only document context handed to capability calls."""
    document_id: str
    page: int
    index: int = 0
    neighbours: Tuple[str, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class Classification:
    """Clause type assigned by a classifier, with confidence in [0, 100]."""
    clause_type: ClauseType
    confidence: int


@dataclass(frozen=True)
class RiskAssessment:
    """Risk level and score for a clause, with supporting explanation."""
    risk_level: RiskLevel
    risk_score: int
    explanation: str = ""
    recommendations: Tuple[str, ...] = field(default_factory=tuple)
    impact: str = ""
    confidence: int = 0


@dataclass(frozen=True)
class TranslationResult:
    """Plain-English rendering of a clause."""
    simplified_text: str
    readability_score: int
    complexity: Complexity = Complexity.MEDIUM
    confidence: int = 0


@dataclass(frozen=True)
class RewriteProposal:
    """Suggested replacement for a clause, with rationale."""
    suggested_text: str
    reasoning: str
    benefits: List[str] = field(default_factory=list)
    confidence: int = 0


class IClauseClassifier(ABC):
    """Assigns a clause type and confidence to a span of text."""

    @abstractmethod
    def classify(
        self,
        text: str,
        context: Optional[AnalysisContext] = None,
    ) -> Classification:
        """
        Classify a clause.

        Args:
            text: Clause text.
            context: Optional document context.

        Returns:
            Classification with confidence in [0, 100].
        """
        pass


class IRiskScorer(ABC):
    """Computes a risk level and numeric risk score for a clause."""

    @abstractmethod
    def score(
        self,
        text: str,
        clause_type: ClauseType,
        context: Optional[AnalysisContext] = None,
    ) -> RiskAssessment:
        """
        Score the legal/financial exposure a clause poses.

        Args:
            text: Clause text.
            clause_type: Type assigned by the classifier.
            context: Optional document context.

        Returns:
            RiskAssessment with risk_score and confidence in [0, 100].
        """
        pass


class ITranslator(ABC):
    """Produces a plain-English rendering of a clause."""

    @abstractmethod
    def translate(
        self,
        text: str,
        clause_type: ClauseType,
        context: Optional[AnalysisContext] = None,
    ) -> TranslationResult:
        """
        Translate legal wording into plain English.

        Args:
            text: Clause text.
            clause_type: Type assigned by the classifier.
            context: Optional document context.

        Returns:
            TranslationResult with readability_score in [0, 100].
        """
        pass


class IRewriteEngine(ABC):
    """Produces a suggested replacement for a flagged clause."""

    @abstractmethod
    def rewrite(
        self,
        text: str,
        clause_type: ClauseType,
        risk: RiskAssessment,
        context: Optional[AnalysisContext] = None,
    ) -> Optional[RewriteProposal]:
        """
        Propose a safer wording for a clause.

        Args:
            text: Clause text.
            clause_type: Type assigned by the classifier.
            risk: Risk assessment for the clause.
            context: Optional document context.

        Returns:
            RewriteProposal, or None when no rewrite applies.
        """
        pass
