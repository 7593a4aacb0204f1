"""Clause pattern matching for clause classification.

This module provides pattern-based clause classification: keyword and
heading patterns per clause type, scored and compared deterministically.
"""

import re
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from ..interfaces.capabilities import AnalysisContext, Classification, IClauseClassifier
from ..models.enums import ClauseType


@dataclass
class ClausePattern:
    """Pattern definition for clause classification."""
    clause_type: ClauseType
    strong_keywords: List[str]  # Phrases that on their own identify the type
    keywords: List[str]
    heading_patterns: List[str] = field(default_factory=list)  # Regex, matched against the first line
    priority: int = 0  # Higher priority patterns win ties


class ClausePatternClassifier(IClauseClassifier):
    """
    Pattern-based clause classifier.

    Uses keyword matching and heading regex patterns to classify clauses
    into clause types. Text shorter than ``min_chars`` or without any
    letters is classified as ``OTHER`` with confidence 0.
    """

    STRONG_WEIGHT = 30
    KEYWORD_WEIGHT = 15
    HEADING_WEIGHT = 40
    MIN_SCORE = 30
    UNMATCHED_CONFIDENCE = 30
    MAX_CONFIDENCE = 99

    def __init__(self, min_chars: int = 20):
        self.min_chars = min_chars
        self._patterns = self._build_patterns()

    def _build_patterns(self) -> List[ClausePattern]:
        """Build the list of clause patterns for classification."""
        return [
            ClausePattern(
                clause_type=ClauseType.INDEMNIFICATION,
                strong_keywords=["indemnify", "indemnification", "hold harmless"],
                keywords=["indemnified", "defend", "third party claims", "claims", "losses"],
                heading_patterns=[r"(?i)indemnif", r"(?i)hold\s+harmless"],
                priority=9,
            ),
            ClausePattern(
                clause_type=ClauseType.LIABILITY,
                strong_keywords=["limitation of liability", "unlimited liability", "consequential damages"],
                keywords=["liability", "liable", "damages", "breach", "exposure"],
                heading_patterns=[r"(?i)liabilit"],
                priority=8,
            ),
            ClausePattern(
                clause_type=ClauseType.TERMINATION,
                strong_keywords=["terminate this agreement", "termination"],
                keywords=["terminate", "without cause", "notice", "days written notice",
                          "expiration", "survive", "renew"],
                heading_patterns=[r"(?i)terminat", r"(?i)term\s+and\s+termination"],
                priority=8,
            ),
            ClausePattern(
                clause_type=ClauseType.INTELLECTUAL_PROPERTY,
                strong_keywords=["intellectual property", "work product", "proprietary rights"],
                keywords=["patent", "copyright", "trademark", "trade secret", "inventions",
                          "license", "belong exclusively"],
                heading_patterns=[r"(?i)intellectual\s+property", r"(?i)ownership"],
                priority=7,
            ),
            ClausePattern(
                clause_type=ClauseType.PAYMENT_TERMS,
                strong_keywords=["payment terms", "net 30", "net 60", "retainer"],
                keywords=["payment", "invoice", "fees", "late payment", "billing", "compensation"],
                heading_patterns=[r"(?i)payment", r"(?i)fees", r"(?i)compensation"],
                priority=6,
            ),
            ClausePattern(
                clause_type=ClauseType.GOVERNING_LAW,
                strong_keywords=["governed by the laws of", "governing law"],
                keywords=["laws of", "jurisdiction", "venue"],
                heading_patterns=[r"(?i)governing\s+law", r"(?i)jurisdiction"],
                priority=6,
            ),
            ClausePattern(
                clause_type=ClauseType.DISPUTE_RESOLUTION,
                strong_keywords=["dispute resolution", "arbitration association", "mediation"],
                keywords=["dispute", "arbitration", "arbitrator", "negotiation", "good faith negotiations"],
                heading_patterns=[r"(?i)dispute", r"(?i)arbitration"],
                priority=5,
            ),
            ClausePattern(
                clause_type=ClauseType.PERFORMANCE,
                strong_keywords=["time is of the essence", "service levels", "service level agreement"],
                keywords=["performance", "deliverables", "deadline", "obligations", "milestones"],
                heading_patterns=[r"(?i)performance", r"(?i)deliverables"],
                priority=4,
            ),
        ]

    def classify(
        self,
        text: str,
        context: Optional[AnalysisContext] = None,
    ) -> Classification:
        """
        Classify text into a clause type.

        Args:
            text: The clause text to analyze.
            context: Unused; accepted for interface compatibility.

        Returns:
            Classification. ``OTHER`` with confidence 30 if no pattern
            matches strongly enough, or with confidence 0 if the text is
            too short or malformed to classify.
        """
        if not self._is_classifiable(text):
            return Classification(ClauseType.OTHER, 0)

        text_lower = text.lower()
        title = self._title(text)
        best_match = ClauseType.OTHER
        best_score = 0

        for pattern in sorted(self._patterns, key=lambda p: -p.priority):
            score = self._calculate_match_score(text_lower, title, pattern)
            if score > best_score:
                best_score = score
                best_match = pattern.clause_type

        if best_score < self.MIN_SCORE:
            return Classification(ClauseType.OTHER, self.UNMATCHED_CONFIDENCE)

        return Classification(best_match, min(self.MAX_CONFIDENCE, best_score))

    def _is_classifiable(self, text: str) -> bool:
        if text is None:
            return False
        stripped = text.strip()
        if len(stripped) < self.min_chars:
            return False
        return re.search(r"[A-Za-z]{2,}", stripped) is not None

    @staticmethod
    def _title(text: str) -> str:
        """First line of the clause, if short enough to be a heading."""
        lines = text.strip().splitlines()
        if not lines or len(lines[0]) > 80:
            return ""
        return lines[0]

    def _calculate_match_score(
        self,
        text_lower: str,
        title: str,
        pattern: ClausePattern,
    ) -> int:
        """Calculate match score for a pattern against text."""
        score = 0

        for heading in pattern.heading_patterns:
            if title and re.search(heading, title):
                score += self.HEADING_WEIGHT
                break  # Only count heading match once

        for keyword in pattern.strong_keywords:
            if keyword in text_lower:
                score += self.STRONG_WEIGHT

        for keyword in pattern.keywords:
            if keyword in text_lower:
                score += self.KEYWORD_WEIGHT

        return score

    def get_type_keywords(self, clause_type: ClauseType) -> List[str]:
        """Get all keywords for a clause type."""
        pattern = next(
            (p for p in self._patterns if p.clause_type == clause_type), None
        )
        if not pattern:
            return []
        return pattern.strong_keywords + pattern.keywords

    def extract_keywords(self, text: str, clause_type: ClauseType) -> List[str]:
        """
        Extract matching keywords from text for a given clause type.

        Args:
            text: The text to extract keywords from.
            clause_type: The clause type to match keywords for.

        Returns:
            List of keywords found in the text.
        """
        text_lower = text.lower()
        return [k for k in self.get_type_keywords(clause_type) if k in text_lower]

    def rank(self, text: str) -> List[Tuple[ClauseType, int]]:
        """Score every clause type against text, best first."""
        text_lower = text.lower()
        title = self._title(text)
        scores = [
            (p.clause_type, self._calculate_match_score(text_lower, title, p))
            for p in sorted(self._patterns, key=lambda p: -p.priority)
        ]
        return sorted(scores, key=lambda item: -item[1])
