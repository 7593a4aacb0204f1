"""Clause-level data models for the Legal Review pipeline."""

import hashlib
import re
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from .enums import ClauseType, Complexity, OutcomeStatus, RiskLevel, SuggestionStatus


_WS_RE = re.compile(r"\s+")


def content_hash(text: str) -> str:
    """Hash of whitespace-normalized, case-folded clause text."""
    normalized = _WS_RE.sub(" ", text).strip().casefold()
    return hashlib.sha256(normalized.encode("utf-8")).hexdigest()[:12]


def make_clause_id(text: str, page: int, ordinal: int) -> str:
    """
    Stable clause identifier.

    Combines the content hash with a positional anchor (page plus the
    occurrence index of that hash on the page), so the same text analyzed
    twice gets the same id and duplicated boilerplate stays distinct.
    """
    return f"cl-{content_hash(text)}-p{page}-{ordinal}"


@dataclass(frozen=True)
class Clause:
    """
    Classified and risk-scored clause.

    Created once per analysis run and never mutated afterwards.
    """
    id: str
    document_id: str
    run_id: str
    page: int
    start: int
    end: int
    text: str
    clause_type: ClauseType
    confidence: int
    risk_level: RiskLevel
    risk_score: int
    risk_confidence: int = 0
    explanation: str = ""
    recommendations: Tuple[str, ...] = field(default_factory=tuple)
    impact: str = ""
    unscored: bool = False
    outcome: OutcomeStatus = OutcomeStatus.OK

    @property
    def sort_key(self) -> Tuple[int, int]:
        return (self.page, self.start)

    @property
    def type_label(self) -> str:
        return self.clause_type.label

    @property
    def is_risky(self) -> bool:
        return self.risk_level is not RiskLevel.SAFE


@dataclass(frozen=True)
class Translation:
    """Plain-English rendering of a single clause."""
    clause_id: str
    original_text: str
    simplified_text: str
    readability_score: int
    complexity: Complexity = Complexity.MEDIUM


@dataclass
class Suggestion:
    """
    Proposed replacement for a clause's text.

    Only the SuggestionStore mutates ``status``, ``edited_text`` and
    ``version``; everything handed to callers is a copy.
    """
    id: str
    clause_id: str
    original_text: str
    suggested_text: str
    reasoning: str
    benefits: List[str] = field(default_factory=list)
    clause_type: ClauseType = ClauseType.OTHER
    risk_level: RiskLevel = RiskLevel.MEDIUM
    page: int = 0
    status: SuggestionStatus = SuggestionStatus.PENDING
    edited_text: Optional[str] = None
    version: int = 0

    def __post_init__(self):
        if self.benefits is None:
            self.benefits = []

    @property
    def effective_text(self) -> str:
        """Text used for composition: the edit wins over the suggestion."""
        if self.edited_text is not None:
            return self.edited_text
        return self.suggested_text


@dataclass
class ClauseOutcome:
    """Processing outcome of one clause in one run."""
    clause_id: str
    index: int
    status: OutcomeStatus = OutcomeStatus.OK
    errors: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.status is OutcomeStatus.OK
