"""Abstract interfaces for pluggable components."""

from .capabilities import (
    AnalysisContext,
    Classification,
    IClauseClassifier,
    IRewriteEngine,
    IRiskScorer,
    ITranslator,
    RewriteProposal,
    RiskAssessment,
    TranslationResult,
)
from .audit import AuditEvent, AuditEventType, IAuditLogger

__all__ = [
    "AnalysisContext",
    "Classification",
    "IClauseClassifier",
    "IRewriteEngine",
    "IRiskScorer",
    "ITranslator",
    "RewriteProposal",
    "RiskAssessment",
    "TranslationResult",
    "AuditEvent",
    "AuditEventType",
    "IAuditLogger",
]
