"""Default analysis capabilities for the Legal Review pipeline."""

from .clause_patterns import ClausePattern, ClausePatternClassifier
from .risk_scorer import RuleBasedRiskScorer
from .translator import PlainLanguageTranslator, complexity_band, reading_ease
from .rewriter import TemplateRewriteEngine

__all__ = [
    "ClausePattern",
    "ClausePatternClassifier",
    "RuleBasedRiskScorer",
    "PlainLanguageTranslator",
    "TemplateRewriteEngine",
    "complexity_band",
    "reading_ease",
]
