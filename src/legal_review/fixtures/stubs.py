"""Deterministic capability stubs backed by seed data.

Each stub looks clauses up by content hash, so results depend only on the
clause text. Unknown text gets the neutral result every capability returns
for text it cannot analyze.
"""

from typing import Dict, Iterable, Optional

from ..interfaces.capabilities import (
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
from ..models.clause import content_hash
from ..models.enums import ClauseType, Complexity, RiskLevel
from .seed import SEED_CLAUSES, SeedClause


FIXTURE_RISK_CONFIDENCE = 90


class _SeedLookup:
    def __init__(self, seeds: Optional[Iterable[SeedClause]] = None):
        self._seeds: Dict[str, SeedClause] = {
            content_hash(seed.text): seed
            for seed in (seeds if seeds is not None else SEED_CLAUSES)
        }

    def lookup(self, text: str) -> Optional[SeedClause]:
        return self._seeds.get(content_hash(text))


class FixtureClassifier(_SeedLookup, IClauseClassifier):
    def classify(
        self,
        text: str,
        context: Optional[AnalysisContext] = None,
    ) -> Classification:
        seed = self.lookup(text)
        if seed is None:
            return Classification(clause_type=ClauseType.OTHER, confidence=0)
        return Classification(clause_type=seed.clause_type, confidence=seed.confidence)


class FixtureRiskScorer(_SeedLookup, IRiskScorer):
    def score(
        self,
        text: str,
        clause_type: ClauseType,
        context: Optional[AnalysisContext] = None,
    ) -> RiskAssessment:
        seed = self.lookup(text)
        if seed is None:
            return RiskAssessment(risk_level=RiskLevel.SAFE, risk_score=0, confidence=0)
        return RiskAssessment(
            risk_level=seed.risk_level,
            risk_score=seed.risk_score,
            explanation=seed.explanation,
            recommendations=seed.recommendations,
            impact=seed.impact,
            confidence=FIXTURE_RISK_CONFIDENCE,
        )


class FixtureTranslator(_SeedLookup, ITranslator):
    def translate(
        self,
        text: str,
        clause_type: ClauseType,
        context: Optional[AnalysisContext] = None,
    ) -> TranslationResult:
        seed = self.lookup(text)
        if seed is None:
            return TranslationResult(
                simplified_text=text.strip(),
                readability_score=50,
                complexity=Complexity.MEDIUM,
                confidence=0,
            )
        return TranslationResult(
            simplified_text=seed.simplified_text,
            readability_score=seed.readability_score,
            complexity=seed.complexity,
            confidence=80,
        )


class FixtureRewriteEngine(_SeedLookup, IRewriteEngine):
    def rewrite(
        self,
        text: str,
        clause_type: ClauseType,
        risk: RiskAssessment,
        context: Optional[AnalysisContext] = None,
    ) -> Optional[RewriteProposal]:
        seed = self.lookup(text)
        if seed is None or not seed.suggested_text:
            return None
        return RewriteProposal(
            suggested_text=seed.suggested_text,
            reasoning=seed.reasoning,
            benefits=list(seed.benefits),
            confidence=85,
        )


def fixture_capabilities(seeds: Optional[Iterable[SeedClause]] = None) -> Dict[str, object]:
    """
    All four fixture stubs, keyed by pipeline argument name.

    Usage: ``AnalysisPipeline(config, **fixture_capabilities())``.
    """
    seeds = list(seeds) if seeds is not None else None
    return {
        "classifier": FixtureClassifier(seeds),
        "risk_scorer": FixtureRiskScorer(seeds),
        "translator": FixtureTranslator(seeds),
        "rewrite_engine": FixtureRewriteEngine(seeds),
    }
