"""Rule-based clause risk scoring.

Each clause type starts from a base score reflecting how much exposure
that kind of clause usually carries. Weighted risk rules from the
configuration then push the score up (risky wording) or down
(protective wording).
"""

import logging
from typing import Dict, List, Optional

from ..config.config_manager import ConfigurationManager
from ..config.models import RiskRule
from ..interfaces.capabilities import AnalysisContext, IRiskScorer, RiskAssessment
from ..models.enums import ClauseType, RiskLevel


logger = logging.getLogger(__name__)


BASE_SCORES: Dict[ClauseType, int] = {
    ClauseType.INDEMNIFICATION: 30,
    ClauseType.TERMINATION: 35,
    ClauseType.LIABILITY: 45,
    ClauseType.INTELLECTUAL_PROPERTY: 40,
    ClauseType.PAYMENT_TERMS: 20,
    ClauseType.GOVERNING_LAW: 20,
    ClauseType.PERFORMANCE: 30,
    ClauseType.DISPUTE_RESOLUTION: 30,
    ClauseType.OTHER: 25,
}

DEFAULT_EXPLANATIONS = {
    RiskLevel.SAFE: "Standard clause with no significant risk indicators.",
    RiskLevel.MEDIUM: "Clause contains terms that deserve a closer look before signing.",
    RiskLevel.HIGH: "Clause places significant legal or financial exposure on the client.",
}

DEFAULT_IMPACTS = {
    RiskLevel.SAFE: "Minimal impact expected",
    RiskLevel.MEDIUM: "Moderate exposure if the clause is invoked",
    RiskLevel.HIGH: "Significant financial or legal exposure",
}


class RuleBasedRiskScorer(IRiskScorer):
    """
    Risk scorer driven by configurable weighted regex rules.

    Score = base score for the clause type + sum of matching rule
    weights, clamped to [0, 100]. Levels use the Safe < 40 <= Medium
    < 70 <= High thresholds.
    """

    BASE_CONFIDENCE = 60
    RULE_CONFIDENCE = 10
    MAX_CONFIDENCE = 95
    MIN_CHARS = 20

    def __init__(
        self,
        config_manager: Optional[ConfigurationManager] = None,
        base_scores: Optional[Dict[ClauseType, int]] = None,
        medium_at: int = 40,
        high_at: int = 70,
    ):
        self.config_manager = config_manager or ConfigurationManager.with_defaults()
        self.base_scores = dict(BASE_SCORES)
        if base_scores:
            self.base_scores.update(base_scores)
        self.medium_at = medium_at
        self.high_at = high_at

    def score(
        self,
        text: str,
        clause_type: ClauseType,
        context: Optional[AnalysisContext] = None,
    ) -> RiskAssessment:
        """
        Score a clause.

        Args:
            text: Clause text.
            clause_type: Type assigned by the classifier.
            context: Unused; accepted for interface compatibility.

        Returns:
            RiskAssessment with explanation, recommendations and impact
            taken from the matched rules.
        """
        base = self.base_scores.get(clause_type, self.base_scores[ClauseType.OTHER])
        if not text or len(text.strip()) < self.MIN_CHARS:
            level = self._level(base)
            return RiskAssessment(
                risk_level=level,
                risk_score=base,
                explanation="Clause text is too short to assess.",
                impact=DEFAULT_IMPACTS[level],
                confidence=0,
            )

        matched = self.matching_rules(text, clause_type)
        raw_score = base + sum(rule.weight for rule in matched)
        risk_score = max(0, min(100, raw_score))
        level = self._level(risk_score)

        logger.debug(
            f"Scored {clause_type.value} clause at {risk_score} "
            f"({len(matched)} rules: {[r.id for r in matched]})"
        )

        return RiskAssessment(
            risk_level=level,
            risk_score=risk_score,
            explanation=self._explanation(matched, level),
            recommendations=tuple(self._recommendations(matched)),
            impact=self._impact(matched, level),
            confidence=self._confidence(clause_type, matched),
        )

    def matching_rules(self, text: str, clause_type: ClauseType) -> List[RiskRule]:
        """Get enabled rules for the clause type that match the text, by priority."""
        rules = self.config_manager.configuration.get_rules_for_type(clause_type.value)
        return [rule for rule in rules if rule.matches(text)]

    def _level(self, score: int) -> RiskLevel:
        return RiskLevel.from_score(score, medium_at=self.medium_at, high_at=self.high_at)

    @staticmethod
    def _explanation(matched: List[RiskRule], level: RiskLevel) -> str:
        for rule in matched:
            if rule.explanation:
                return rule.explanation
        return DEFAULT_EXPLANATIONS[level]

    @staticmethod
    def _recommendations(matched: List[RiskRule]) -> List[str]:
        seen = []
        for rule in matched:
            if rule.recommendation and rule.recommendation not in seen:
                seen.append(rule.recommendation)
        return seen

    @staticmethod
    def _impact(matched: List[RiskRule], level: RiskLevel) -> str:
        for rule in matched:
            if rule.impact:
                return rule.impact
        return DEFAULT_IMPACTS[level]

    def _confidence(self, clause_type: ClauseType, matched: List[RiskRule]) -> int:
        if clause_type is ClauseType.OTHER and not matched:
            return self.BASE_CONFIDENCE - self.RULE_CONFIDENCE
        return min(
            self.MAX_CONFIDENCE,
            self.BASE_CONFIDENCE + self.RULE_CONFIDENCE * len(matched),
        )
