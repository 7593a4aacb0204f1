"""Document-level confidence metrics.

Four fixed categories are scored from the clause, translation and
suggestion sets of a run; the overall confidence is the rounded mean of
the category scores. The computation is a pure function of its inputs, so
metrics can be cached and rebuilt at any time.
"""

import logging
from typing import Dict, Iterable, List, Mapping, Optional, Sequence

from ..models.clause import Clause, ClauseOutcome, Suggestion, Translation
from ..models.document import Document
from ..models.enums import ClauseType, RiskLevel, SuggestionStatus
from ..models.metrics import ConfidenceMetric, DocumentMetrics


logger = logging.getLogger(__name__)


CLAUSE_COVERAGE = "Clause Coverage"
RISK_ASSESSMENT_ACCURACY = "Risk Assessment Accuracy"
LANGUAGE_PROCESSING = "Language Processing"
COMPLETENESS = "Completeness"

CATEGORIES = (
    CLAUSE_COVERAGE,
    RISK_ASSESSMENT_ACCURACY,
    LANGUAGE_PROCESSING,
    COMPLETENESS,
)

DESCRIPTIONS = {
    CLAUSE_COVERAGE: "How well the document's text was segmented into recognized clauses",
    RISK_ASSESSMENT_ACCURACY: "Confidence in the risk level assigned to each clause",
    LANGUAGE_PROCESSING: "Quality of clause classification and plain-English translation",
    COMPLETENESS: "Share of the analysis that finished without degraded results",
}


def _clamp(value: float) -> int:
    return int(round(max(0.0, min(100.0, value))))


def _mean(values: Sequence[float]) -> float:
    return sum(values) / len(values) if values else 0.0


def _non_ws_length(text: str) -> int:
    return len("".join(text.split()))


class ConfidenceAggregator:
    """
    Computes DocumentMetrics for an analysis run.

    Example:
        aggregator = ConfidenceAggregator()
        metrics = aggregator.compute(document, clauses, translations, suggestions)
        print(metrics.overall_confidence)
    """

    def compute(
        self,
        document: Document,
        clauses: Sequence[Clause],
        translations: Mapping[str, Translation],
        suggestions: Iterable[Suggestion],
        outcomes: Optional[Sequence[ClauseOutcome]] = None,
        run_id: str = "",
    ) -> DocumentMetrics:
        """
        Compute confidence metrics and risk distribution.

        Args:
            document: The analyzed document.
            clauses: Clauses of the run in canonical order.
            translations: Translations keyed by clause id.
            suggestions: Suggestions of the run (any status).
            outcomes: Per-clause outcomes; every clause is assumed ok
                when omitted.
            run_id: Run identifier recorded on the result.

        Returns:
            DocumentMetrics with the four categories in fixed order.
        """
        suggestions = list(suggestions)
        outcomes = list(outcomes) if outcomes is not None else []

        risk_counts: Dict[RiskLevel, int] = {level: 0 for level in RiskLevel}
        for clause in clauses:
            risk_counts[clause.risk_level] += 1

        if clauses:
            metrics = [
                self._clause_coverage(document, clauses),
                self._risk_accuracy(clauses),
                self._language_processing(clauses, translations),
                self._completeness(clauses, suggestions, outcomes),
            ]
        else:
            metrics = [
                ConfidenceMetric(
                    category=name,
                    score=0,
                    description=DESCRIPTIONS[name],
                    factors=["No clauses were found in the document"],
                )
                for name in CATEGORIES
            ]

        overall = _clamp(_mean([m.score for m in metrics]))
        readabilities = [
            translations[c.id].readability_score for c in clauses if c.id in translations
        ]

        result = DocumentMetrics(
            document_id=document.id,
            run_id=run_id,
            total_clauses=len(clauses),
            risk_counts=risk_counts,
            overall_confidence=overall,
            overall_risk_score=_clamp(_mean([c.risk_score for c in clauses])),
            average_readability=_clamp(_mean(readabilities)),
            metrics=metrics,
            review_progress=self._review_progress(suggestions),
        )
        logger.debug(
            f"Computed metrics for run {run_id or '-'}: overall {overall}, "
            f"{len(clauses)} clauses"
        )
        return result

    def _clause_coverage(self, document: Document, clauses: Sequence[Clause]) -> ConfidenceMetric:
        total_chars = document.content_length
        covered_chars = sum(_non_ws_length(c.text) for c in clauses)
        structural = min(1.0, covered_chars / total_chars) if total_chars else 0.0
        classified = sum(1 for c in clauses if c.clause_type is not ClauseType.OTHER)
        classified_share = classified / len(clauses)

        return ConfidenceMetric(
            category=CLAUSE_COVERAGE,
            score=_clamp(100 * (structural + classified_share) / 2),
            description=DESCRIPTIONS[CLAUSE_COVERAGE],
            factors=[
                f"{_clamp(100 * structural)}% of document text covered by clauses",
                f"{classified} of {len(clauses)} clauses classified",
            ],
        )

    def _risk_accuracy(self, clauses: Sequence[Clause]) -> ConfidenceMetric:
        scored = [c for c in clauses if not c.unscored]
        scored_share = len(scored) / len(clauses)
        mean_confidence = _mean([c.risk_confidence for c in scored])

        factors = [
            f"{len(scored)} of {len(clauses)} clauses risk-scored",
            f"Average scorer confidence {_clamp(mean_confidence)}%",
        ]
        high = sum(1 for c in clauses if c.risk_level is RiskLevel.HIGH)
        if high:
            factors.append(f"{high} high-risk clauses identified")

        return ConfidenceMetric(
            category=RISK_ASSESSMENT_ACCURACY,
            score=_clamp(mean_confidence * scored_share),
            description=DESCRIPTIONS[RISK_ASSESSMENT_ACCURACY],
            factors=factors,
        )

    def _language_processing(
        self,
        clauses: Sequence[Clause],
        translations: Mapping[str, Translation],
    ) -> ConfidenceMetric:
        mean_classifier = _mean([c.confidence for c in clauses])
        translated = [translations[c.id] for c in clauses if c.id in translations]
        mean_readability = _mean([t.readability_score for t in translated])

        return ConfidenceMetric(
            category=LANGUAGE_PROCESSING,
            score=_clamp((mean_classifier + mean_readability) / 2),
            description=DESCRIPTIONS[LANGUAGE_PROCESSING],
            factors=[
                f"Average classification confidence {_clamp(mean_classifier)}%",
                f"{len(translated)} of {len(clauses)} clauses translated",
                f"Average readability {_clamp(mean_readability)}%",
            ],
        )

    def _completeness(
        self,
        clauses: Sequence[Clause],
        suggestions: List[Suggestion],
        outcomes: List[ClauseOutcome],
    ) -> ConfidenceMetric:
        if outcomes:
            ok_count = sum(1 for o in outcomes if o.ok)
            ok_share = ok_count / len(outcomes)
        else:
            ok_count = len(clauses)
            ok_share = 1.0

        flagged = [c for c in clauses if c.is_risky]
        suggested_ids = {s.clause_id for s in suggestions}
        with_suggestion = sum(1 for c in flagged if c.id in suggested_ids)
        suggestion_share = with_suggestion / len(flagged) if flagged else 1.0

        return ConfidenceMetric(
            category=COMPLETENESS,
            score=_clamp(100 * (ok_share + suggestion_share) / 2),
            description=DESCRIPTIONS[COMPLETENESS],
            factors=[
                f"{ok_count} of {len(outcomes) or len(clauses)} clauses fully analyzed",
                f"{with_suggestion} of {len(flagged)} flagged clauses have suggestions",
            ],
        )

    @staticmethod
    def _review_progress(suggestions: List[Suggestion]) -> Dict[str, int]:
        progress = {status.value: 0 for status in SuggestionStatus}
        for suggestion in suggestions:
            progress[suggestion.status.value] += 1
        progress["total"] = len(suggestions)
        return progress
