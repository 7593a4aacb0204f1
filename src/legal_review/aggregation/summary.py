"""Executive summary generation."""

from typing import Dict, List, Mapping, Sequence

from ..models.clause import Clause, Translation
from ..models.enums import ClauseType
from ..models.metrics import SummarySection


class ContractSummarizer:
    """
    Builds an executive summary with one section per clause type present.

    Sections follow the canonical ClauseType order. Each section's content
    is the plain-English rendering of its clauses; key points come from
    the risk explanations and recommendations of the most severe clauses.
    """

    MAX_KEY_POINTS = 4

    def summarize(self, run) -> List[SummarySection]:
        """Summarize an AnalysisRun."""
        return self.summarize_clauses(run.clauses, run.translations)

    def summarize_clauses(
        self,
        clauses: Sequence[Clause],
        translations: Mapping[str, Translation],
    ) -> List[SummarySection]:
        """
        Summarize clauses grouped by type.

        Args:
            clauses: Clauses in canonical (page, offset) order.
            translations: Translations keyed by clause id.

        Returns:
            Summary sections, empty when there are no clauses.
        """
        groups: Dict[ClauseType, List[Clause]] = {}
        for clause in clauses:
            groups.setdefault(clause.clause_type, []).append(clause)

        sections = []
        for clause_type in ClauseType:
            group = groups.get(clause_type)
            if not group:
                continue
            sections.append(self._section(clause_type, group, translations))
        return sections

    def _section(
        self,
        clause_type: ClauseType,
        group: List[Clause],
        translations: Mapping[str, Translation],
    ) -> SummarySection:
        content = " ".join(
            translations[c.id].simplified_text if c.id in translations else c.text
            for c in group
        )

        # Most severe first; sorted() is stable so ties keep document order
        by_severity = sorted(group, key=lambda c: (-c.risk_level.rank, -c.risk_score))
        key_points: List[str] = []
        for clause in by_severity:
            for point in (clause.explanation, *clause.recommendations):
                if point and point not in key_points:
                    key_points.append(point)

        return SummarySection(
            title=clause_type.label,
            content=content,
            key_points=key_points[: self.MAX_KEY_POINTS],
            risk_level=max(c.risk_level for c in group),
            page=min(c.page for c in group),
        )
