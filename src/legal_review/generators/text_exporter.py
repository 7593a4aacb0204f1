"""Plain-text export artifacts for analysis runs.

Every export is a pure function of its inputs, so the same run state always
produces byte-identical output.
"""

import logging
from typing import Any, Dict, List, Mapping, Optional, Sequence

from ..models.clause import Clause, Translation
from ..models.document import ComposedDocument
from ..models.enums import RiskLevel
from ..models.metrics import DocumentMetrics, SummarySection


logger = logging.getLogger(__name__)

BULLET = "•"


class TextExporter:
    """
    Renders clauses, translations, summaries and reports as text.

    Layouts follow the download formats of the review console.
    """

    def export_clauses(
        self,
        clauses: Sequence[Clause],
        document_id: str = "",
        clause_id: Optional[str] = None,
    ) -> str:
        """
        Export detected clauses.

        Args:
            clauses: Clauses in canonical order.
            document_id: Document identifier for the header.
            clause_id: Export only this clause when given.

        Returns:
            Export text.

        Raises:
            KeyError: If ``clause_id`` is not among the clauses.
        """
        if clause_id is not None:
            selected = [c for c in clauses if c.id == clause_id]
            if not selected:
                raise KeyError(clause_id)
        else:
            selected = list(clauses)

        lines = [
            "CLAUSE ANALYSIS",
            f"Document: {document_id}",
            f"Total Clauses: {len(selected)}",
            "",
        ]
        for i, clause in enumerate(selected, 1):
            lines.append(f"{i}. {clause.type_label} (Page {clause.page})")
            risk = f"Risk: {clause.risk_level.label} ({clause.risk_score}%)"
            if clause.unscored:
                risk += " [unscored]"
            lines.append(f"{risk} | Confidence: {clause.confidence}%")
            lines.append(clause.text)
            lines.append("")
        return "\n".join(lines)

    def export_translation(self, translation: Translation, clause: Clause) -> str:
        """Export one translation in the console's copy/download format."""
        return (
            f"Original Text:\n{translation.original_text}\n\n"
            f"Plain English Translation:\n{translation.simplified_text}\n\n"
            f"Type: {clause.type_label}\n"
            f"Readability Score: {translation.readability_score}%"
        )

    def export_translations(
        self,
        clauses: Sequence[Clause],
        translations: Mapping[str, Translation],
    ) -> str:
        """Export every available translation, in clause order."""
        blocks = [
            self.export_translation(translations[clause.id], clause)
            for clause in clauses
            if clause.id in translations
        ]
        return "\n\n".join(blocks)

    def translation_records(
        self,
        clauses: Sequence[Clause],
        translations: Mapping[str, Translation],
    ) -> List[Dict[str, Any]]:
        """Structured (JSON-serializable) form of the translation export."""
        records = []
        for clause in clauses:
            translation = translations.get(clause.id)
            if translation is None:
                continue
            records.append({
                "clause_id": clause.id,
                "type": clause.type_label,
                "page": clause.page,
                "original_text": translation.original_text,
                "simplified_text": translation.simplified_text,
                "readability_score": translation.readability_score,
                "complexity": translation.complexity.value,
            })
        return records

    def export_summary(self, sections: Sequence[SummarySection], overall_confidence: int) -> str:
        """Export the executive summary."""
        parts = ["LEGAL DOCUMENT EXECUTIVE SUMMARY\n\n"]
        for i, section in enumerate(sections, 1):
            points = "\n".join(f"{BULLET} {point}" for point in section.key_points)
            parts.append(f"{i}. {section.title}\n{section.content}\n\nKey Points:\n{points}\n\n")
        parts.append(f"Overall Confidence Score: {overall_confidence}%")
        return "".join(parts)

    def export_report(
        self,
        metrics: DocumentMetrics,
        sections: Sequence[SummarySection],
        review_statistics: Optional[Mapping[str, Any]] = None,
    ) -> str:
        """
        Export the comprehensive analysis report.

        Args:
            metrics: Document metrics of the run.
            sections: Executive summary sections.
            review_statistics: SuggestionStore statistics, if any.

        Returns:
            Report text.
        """
        parts = ["COMPREHENSIVE LEGAL ANALYSIS REPORT\n\n", "CONFIDENCE METRICS:\n"]
        for metric in metrics.metrics:
            factors = "\n".join(f"{BULLET} {factor}" for factor in metric.factors)
            parts.append(
                f"{metric.category}: {metric.score}%\n{metric.description}\nFactors:\n{factors}\n\n"
            )

        parts.append("RISK OVERVIEW:\n")
        for level in (RiskLevel.HIGH, RiskLevel.MEDIUM, RiskLevel.SAFE):
            parts.append(f"{level.label}: {metrics.risk_counts.get(level, 0)}\n")
        parts.append(f"Overall Risk Score: {metrics.overall_risk_score}%\n\n")

        parts.append("EXECUTIVE SUMMARY:\n")
        for i, section in enumerate(sections, 1):
            parts.append(
                f"{i}. {section.title} ({section.risk_level.value.upper()} RISK)\n{section.content}\n\n"
            )

        stats = review_statistics or {}
        parts.append("REVIEW STATUS:\n")
        parts.append(f"Total Suggestions: {stats.get('total', 0)}\n")
        for key in ("pending", "accepted", "edited", "rejected"):
            parts.append(f"{key.title()}: {stats.get(key, 0)}\n")
        parts.append(f"\nOverall Confidence Score: {metrics.overall_confidence}%")
        return "".join(parts)

    def export_revised(self, composed: ComposedDocument) -> str:
        """Export the revised document: applied changes, then full text by page."""
        changes = "\n".join(
            f"{i}. {change.clause_label} (Page {change.page})\nRevised Text: {change.new_text}\n"
            for i, change in enumerate(composed.changes, 1)
        )
        pages = "\n\n".join(
            f"--- Page {page.number} ---\n{page.text}" for page in composed.pages
        )
        return (
            "REVISED LEGAL DOCUMENT\n\n"
            "The following clauses have been updated based on accepted suggestions:\n\n"
            f"{changes}\n"
            "FULL TEXT:\n\n"
            f"{pages}\n"
        )
