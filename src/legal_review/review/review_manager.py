"""Review service: run registry, query surface and review transitions."""

import logging
import threading
from typing import Any, Dict, Iterable, List, Optional, Tuple, Union

from ..aggregation.summary import ContractSummarizer
from ..audit.audit_logger import AuditLogger
from ..exceptions import NotFoundError, ValidationError
from ..generators.document_exporter import DocumentExporter
from ..generators.text_exporter import TextExporter
from ..models.clause import Clause, Suggestion, Translation
from ..models.document import ComposedDocument, Document
from ..models.enums import ClauseType, Complexity, RiskLevel, SuggestionStatus
from ..models.metrics import DocumentMetrics, SummarySection
from ..performance import SimpleCache
from ..pipeline import AnalysisPipeline, AnalysisRun, PipelineConfig
from .composer import DocumentComposer
from .suggestion_store import BulkResult


logger = logging.getLogger(__name__)

EXPORT_KINDS = ("clauses", "translations", "summary", "report", "revised")

# Export kinds that can be narrowed to a single clause.
PER_CLAUSE_KINDS = ("clauses", "translations")

_ALL = {"", "all", "all types", "all levels"}


class ReviewManager:
    """
    Holds analysis runs in memory and serves every query and review action.

    Runs are kept until ``discard_run`` is called. Document metrics are
    cached per (run id, suggestion-store version), so any review
    transition makes the next ``get_metrics`` call recompute them.
    """

    def __init__(
        self,
        pipeline: Optional[AnalysisPipeline] = None,
        config: Optional[PipelineConfig] = None,
        cache_size: int = 100,
    ):
        """
        Initialize the review manager.

        Args:
            pipeline: Optional pipeline. If not provided, a new one is
                created from ``config``.
            config: Pipeline configuration used when creating a pipeline.
            cache_size: Maximum number of cached metric views.
        """
        self.pipeline = pipeline or AnalysisPipeline(config=config)
        self.composer = DocumentComposer()
        self.summarizer = ContractSummarizer()
        self.text_exporter = TextExporter()
        self.document_exporter = DocumentExporter()

        self._runs: Dict[str, AnalysisRun] = {}
        self._lock = threading.Lock()
        self._metrics_cache = SimpleCache(max_size=cache_size)

    @property
    def audit_logger(self) -> Optional[AuditLogger]:
        return self.pipeline.audit_logger

    # =========================================================================
    # Runs
    # =========================================================================

    def submit(
        self,
        document_id: str,
        pages: Iterable[Tuple[int, str]],
        filename: Optional[str] = None,
        user_id: Optional[str] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> AnalysisRun:
        """
        Ingest a document and analyze it.

        Raises:
            ValidationError: If the document is malformed.
        """
        document = self.pipeline.ingest(document_id, pages, filename=filename, user_id=user_id)
        return self.analyze(document, cancel_event=cancel_event)

    def analyze(
        self,
        document: Document,
        cancel_event: Optional[threading.Event] = None,
    ) -> AnalysisRun:
        """Analyze an ingested document and register the run."""
        run = self.pipeline.analyze(document, cancel_event=cancel_event)
        with self._lock:
            self._runs[run.id] = run
        return run

    def reanalyze(self, run_id: str) -> AnalysisRun:
        """Start a fresh run over the document of an existing run."""
        return self.analyze(self.get_run(run_id).document)

    def get_run(self, run_id: str) -> AnalysisRun:
        """
        Get a registered run.

        Raises:
            NotFoundError: If the run id is unknown.
        """
        with self._lock:
            run = self._runs.get(run_id)
        if run is None:
            raise NotFoundError("Analysis run not found", location=run_id)
        return run

    def list_runs(self, document_id: Optional[str] = None) -> List[AnalysisRun]:
        """List runs, oldest first, optionally for one document."""
        with self._lock:
            runs = list(self._runs.values())
        if document_id is not None:
            runs = [r for r in runs if r.document_id == document_id]
        return sorted(runs, key=lambda r: r.started_at)

    def discard_run(self, run_id: str) -> None:
        """
        Drop a run and its cached views.

        Raises:
            NotFoundError: If the run id is unknown.
        """
        with self._lock:
            if self._runs.pop(run_id, None) is None:
                raise NotFoundError("Analysis run not found", location=run_id)
        self._metrics_cache.invalidate_where(lambda key: key[0] == run_id)
        logger.info(f"Discarded analysis run {run_id}")

    # =========================================================================
    # Queries
    # =========================================================================

    def list_clauses(
        self,
        run_id: str,
        type_filter: Optional[Union[str, ClauseType]] = None,
        risk_level: Optional[Union[str, RiskLevel]] = None,
        search: Optional[str] = None,
    ) -> List[Clause]:
        """
        List clauses of a run in canonical order.

        Args:
            run_id: Analysis run.
            type_filter: Case-insensitive substring of the type label or
                value, or a ClauseType.
            risk_level: Risk level (``low`` is read as ``safe``).
            search: Case-insensitive substring of clause text or type label.

        Raises:
            NotFoundError: Unknown run.
            ValidationError: Unknown risk level.
        """
        clauses = self.get_run(run_id).clauses
        level = _parse_risk_level(risk_level)
        needle = (search or "").strip().casefold()

        result = []
        for clause in clauses:
            if not _type_matches(clause.clause_type, type_filter):
                continue
            if level is not None and clause.risk_level is not level:
                continue
            if needle and needle not in clause.text.casefold() \
                    and needle not in clause.type_label.casefold():
                continue
            result.append(clause)
        return result

    def get_clause(self, run_id: str, clause_id: str) -> Clause:
        clause = self.get_run(run_id).clause(clause_id)
        if clause is None:
            raise NotFoundError("Clause not found", location=clause_id)
        return clause

    def get_translations(
        self,
        run_id: str,
        complexity: Optional[Union[str, Complexity]] = None,
    ) -> List[Translation]:
        """List translations in clause order, optionally by complexity band."""
        run = self.get_run(run_id)
        band = _parse_enum(Complexity, complexity, "complexity")
        result = []
        for clause in run.clauses:
            translation = run.translations.get(clause.id)
            if translation is None:
                continue
            if band is not None and translation.complexity is not band:
                continue
            result.append(translation)
        return result

    def list_suggestions(
        self,
        run_id: str,
        status: Optional[Union[str, SuggestionStatus]] = None,
        clause_type: Optional[Union[str, ClauseType]] = None,
        risk_level: Optional[Union[str, RiskLevel]] = None,
    ) -> List[Suggestion]:
        """List suggestion copies in canonical order, optionally filtered."""
        store = self.get_run(run_id).suggestion_store
        return store.list(
            status=_parse_enum(SuggestionStatus, status, "status"),
            clause_type=_parse_clause_type(clause_type),
            risk_level=_parse_risk_level(risk_level),
        )

    def get_suggestion(self, run_id: str, suggestion_id: str) -> Suggestion:
        return self.get_run(run_id).suggestion_store.get(suggestion_id)

    def get_metrics(self, run_id: str) -> DocumentMetrics:
        """Document metrics reflecting the current review state."""
        run = self.get_run(run_id)
        if not self.pipeline.config.enable_caching:
            return self.pipeline.compute_metrics(run)

        key = (run_id, run.suggestion_store.version)
        metrics = self._metrics_cache.get(key)
        if metrics is None:
            metrics = self.pipeline.compute_metrics(run)
            self._metrics_cache.set(key, metrics)
        return metrics

    def get_summary(self, run_id: str) -> List[SummarySection]:
        return self.summarizer.summarize(self.get_run(run_id))

    def review_statistics(self, run_id: str) -> Dict[str, Any]:
        return self.get_run(run_id).suggestion_store.statistics()

    # =========================================================================
    # Review transitions
    # =========================================================================

    def accept(
        self,
        run_id: str,
        suggestion_id: str,
        expected_version: Optional[int] = None,
        user_id: Optional[str] = None,
    ) -> Suggestion:
        store = self.get_run(run_id).suggestion_store
        result = store.accept(suggestion_id, expected_version=expected_version, user_id=user_id)
        self._invalidate(run_id)
        return result

    def reject(
        self,
        run_id: str,
        suggestion_id: str,
        expected_version: Optional[int] = None,
        user_id: Optional[str] = None,
    ) -> Suggestion:
        store = self.get_run(run_id).suggestion_store
        result = store.reject(suggestion_id, expected_version=expected_version, user_id=user_id)
        self._invalidate(run_id)
        return result

    def edit(
        self,
        run_id: str,
        suggestion_id: str,
        text: str,
        expected_version: Optional[int] = None,
        user_id: Optional[str] = None,
    ) -> Suggestion:
        store = self.get_run(run_id).suggestion_store
        result = store.edit(suggestion_id, text, expected_version=expected_version, user_id=user_id)
        self._invalidate(run_id)
        return result

    def reset(
        self,
        run_id: str,
        suggestion_id: str,
        expected_version: Optional[int] = None,
        user_id: Optional[str] = None,
    ) -> Suggestion:
        store = self.get_run(run_id).suggestion_store
        result = store.reset(suggestion_id, expected_version=expected_version, user_id=user_id)
        self._invalidate(run_id)
        return result

    def accept_all_pending(self, run_id: str, user_id: Optional[str] = None) -> BulkResult:
        result = self.get_run(run_id).suggestion_store.accept_all_pending(user_id=user_id)
        self._invalidate(run_id)
        return result

    def _invalidate(self, run_id: str) -> None:
        self._metrics_cache.invalidate_where(lambda key: key[0] == run_id)

    # =========================================================================
    # Composition and export
    # =========================================================================

    def compose_revised_document(self, run_id: str) -> ComposedDocument:
        """Compose the revised document from the current suggestion state."""
        run = self.get_run(run_id)
        composed = self.composer.compose(
            run.document, run.clauses, run.suggestion_store.snapshot(), run_id=run.id
        )
        if self.audit_logger:
            self.audit_logger.log_document_composed(
                run.document_id, run.id, change_count=len(composed.changes)
            )
        return composed

    def export_text(
        self,
        run_id: str,
        kind: str,
        clause_id: Optional[str] = None,
        user_id: Optional[str] = None,
    ) -> str:
        """
        Render a plain-text export.

        Args:
            run_id: Analysis run.
            kind: One of ``clauses``, ``translations``, ``summary``,
                ``report`` or ``revised``.
            clause_id: For ``clauses`` and ``translations``, export only
                this clause.
            user_id: Optional user ID for audit logging.

        Raises:
            ValidationError: Unknown export kind, or a clause id given
                for a kind that covers the whole document.
            NotFoundError: Unknown run or clause, or no translation for
                the clause.
        """
        if kind not in EXPORT_KINDS:
            raise ValidationError(
                f"Unknown export kind: {kind}",
                details={"supported": list(EXPORT_KINDS)},
            )
        if clause_id is not None and kind not in PER_CLAUSE_KINDS:
            raise ValidationError(
                f"Export kind '{kind}' cannot be limited to one clause",
                location=clause_id,
                details={"per_clause_kinds": list(PER_CLAUSE_KINDS)},
            )
        run = self.get_run(run_id)

        if kind == "clauses":
            if clause_id is not None:
                self.get_clause(run_id, clause_id)
            content = self.text_exporter.export_clauses(
                run.clauses, document_id=run.document_id, clause_id=clause_id
            )
        elif kind == "translations" and clause_id is not None:
            clause = self.get_clause(run_id, clause_id)
            translation = run.translations.get(clause_id)
            if translation is None:
                raise NotFoundError("Translation not found", location=clause_id)
            content = self.text_exporter.export_translation(translation, clause)
        elif kind == "translations":
            content = self.text_exporter.export_translations(run.clauses, run.translations)
        elif kind == "summary":
            content = self.text_exporter.export_summary(
                self.get_summary(run_id), self.get_metrics(run_id).overall_confidence
            )
        elif kind == "report":
            content = self.text_exporter.export_report(
                self.get_metrics(run_id),
                self.get_summary(run_id),
                self.review_statistics(run_id),
            )
        else:
            content = self.text_exporter.export_revised(self.compose_revised_document(run_id))

        self._log_export(run, kind, "txt", user_id)
        return content

    def export_translation_records(self, run_id: str) -> List[Dict[str, Any]]:
        """Structured translation export."""
        run = self.get_run(run_id)
        return self.text_exporter.translation_records(run.clauses, run.translations)

    def export_docx(
        self,
        run_id: str,
        tracked: bool = True,
        user_id: Optional[str] = None,
    ) -> bytes:
        """Render the revised document as .docx bytes."""
        run = self.get_run(run_id)
        content = self.document_exporter.to_bytes(
            self.compose_revised_document(run_id), tracked=tracked
        )
        self._log_export(run, "revised", "docx", user_id)
        return content

    def _log_export(self, run: AnalysisRun, kind: str, export_format: str, user_id: Optional[str]) -> None:
        logger.info(f"Exported {kind} ({export_format}) for run {run.id}")
        if self.audit_logger:
            self.audit_logger.log_export_completed(
                run.document_id, run.id, kind, export_format, user_id=user_id
            )

    def close(self) -> None:
        """Close the manager and its pipeline."""
        self._metrics_cache.clear()
        self.pipeline.close()


def _is_all(value) -> bool:
    return value is None or (isinstance(value, str) and value.strip().lower() in _ALL)


def _type_matches(clause_type: ClauseType, type_filter) -> bool:
    if _is_all(type_filter):
        return True
    if isinstance(type_filter, ClauseType):
        return clause_type is type_filter
    needle = type_filter.strip().casefold()
    return needle in clause_type.label.casefold() or needle in clause_type.value


def _parse_clause_type(value) -> Optional[ClauseType]:
    if _is_all(value):
        return None
    try:
        return ClauseType.parse(value)
    except ValueError as e:
        raise ValidationError(str(e)) from None


def _parse_risk_level(value) -> Optional[RiskLevel]:
    if _is_all(value):
        return None
    try:
        return RiskLevel.normalize(value)
    except ValueError as e:
        raise ValidationError(str(e)) from None


def _parse_enum(enum_cls, value, name: str):
    if _is_all(value):
        return None
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(str(value).strip().lower())
    except ValueError:
        raise ValidationError(
            f"Unknown {name}: {value!r}",
            details={"supported": [m.value for m in enum_cls]},
        ) from None
