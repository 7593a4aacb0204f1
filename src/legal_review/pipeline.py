"""End-to-end analysis pipeline for the Legal Review system.

This module wires together segmentation, the pluggable per-clause
capabilities, suggestion generation and metric aggregation into a single
analysis run over an ingested document.
"""

import logging
import os
import threading
import time
import uuid
from concurrent.futures import Future, ThreadPoolExecutor
from concurrent.futures import TimeoutError as FuturesTimeout
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple

from .aggregation.confidence import ConfidenceAggregator
from .analyzers.clause_patterns import ClausePatternClassifier
from .analyzers.rewriter import TemplateRewriteEngine
from .analyzers.risk_scorer import RuleBasedRiskScorer
from .analyzers.translator import PlainLanguageTranslator
from .audit.audit_logger import AuditLogger
from .config.config_manager import ConfigurationManager
from .exceptions import (
    CapabilityFailure,
    CapabilityTimeout,
    ErrorCollector,
    SegmentationError,
    ValidationError,
)
from .interfaces.capabilities import (
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
from .models.clause import Clause, ClauseOutcome, Suggestion, Translation, content_hash, make_clause_id
from .models.document import Document, TextSpan
from .models.enums import ClauseType, OutcomeStatus, RiskLevel, RunStatus
from .models.metrics import DocumentMetrics
from .performance import PerformanceMonitor
from .review.suggestion_store import SuggestionStore
from .segmentation.segmenter import ClauseSegmenter, validate_spans


logger = logging.getLogger(__name__)

UNSCORED_EXPLANATION = "Risk could not be assessed automatically; review this clause manually."
UNSCORED_RISK_SCORE = 50


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _clamp(value: Any) -> int:
    return int(round(max(0, min(100, value))))


@dataclass
class PipelineConfig:
    """Configuration for the analysis pipeline."""

    # Database configuration
    database_url: Optional[str] = None

    # Configuration files (plain_language.json, risk_rules.json, templates.json)
    config_dir: Optional[str] = None

    # Concurrency
    max_workers: int = 4
    capability_timeout: float = 5.0  # seconds, per capability call

    # Analysis
    rewrite_threshold: int = 40  # risk score at or above which a rewrite is requested
    rewrite_min_level: RiskLevel = RiskLevel.MEDIUM
    max_clause_chars: int = 1200
    min_clause_chars: int = 20

    # Performance configuration
    enable_caching: bool = True
    max_processing_time: int = 60  # seconds

    # Feature flags
    enable_audit_logging: bool = False

    def __post_init__(self):
        if self.max_workers < 1:
            raise ValueError("max_workers must be at least 1")
        if self.capability_timeout <= 0:
            raise ValueError("capability_timeout must be positive")
        self.rewrite_min_level = RiskLevel.normalize(self.rewrite_min_level)

    @classmethod
    def from_env(cls, **overrides) -> "PipelineConfig":
        """
        Build a configuration from ``LEGAL_REVIEW_*`` environment variables.

        Explicit keyword overrides win over the environment.
        """
        values: Dict[str, Any] = {}
        if os.environ.get("LEGAL_REVIEW_DATABASE_URL"):
            values["database_url"] = os.environ["LEGAL_REVIEW_DATABASE_URL"]
            values["enable_audit_logging"] = True
        if os.environ.get("LEGAL_REVIEW_CONFIG_DIR"):
            values["config_dir"] = os.environ["LEGAL_REVIEW_CONFIG_DIR"]
        if os.environ.get("LEGAL_REVIEW_MAX_WORKERS"):
            values["max_workers"] = int(os.environ["LEGAL_REVIEW_MAX_WORKERS"])
        if os.environ.get("LEGAL_REVIEW_CAPABILITY_TIMEOUT"):
            values["capability_timeout"] = float(os.environ["LEGAL_REVIEW_CAPABILITY_TIMEOUT"])
        values.update(overrides)
        return cls(**values)


@dataclass
class AnalysisRun:
    """Result of one analysis run over a document."""

    id: str
    document: Document
    status: RunStatus = RunStatus.COMPLETE
    clauses: List[Clause] = field(default_factory=list)
    translations: Dict[str, Translation] = field(default_factory=dict)
    suggestion_store: SuggestionStore = field(default_factory=SuggestionStore)
    metrics: Optional[DocumentMetrics] = None  # as of analysis time; see ReviewManager.get_metrics
    outcomes: List[ClauseOutcome] = field(default_factory=list)
    started_at: datetime = field(default_factory=_utcnow)
    finished_at: Optional[datetime] = None
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    processing_time: float = 0.0
    cancelled: bool = False
    metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    def document_id(self) -> str:
        return self.document.id

    def clause(self, clause_id: str) -> Optional[Clause]:
        for clause in self.clauses:
            if clause.id == clause_id:
                return clause
        return None

    def degraded_outcomes(self) -> List[ClauseOutcome]:
        return [o for o in self.outcomes if not o.ok]


@dataclass
class PipelineStats:
    """Statistics about pipeline execution."""

    total_runs: int = 0
    complete_runs: int = 0
    incomplete_runs: int = 0
    failed_runs: int = 0
    average_processing_time: float = 0.0
    total_processing_time: float = 0.0


@dataclass
class _ClauseJob:
    index: int
    clause_id: str
    span: TextSpan
    context: AnalysisContext


@dataclass
class _ClauseResult:
    clause: Clause
    outcome: ClauseOutcome
    translation: Optional[Translation] = None
    proposal: Optional[RewriteProposal] = None
    cancelled: bool = False


class _RunCancelled(Exception):
    """Raised inside a clause worker once the run's cancel event is set."""


class AnalysisPipeline:
    """
    Main analysis pipeline.

    Segments a document, runs the classifier, risk scorer, translator and
    (for flagged clauses) rewrite engine on every clause in parallel,
    re-orders the results canonically, builds pending suggestions and
    computes document metrics.

    Clause-level errors never abort a run: a timed-out capability call
    leaves the clause ``degraded``, a failing one leaves it ``failed``
    with an unscored Medium risk fallback, and the run ends ``Incomplete``.
    Only segmentation invariant violations fail a whole run.
    """

    def __init__(
        self,
        config: Optional[PipelineConfig] = None,
        classifier: Optional[IClauseClassifier] = None,
        risk_scorer: Optional[IRiskScorer] = None,
        translator: Optional[ITranslator] = None,
        rewrite_engine: Optional[IRewriteEngine] = None,
        audit_logger: Optional[AuditLogger] = None,
        config_manager: Optional[ConfigurationManager] = None,
    ):
        """
        Initialize the analysis pipeline.

        Args:
            config: Pipeline configuration.
            classifier: Optional clause classifier (default: pattern based).
            risk_scorer: Optional risk scorer (default: rule based).
            translator: Optional translator (default: glossary based).
            rewrite_engine: Optional rewrite engine (default: template based).
            audit_logger: Optional audit logger (created if audit logging
                is enabled and none is provided).
            config_manager: Optional configuration manager shared by the
                default capabilities.
        """
        self.config = config or PipelineConfig()
        self.stats = PipelineStats()
        self._stats_lock = threading.Lock()

        self.performance_monitor = PerformanceMonitor(
            max_processing_time=self.config.max_processing_time
        )

        self._config_manager = config_manager or self._load_configuration()

        self.segmenter = ClauseSegmenter(max_clause_chars=self.config.max_clause_chars)
        self.classifier = classifier or ClausePatternClassifier(
            min_chars=self.config.min_clause_chars
        )
        self.risk_scorer = risk_scorer or RuleBasedRiskScorer(self._config_manager)
        self.translator = translator or PlainLanguageTranslator(self._config_manager)
        self.rewrite_engine = rewrite_engine or TemplateRewriteEngine(self._config_manager)
        self.aggregator = ConfidenceAggregator()

        self._audit_logger = audit_logger
        self._owns_audit_logger = False
        if self._audit_logger is None and self.config.enable_audit_logging:
            self._audit_logger = AuditLogger(database_url=self.config.database_url)
            self._owns_audit_logger = True

        logger.info("Analysis pipeline initialized")

    def _load_configuration(self) -> ConfigurationManager:
        manager = ConfigurationManager.with_defaults()
        if self.config.config_dir:
            result = manager.load_from_directory(self.config.config_dir)
            for warning in result.warnings:
                logger.warning(f"Configuration warning: {warning}")
            if not result.is_valid:
                logger.warning(
                    f"Configuration in {self.config.config_dir} has errors, "
                    f"built-in defaults kept where loading failed: {result.errors}"
                )
            else:
                logger.info(f"Loaded configuration from {self.config.config_dir}")
        return manager

    @property
    def audit_logger(self) -> Optional[AuditLogger]:
        return self._audit_logger

    @property
    def config_manager(self) -> ConfigurationManager:
        return self._config_manager

    # =========================================================================
    # Ingestion
    # =========================================================================

    def ingest(
        self,
        document_id: str,
        pages: Iterable[Tuple[int, str]],
        filename: Optional[str] = None,
        user_id: Optional[str] = None,
    ) -> Document:
        """
        Validate and ingest a document.

        Args:
            document_id: Caller-supplied document identifier.
            pages: Ordered ``(page_number, text)`` pairs.
            filename: Optional original filename.
            user_id: Optional user ID for audit logging.

        Returns:
            The immutable Document.

        Raises:
            ValidationError: If the identifier or pages are malformed.
        """
        if not isinstance(document_id, str) or not document_id.strip():
            raise ValidationError("Document id must be a non-empty string")

        pairs = []
        for item in pages:
            try:
                number, text = item
            except (TypeError, ValueError):
                raise ValidationError(
                    "Pages must be (page_number, text) pairs",
                    location=document_id,
                ) from None
            if isinstance(number, bool) or not isinstance(number, int):
                raise ValidationError(
                    "Page numbers must be integers",
                    location=document_id,
                    details={"page": repr(number)},
                )
            if text is None:
                text = ""
            if not isinstance(text, str):
                raise ValidationError(
                    "Page text must be a string",
                    location=f"{document_id}, page {number}",
                )
            pairs.append((number, text))

        document = Document.from_pages(document_id.strip(), pairs, filename=filename)
        validate_document(document)

        if self._audit_logger:
            self._audit_logger.log_document_ingested(
                document_id=document.id,
                page_count=document.page_count,
                filename=filename,
                user_id=user_id,
            )
        logger.info(f"Ingested document {document.id} with {document.page_count} pages")
        return document

    # =========================================================================
    # Analysis
    # =========================================================================

    def analyze(
        self,
        document: Document,
        cancel_event: Optional[threading.Event] = None,
    ) -> AnalysisRun:
        """
        Run a full analysis over a document.

        Args:
            document: An ingested document.
            cancel_event: Optional event; once set, no new capability calls
                are issued and the run ends ``Incomplete``.

        Returns:
            AnalysisRun. Always returned, with ``errors`` populated and
            status ``Failed`` when segmentation invariants are violated.

        Raises:
            ValidationError: If the document itself is malformed.
        """
        validate_document(document)

        start_time = time.perf_counter()
        run_id = str(uuid.uuid4())
        collector = ErrorCollector(run_id)
        run = AnalysisRun(
            id=run_id,
            document=document,
            suggestion_store=SuggestionStore(
                run_id=run_id,
                document_id=document.id,
                audit_logger=self._audit_logger,
            ),
        )

        overall_metric = self.performance_monitor.start_operation(
            "analysis_run", document_id=document.id, run_id=run_id
        )
        logger.info(f"Starting analysis run {run_id} for document {document.id}")
        if self._audit_logger:
            self._audit_logger.log_analysis_started(document.id, run_id)

        try:
            # Step 1: Segment
            with self.performance_monitor.track("segment"):
                spans = self.segmenter.segment(document)
                validate_spans(spans)
            logger.info(f"Step 1: Segmented document into {len(spans)} clause spans")

            # Step 2: Per-clause analysis
            with self.performance_monitor.track("analyze_clauses", clause_count=len(spans)):
                results = self._analyze_spans(document, run_id, spans, cancel_event)
            logger.info(f"Step 2: Analyzed {len(results)} clauses")

            # Step 3: Collect in canonical order and build suggestions
            with self.performance_monitor.track("build_suggestions"):
                self._collect(run, results, collector)

            # Step 4: Metrics
            with self.performance_monitor.track("aggregate"):
                run.metrics = self.compute_metrics(run)

            run.cancelled = any(r.cancelled for r in results)
            run.status = self._run_status(run)
            self.performance_monitor.end_operation(overall_metric, success=True)

        except SegmentationError as e:
            collector.add_error(e)
            run.status = RunStatus.FAILED
            run.metrics = self.compute_metrics(run)
            logger.error(f"Analysis run {run_id} failed: {e}")
            self.performance_monitor.end_operation(overall_metric, success=False, error=str(e))

        finally:
            run.finished_at = _utcnow()
            run.processing_time = time.perf_counter() - start_time
            run.errors.extend(collector.error_messages())
            run.warnings.extend(collector.warnings)
            run.metadata["performance_stats"] = self.performance_monitor.get_all_stats()

            if run.processing_time > self.config.max_processing_time:
                warning = (
                    f"Processing time ({run.processing_time:.2f}s) exceeded "
                    f"target ({self.config.max_processing_time}s)"
                )
                run.warnings.append(warning)
                logger.warning(warning)

            self._update_stats(run)

        logger.info(
            f"Analysis run {run_id} finished: {run.status.value}, "
            f"{len(run.clauses)} clauses, {len(run.suggestion_store)} suggestions "
            f"in {run.processing_time:.2f}s"
        )
        if self._audit_logger:
            self._audit_logger.log_analysis_completed(
                document_id=document.id,
                run_id=run_id,
                status=run.status.value,
                clause_count=len(run.clauses),
                suggestion_count=len(run.suggestion_store),
                processing_time=run.processing_time,
            )
            self._audit_logger.record_run(run)
        return run

    def compute_metrics(self, run: AnalysisRun) -> DocumentMetrics:
        """Compute metrics for a run from its current suggestion state."""
        return self.aggregator.compute(
            run.document,
            run.clauses,
            run.translations,
            run.suggestion_store.snapshot().suggestions,
            run.outcomes,
            run_id=run.id,
        )

    def _analyze_spans(
        self,
        document: Document,
        run_id: str,
        spans: List[TextSpan],
        cancel_event: Optional[threading.Event],
    ) -> List[_ClauseResult]:
        jobs = self._build_jobs(document, spans)
        if not jobs:
            return []

        call_executor = ThreadPoolExecutor(
            max_workers=self.config.max_workers * 2,
            thread_name_prefix="legal-review-call",
        )
        try:
            with ThreadPoolExecutor(
                max_workers=self.config.max_workers,
                thread_name_prefix="legal-review-clause",
            ) as clause_executor:
                futures: List[Future] = [
                    clause_executor.submit(
                        self._analyze_clause, job, document, run_id, call_executor, cancel_event
                    )
                    for job in jobs
                ]
                results = []
                for job, future in zip(jobs, futures):
                    try:
                        results.append(future.result())
                    except Exception as e:
                        logger.exception(f"Clause {job.clause_id} analysis crashed")
                        results.append(self._fallback_result(
                            job, document, run_id, OutcomeStatus.FAILED,
                            [f"Clause analysis failed: {e}"],
                        ))
        finally:
            # Timed-out calls may still be running; they must not hold the run open
            call_executor.shutdown(wait=False, cancel_futures=True)

        results.sort(key=lambda r: r.clause.sort_key)
        return results

    @staticmethod
    def _build_jobs(document: Document, spans: List[TextSpan]) -> List[_ClauseJob]:
        jobs = []
        occurrences: Dict[Tuple[int, str], int] = {}
        for index, span in enumerate(spans):
            key = (span.page, content_hash(span.text))
            occurrences[key] = occurrences.get(key, 0) + 1
            neighbours = tuple(
                spans[i].text for i in (index - 1, index + 1) if 0 <= i < len(spans)
            )
            jobs.append(_ClauseJob(
                index=index,
                clause_id=make_clause_id(span.text, span.page, occurrences[key]),
                span=span,
                context=AnalysisContext(
                    document_id=document.id,
                    page=span.page,
                    index=index,
                    neighbours=neighbours,
                ),
            ))
        return jobs

    def _analyze_clause(
        self,
        job: _ClauseJob,
        document: Document,
        run_id: str,
        call_executor: ThreadPoolExecutor,
        cancel_event: Optional[threading.Event],
    ) -> _ClauseResult:
        text = job.span.text
        context = job.context
        errors: List[str] = []
        status = OutcomeStatus.OK
        cancelled = False

        classification: Optional[Classification] = None
        assessment: Optional[RiskAssessment] = None
        translated: Optional[TranslationResult] = None
        proposal: Optional[RewriteProposal] = None

        def attempt(capability: str, fn: Callable, *args):
            nonlocal status
            if cancel_event is not None and cancel_event.is_set():
                raise _RunCancelled()
            try:
                return self._bounded_call(call_executor, capability, fn, *args)
            except CapabilityTimeout as e:
                errors.append(str(e))
                if status is OutcomeStatus.OK:
                    status = OutcomeStatus.DEGRADED
                logger.warning(f"Clause {job.clause_id}: {e}")
            except CapabilityFailure as e:
                errors.append(str(e))
                status = OutcomeStatus.FAILED
                logger.warning(f"Clause {job.clause_id}: {e}")
            return None

        try:
            classification = attempt("classifier", self.classifier.classify, text, context)
            clause_type = classification.clause_type if classification else ClauseType.OTHER
            if classification is not None:
                assessment = attempt(
                    "risk_scorer", self.risk_scorer.score, text, clause_type, context
                )
            translated = attempt(
                "translator", self.translator.translate, text, clause_type, context
            )
            if assessment is not None and self._needs_rewrite(assessment):
                proposal = attempt(
                    "rewrite_engine", self.rewrite_engine.rewrite,
                    text, clause_type, assessment, context,
                )
        except _RunCancelled:
            cancelled = True
            errors.append("Analysis cancelled before all capability calls were issued")
            if status is OutcomeStatus.OK:
                status = OutcomeStatus.DEGRADED

        clause = self._build_clause(job, document, run_id, classification, assessment, status)
        translation = None
        if translated is not None:
            translation = Translation(
                clause_id=clause.id,
                original_text=text,
                simplified_text=translated.simplified_text,
                readability_score=_clamp(translated.readability_score),
                complexity=translated.complexity,
            )

        return _ClauseResult(
            clause=clause,
            outcome=ClauseOutcome(
                clause_id=clause.id, index=job.index, status=status, errors=errors
            ),
            translation=translation,
            proposal=proposal,
            cancelled=cancelled,
        )

    def _bounded_call(
        self,
        executor: ThreadPoolExecutor,
        capability: str,
        fn: Callable,
        *args,
    ):
        """
        Run one capability call with a timeout.

        The timeout is measured from the moment the call starts running,
        so time spent queued behind other calls is bounded separately.

        Raises:
            CapabilityTimeout: The call did not start or finish in time.
            CapabilityFailure: The call raised.
        """
        timeout = self.config.capability_timeout
        started = threading.Event()

        def run():
            started.set()
            return fn(*args)

        future = executor.submit(run)
        if not started.wait(timeout):
            future.cancel()
            raise CapabilityTimeout(
                f"{capability} call was not started within {timeout}s",
                capability=capability,
                timeout=timeout,
            )
        try:
            return future.result(timeout=timeout)
        except FuturesTimeout:
            raise CapabilityTimeout(
                f"{capability} call exceeded {timeout}s",
                capability=capability,
                timeout=timeout,
            ) from None
        except Exception as e:
            raise CapabilityFailure(
                f"{capability} call failed: {e}",
                capability=capability,
                details={"error_type": type(e).__name__},
            ) from e

    def _needs_rewrite(self, assessment: RiskAssessment) -> bool:
        level = RiskLevel.normalize(assessment.risk_level)
        return (
            assessment.risk_score >= self.config.rewrite_threshold
            or level >= self.config.rewrite_min_level
        )

    @staticmethod
    def _build_clause(
        job: _ClauseJob,
        document: Document,
        run_id: str,
        classification: Optional[Classification],
        assessment: Optional[RiskAssessment],
        status: OutcomeStatus,
    ) -> Clause:
        span = job.span
        if classification is not None:
            clause_type = ClauseType.parse(classification.clause_type)
            confidence = _clamp(classification.confidence)
        else:
            clause_type = ClauseType.OTHER
            confidence = 0

        if assessment is not None:
            return Clause(
                id=job.clause_id,
                document_id=document.id,
                run_id=run_id,
                page=span.page,
                start=span.start,
                end=span.end,
                text=span.text,
                clause_type=clause_type,
                confidence=confidence,
                risk_level=RiskLevel.normalize(assessment.risk_level),
                risk_score=_clamp(assessment.risk_score),
                risk_confidence=_clamp(assessment.confidence),
                explanation=assessment.explanation or "",
                recommendations=tuple(assessment.recommendations or ()),
                impact=assessment.impact or "",
                unscored=False,
                outcome=status,
            )

        # Never report an unscored clause as Safe
        return Clause(
            id=job.clause_id,
            document_id=document.id,
            run_id=run_id,
            page=span.page,
            start=span.start,
            end=span.end,
            text=span.text,
            clause_type=clause_type,
            confidence=confidence,
            risk_level=RiskLevel.MEDIUM,
            risk_score=UNSCORED_RISK_SCORE,
            risk_confidence=0,
            explanation=UNSCORED_EXPLANATION,
            unscored=True,
            outcome=status,
        )

    def _fallback_result(
        self,
        job: _ClauseJob,
        document: Document,
        run_id: str,
        status: OutcomeStatus,
        errors: List[str],
    ) -> _ClauseResult:
        clause = self._build_clause(job, document, run_id, None, None, status)
        return _ClauseResult(
            clause=clause,
            outcome=ClauseOutcome(clause_id=clause.id, index=job.index, status=status, errors=errors),
        )

    def _collect(
        self,
        run: AnalysisRun,
        results: List[_ClauseResult],
        collector: ErrorCollector,
    ) -> None:
        for index, result in enumerate(results):
            clause = result.clause
            run.clauses.append(clause)
            result.outcome.index = index
            run.outcomes.append(result.outcome)

            if result.translation is not None:
                run.translations[clause.id] = result.translation

            if not result.outcome.ok:
                for message in result.outcome.errors:
                    collector.add_warning(message, location=clause.id)
                if self._audit_logger:
                    self._audit_logger.log_clause_degraded(
                        document_id=run.document_id,
                        run_id=run.id,
                        clause_id=clause.id,
                        outcome=result.outcome.status.value,
                        errors=result.outcome.errors,
                    )

            proposal = result.proposal
            if proposal is None or not proposal.suggested_text.strip():
                continue
            if proposal.suggested_text.strip() == clause.text.strip():
                continue
            run.suggestion_store.add(Suggestion(
                id="sg-" + clause.id[len("cl-"):],
                clause_id=clause.id,
                original_text=clause.text,
                suggested_text=proposal.suggested_text.strip(),
                reasoning=proposal.reasoning,
                benefits=list(proposal.benefits or []),
                clause_type=clause.clause_type,
                risk_level=clause.risk_level,
                page=clause.page,
            ))

    @staticmethod
    def _run_status(run: AnalysisRun) -> RunStatus:
        if run.cancelled or any(not o.ok for o in run.outcomes):
            return RunStatus.INCOMPLETE
        return RunStatus.COMPLETE

    def _update_stats(self, run: AnalysisRun) -> None:
        """Update pipeline statistics."""
        with self._stats_lock:
            self.stats.total_runs += 1
            if run.status is RunStatus.COMPLETE:
                self.stats.complete_runs += 1
            elif run.status is RunStatus.INCOMPLETE:
                self.stats.incomplete_runs += 1
            else:
                self.stats.failed_runs += 1
            self.stats.total_processing_time += run.processing_time
            self.stats.average_processing_time = (
                self.stats.total_processing_time / self.stats.total_runs
            )

    def get_stats(self) -> PipelineStats:
        """Get pipeline execution statistics."""
        return self.stats

    def get_performance_stats(self) -> Dict[str, Dict[str, Any]]:
        """
        Get detailed performance statistics for all stages.

        Returns:
            Dictionary with performance metrics for each stage.
        """
        return self.performance_monitor.get_all_stats()

    def close(self) -> None:
        """Close the pipeline and release resources."""
        if self._audit_logger and self._owns_audit_logger:
            self._audit_logger.close()
        logger.info("Analysis pipeline closed")


def validate_document(document: Document) -> None:
    """
    Check document-level input invariants.

    Raises:
        ValidationError: If the document has no pages, or page numbers
            are not positive and strictly increasing.
    """
    if not document.pages:
        raise ValidationError("Document has no pages", location=document.id)

    previous = 0
    for page in document.pages:
        if page.number <= previous:
            raise ValidationError(
                "Page numbers must be positive and strictly increasing",
                location=f"{document.id}, page {page.number}",
                details={"previous": previous, "page": page.number},
            )
        previous = page.number
