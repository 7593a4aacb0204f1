"""
Legal Review

Clause-level analysis of legal documents with a human review workflow
for machine-generated rewrite suggestions.
"""

__version__ = "0.1.0"

# Export main components
from .models.enums import (
    ClauseType,
    Complexity,
    OutcomeStatus,
    RiskLevel,
    RunStatus,
    SuggestionStatus,
)
from .models.document import AppliedChange, ComposedDocument, Document, Page, TextSpan
from .models.clause import Clause, ClauseOutcome, Suggestion, Translation
from .models.metrics import ConfidenceMetric, DocumentMetrics, SummarySection
from .exceptions import (
    CapabilityFailure,
    CapabilityTimeout,
    ConcurrencyConflict,
    ErrorCollector,
    NotFoundError,
    ReviewError,
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
from .interfaces.audit import AuditEvent, AuditEventType, IAuditLogger
from .segmentation import ClauseSegmenter
from .analyzers import (
    ClausePatternClassifier,
    PlainLanguageTranslator,
    RuleBasedRiskScorer,
    TemplateRewriteEngine,
)
from .aggregation import ConfidenceAggregator, ContractSummarizer
from .review import DocumentComposer, SuggestionStore
from .pipeline import AnalysisPipeline, AnalysisRun, PipelineConfig
from .review.review_manager import ReviewManager
from .audit import AuditLogger, DatabaseManager
from .config import (
    ConfigurationError,
    ConfigurationManager,
    RewritingTemplate,
    RiskRule,
    SystemConfiguration,
    ValidationResult,
)

__all__ = [
    "ClauseType",
    "Complexity",
    "OutcomeStatus",
    "RiskLevel",
    "RunStatus",
    "SuggestionStatus",
    "AppliedChange",
    "ComposedDocument",
    "Document",
    "Page",
    "TextSpan",
    "Clause",
    "ClauseOutcome",
    "Suggestion",
    "Translation",
    "ConfidenceMetric",
    "DocumentMetrics",
    "SummarySection",
    "CapabilityFailure",
    "CapabilityTimeout",
    "ConcurrencyConflict",
    "ErrorCollector",
    "NotFoundError",
    "ReviewError",
    "SegmentationError",
    "ValidationError",
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
    "ClauseSegmenter",
    "ClausePatternClassifier",
    "PlainLanguageTranslator",
    "RuleBasedRiskScorer",
    "TemplateRewriteEngine",
    "ConfidenceAggregator",
    "ContractSummarizer",
    "DocumentComposer",
    "SuggestionStore",
    "AnalysisPipeline",
    "AnalysisRun",
    "PipelineConfig",
    "ReviewManager",
    "AuditLogger",
    "DatabaseManager",
    "ConfigurationError",
    "ConfigurationManager",
    "RewritingTemplate",
    "RiskRule",
    "SystemConfiguration",
    "ValidationResult",
]
