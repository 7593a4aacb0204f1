"""Error taxonomy for the Legal Review pipeline."""

from dataclasses import dataclass, field
from typing import Any, Optional


@dataclass
class ReviewError(Exception):
    """
    Base exception for analysis and review errors.

    Carries a human-readable message, an optional location (clause id,
    suggestion id, page/offset) and structured details for logging.

    Attributes:
        message: Human-readable error description.
        location: Where the error occurred, if known.
        details: Additional error details.
    """
    message: str
    location: Optional[str] = None
    details: Optional[dict] = field(default_factory=dict)

    retryable = False

    def __post_init__(self):
        if self.details is None:
            self.details = {}
        super().__init__(str(self))

    def __str__(self) -> str:
        parts = [self.message]
        if self.location:
            parts.append(f"Location: {self.location}")
        return " | ".join(parts)

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging/serialization."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "location": self.location,
            "details": self.details,
            "retryable": self.retryable,
        }


@dataclass
class ValidationError(ReviewError):
    """
    Malformed input: empty document, invalid state transition, empty edit.

    Always surfaced to the caller and never retried automatically.
    """


@dataclass
class SegmentationError(ValidationError):
    """
    Document-level invariant violation from the segmenter.

    Raised when spans overlap or are out of (page, offset) order. This is
    the only class of error that fails a whole run.
    """


@dataclass
class NotFoundError(ReviewError):
    """Unknown run, clause or suggestion identifier."""


@dataclass
class CapabilityError(ReviewError):
    """Base class for problems raised by a pluggable capability call."""
    capability: Optional[str] = None


@dataclass
class CapabilityTimeout(CapabilityError):
    """A classifier/scorer/translator/rewriter call exceeded its bound."""
    timeout: Optional[float] = None


@dataclass
class CapabilityFailure(CapabilityError):
    """A classifier/scorer/translator/rewriter call raised an error."""


@dataclass
class ConcurrencyConflict(ReviewError):
    """
    Two transitions raced on the same suggestion.

    The later transition is rejected; the caller may re-read and retry.
    """
    expected_version: Optional[int] = None
    actual_version: Optional[int] = None

    retryable = True


class ErrorCollector:
    """
    Collects clause-level errors and warnings during a run.

    Clause-level problems never abort a run; they are gathered here and
    reported on the finished run instead.
    """

    def __init__(self, run_id: str):
        self.run_id = run_id
        self.errors: list[ReviewError] = []
        self.warnings: list[str] = []

    def add_error(self, error: ReviewError) -> None:
        """Add an error to the collection."""
        self.errors.append(error)

    def add_warning(self, message: str, location: Optional[str] = None) -> None:
        """Add a warning message."""
        warning = f"{message}"
        if location:
            warning += f" (at {location})"
        self.warnings.append(warning)

    def has_errors(self) -> bool:
        return len(self.errors) > 0

    def has_fatal_errors(self) -> bool:
        """Check if any run-level (non-recoverable) errors were recorded."""
        return any(isinstance(e, SegmentationError) for e in self.errors)

    def error_messages(self) -> list[str]:
        return [str(e) for e in self.errors]

    def get_summary(self) -> dict[str, Any]:
        """Get a summary of all errors and warnings."""
        return {
            "run_id": self.run_id,
            "error_count": len(self.errors),
            "warning_count": len(self.warnings),
            "errors": [e.to_dict() for e in self.errors],
            "warnings": self.warnings,
            "has_fatal_errors": self.has_fatal_errors(),
        }
