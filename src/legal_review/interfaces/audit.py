"""Audit logger interface for the Legal Review pipeline."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import List, Optional


class AuditEventType(Enum):
    """Types of audit events tracked by the system."""
    DOCUMENT_INGESTED = "document_ingested"
    ANALYSIS_STARTED = "analysis_started"
    ANALYSIS_COMPLETED = "analysis_completed"
    CLAUSE_DEGRADED = "clause_degraded"
    REVIEW_ACTION = "review_action"
    DOCUMENT_COMPOSED = "document_composed"
    EXPORT_COMPLETED = "export_completed"


@dataclass
class AuditEvent:
    """
    Audit event record.

    Represents a single auditable event, including timestamp, the
    document and run it relates to, and event details.
    """
    id: str
    event_type: AuditEventType
    timestamp: datetime
    document_id: Optional[str] = None
    run_id: Optional[str] = None
    user_id: Optional[str] = None
    details: dict = field(default_factory=dict)
    metadata: dict = field(default_factory=dict)

    def __post_init__(self):
        if self.details is None:
            self.details = {}
        if self.metadata is None:
            self.metadata = {}


class IAuditLogger(ABC):
    """
    Abstract interface for audit logging.

    Implementations record and query audit events for traceability of
    analysis runs and review decisions.
    """

    @abstractmethod
    def log_event(self, event: AuditEvent) -> None:
        """
        Record an audit event.

        Args:
            event: The audit event to record.
        """
        pass

    @abstractmethod
    def get_events(
        self,
        document_id: Optional[str] = None,
        run_id: Optional[str] = None,
        event_type: Optional[AuditEventType] = None,
        start_time: Optional[datetime] = None,
        end_time: Optional[datetime] = None,
    ) -> List[AuditEvent]:
        """
        Query audit events with optional filters.

        Returns:
            List of matching audit events, newest first.
        """
        pass

    @abstractmethod
    def export_log(
        self,
        document_id: str,
        format: str = "json",
    ) -> str:
        """
        Export the audit log for a document.

        Args:
            document_id: The document ID to export logs for.
            format: Export format ("json" or "csv").

        Returns:
            Exported log content as a string.

        Raises:
            ValueError: If format is not supported.
        """
        pass
