"""Audit logger implementation for the Legal Review pipeline."""

import csv
import io
import json
import logging
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from sqlalchemy import and_, select

from ..interfaces.audit import AuditEvent, AuditEventType, IAuditLogger
from .database import DatabaseManager
from .models import AnalysisRunModel, AuditEventModel


logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AuditLogger(IAuditLogger):
    """
    Audit logger backed by SQLAlchemy.

    Records ingestion, analysis and review events for traceability, keeps
    one summary row per finished analysis run, and supports querying and
    exporting the log.
    """

    def __init__(
        self,
        db_manager: Optional[DatabaseManager] = None,
        database_url: Optional[str] = None,
    ):
        """
        Initialize the audit logger.

        Args:
            db_manager: Optional DatabaseManager instance. If not provided,
                       a new one will be created.
            database_url: Database URL for creating a new DatabaseManager.
        """
        if db_manager is not None:
            self._db_manager = db_manager
            self._owns_db_manager = False
        else:
            self._db_manager = DatabaseManager(database_url=database_url)
            self._owns_db_manager = True
        self._db_manager.init_database()

    def _to_model(self, event: AuditEvent) -> AuditEventModel:
        """Convert AuditEvent dataclass to SQLAlchemy model."""
        return AuditEventModel(
            id=event.id,
            event_type=event.event_type.value,
            timestamp=event.timestamp,
            document_id=event.document_id,
            run_id=event.run_id,
            user_id=event.user_id,
            details=event.details or {},
            metadata_=event.metadata or {},
        )

    def _from_model(self, model: AuditEventModel) -> AuditEvent:
        """Convert SQLAlchemy model to AuditEvent dataclass."""
        return AuditEvent(
            id=model.id,
            event_type=AuditEventType(model.event_type),
            timestamp=model.timestamp,
            document_id=model.document_id,
            run_id=model.run_id,
            user_id=model.user_id,
            details=model.details or {},
            metadata=model.metadata_ or {},
        )

    def log_event(self, event: AuditEvent) -> None:
        """
        Record an audit event to the database.

        Args:
            event: The audit event to record.
        """
        with self._db_manager.get_session() as session:
            session.add(self._to_model(event))

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

        Args:
            document_id: Filter by document ID.
            run_id: Filter by analysis run ID.
            event_type: Filter by event type.
            start_time: Filter events after this time.
            end_time: Filter events before this time.

        Returns:
            List of matching audit events, newest first.
        """
        with self._db_manager.get_session() as session:
            query = select(AuditEventModel)

            conditions = []
            if document_id:
                conditions.append(AuditEventModel.document_id == document_id)
            if run_id:
                conditions.append(AuditEventModel.run_id == run_id)
            if event_type:
                conditions.append(AuditEventModel.event_type == event_type.value)
            if start_time:
                conditions.append(AuditEventModel.timestamp >= start_time)
            if end_time:
                conditions.append(AuditEventModel.timestamp <= end_time)

            if conditions:
                query = query.where(and_(*conditions))

            query = query.order_by(AuditEventModel.timestamp.desc())
            models = session.execute(query).scalars().all()
            return [self._from_model(m) for m in models]

    def export_log(
        self,
        document_id: str,
        format: str = "json",
    ) -> str:
        """
        Export audit log for a document.

        Args:
            document_id: The document ID to export logs for.
            format: Export format ("json" or "csv").

        Returns:
            Exported log content as a string.

        Raises:
            ValueError: If format is not supported.
        """
        if format not in ("json", "csv"):
            raise ValueError(f"Unsupported export format: {format}. Use 'json' or 'csv'.")

        events = self.get_events(document_id=document_id)

        if format == "json":
            return self._export_json(document_id, events)
        return self._export_csv(events)

    def _export_json(self, document_id: str, events: List[AuditEvent]) -> str:
        """Export events to JSON with a per-suggestion review decision table."""
        decisions = []
        for e in events:
            if e.event_type is AuditEventType.REVIEW_ACTION:
                decisions.append({
                    "suggestion_id": e.details.get("suggestion_id"),
                    "clause_id": e.details.get("clause_id"),
                    "action": e.details.get("action"),
                    "status": e.details.get("status"),
                    "timestamp": e.timestamp.isoformat() if e.timestamp else None,
                })

        data = {
            "document_id": document_id,
            "export_timestamp": _utcnow().isoformat(),
            "event_count": len(events),
            "review_decisions": decisions,
            "runs": self.get_runs(document_id),
            "events": [self._event_dict(e) for e in events],
        }
        return json.dumps(data, indent=2, ensure_ascii=False)

    @staticmethod
    def _event_dict(e: AuditEvent) -> Dict[str, Any]:
        return {
            "id": e.id,
            "event_type": e.event_type.value,
            "timestamp": e.timestamp.isoformat() if e.timestamp else None,
            "document_id": e.document_id,
            "run_id": e.run_id,
            "user_id": e.user_id,
            "details": e.details,
            "metadata": e.metadata,
        }

    def _export_csv(self, events: List[AuditEvent]) -> str:
        """Export events to CSV format."""
        output = io.StringIO()
        writer = csv.writer(output)

        writer.writerow([
            "id", "event_type", "timestamp", "document_id",
            "run_id", "user_id", "details", "metadata"
        ])

        for e in events:
            writer.writerow([
                e.id,
                e.event_type.value,
                e.timestamp.isoformat() if e.timestamp else "",
                e.document_id or "",
                e.run_id or "",
                e.user_id or "",
                json.dumps(e.details, ensure_ascii=False, sort_keys=True),
                json.dumps(e.metadata, ensure_ascii=False, sort_keys=True),
            ])

        return output.getvalue()

    # ========== Run History ==========

    def record_run(self, run) -> None:
        """
        Store or update the summary row of an analysis run.

        Args:
            run: A finished AnalysisRun.
        """
        metrics = run.metrics
        with self._db_manager.get_session() as session:
            model = session.get(AnalysisRunModel, run.id) or AnalysisRunModel(id=run.id)
            model.document_id = run.document.id
            model.filename = run.document.filename
            model.status = run.status.value
            model.clause_count = len(run.clauses)
            model.suggestion_count = len(run.suggestion_store)
            model.overall_confidence = metrics.overall_confidence if metrics else 0
            model.overall_risk_score = metrics.overall_risk_score if metrics else 0
            model.risk_counts = (
                {level.value: count for level, count in metrics.risk_counts.items()}
                if metrics else {}
            )
            model.errors = list(run.errors)
            model.processing_time = run.processing_time
            model.started_at = run.started_at
            model.finished_at = run.finished_at
            session.merge(model)

    def get_runs(self, document_id: str) -> List[Dict[str, Any]]:
        """Get summary rows of all recorded runs for a document, oldest first."""
        with self._db_manager.get_session() as session:
            query = (
                select(AnalysisRunModel)
                .where(AnalysisRunModel.document_id == document_id)
                .order_by(AnalysisRunModel.started_at.asc())
            )
            return [
                {
                    "run_id": r.id,
                    "status": r.status,
                    "clause_count": r.clause_count,
                    "suggestion_count": r.suggestion_count,
                    "overall_confidence": r.overall_confidence,
                    "overall_risk_score": r.overall_risk_score,
                    "risk_counts": r.risk_counts or {},
                    "processing_time": r.processing_time,
                    "started_at": r.started_at.isoformat() if r.started_at else None,
                }
                for r in session.execute(query).scalars().all()
            ]

    # ========== Convenience Logging Methods ==========

    def _log(
        self,
        event_type: AuditEventType,
        document_id: Optional[str],
        run_id: Optional[str] = None,
        user_id: Optional[str] = None,
        **details,
    ) -> None:
        self.log_event(AuditEvent(
            id=str(uuid.uuid4()),
            event_type=event_type,
            timestamp=_utcnow(),
            document_id=document_id,
            run_id=run_id,
            user_id=user_id,
            details=details,
        ))

    def log_document_ingested(
        self,
        document_id: str,
        page_count: int,
        filename: Optional[str] = None,
        user_id: Optional[str] = None,
    ) -> None:
        """Log a document ingestion event."""
        self._log(
            AuditEventType.DOCUMENT_INGESTED, document_id, user_id=user_id,
            page_count=page_count, filename=filename,
        )

    def log_analysis_started(self, document_id: str, run_id: str) -> None:
        """Log the start of an analysis run."""
        self._log(AuditEventType.ANALYSIS_STARTED, document_id, run_id)

    def log_analysis_completed(
        self,
        document_id: str,
        run_id: str,
        status: str,
        clause_count: int,
        suggestion_count: int,
        processing_time: float,
    ) -> None:
        """Log the end of an analysis run."""
        self._log(
            AuditEventType.ANALYSIS_COMPLETED, document_id, run_id,
            status=status,
            clause_count=clause_count,
            suggestion_count=suggestion_count,
            processing_time=round(processing_time, 3),
        )

    def log_clause_degraded(
        self,
        document_id: str,
        run_id: str,
        clause_id: str,
        outcome: str,
        errors: List[str],
    ) -> None:
        """Log a clause whose analysis timed out or failed."""
        self._log(
            AuditEventType.CLAUSE_DEGRADED, document_id, run_id,
            clause_id=clause_id, outcome=outcome, errors=list(errors),
        )

    def log_review_action(
        self,
        document_id: Optional[str],
        run_id: Optional[str],
        suggestion_id: str,
        clause_id: str,
        action: str,
        status: str,
        user_id: Optional[str] = None,
        edited_text: Optional[str] = None,
    ) -> None:
        """Log a user review action event."""
        self._log(
            AuditEventType.REVIEW_ACTION, document_id, run_id, user_id,
            suggestion_id=suggestion_id,
            clause_id=clause_id,
            action=action,
            status=status,
            edited_text=edited_text,
        )

    def log_document_composed(
        self,
        document_id: str,
        run_id: str,
        change_count: int,
    ) -> None:
        """Log composition of a revised document."""
        self._log(
            AuditEventType.DOCUMENT_COMPOSED, document_id, run_id,
            change_count=change_count,
        )

    def log_export_completed(
        self,
        document_id: str,
        run_id: str,
        export_kind: str,
        export_format: str,
        user_id: Optional[str] = None,
    ) -> None:
        """Log an export completion event."""
        self._log(
            AuditEventType.EXPORT_COMPLETED, document_id, run_id, user_id,
            export_kind=export_kind, export_format=export_format,
        )

    def close(self) -> None:
        """Close the audit logger and release resources."""
        if self._owns_db_manager:
            self._db_manager.close()
