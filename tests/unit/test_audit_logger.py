"""Unit tests for the Audit Logger."""

import csv
import io
import json
import uuid
from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock

import pytest

from legal_review.audit.audit_logger import AuditLogger
from legal_review.interfaces.audit import AuditEvent, AuditEventType


def make_event(event_type=AuditEventType.DOCUMENT_INGESTED, document_id="doc-1", run_id=None, **details):
    return AuditEvent(
        id=str(uuid.uuid4()),
        event_type=event_type,
        timestamp=datetime.now(timezone.utc),
        document_id=document_id,
        run_id=run_id,
        details=details,
    )


class TestAuditEvent:
    def test_none_details_become_empty(self):
        event = AuditEvent(
            id="e-1",
            event_type=AuditEventType.REVIEW_ACTION,
            timestamp=datetime.now(timezone.utc),
            details=None,
            metadata=None,
        )
        assert event.details == {}
        assert event.metadata == {}


class TestLogAndQuery:
    """Tests for recording and querying events against SQLite."""

    def test_log_and_get(self, audit_logger):
        audit_logger.log_event(make_event(page_count=3))
        events = audit_logger.get_events(document_id="doc-1")

        assert len(events) == 1
        assert events[0].event_type is AuditEventType.DOCUMENT_INGESTED
        assert events[0].details == {"page_count": 3}

    def test_filters(self, audit_logger):
        audit_logger.log_event(make_event(document_id="doc-1"))
        audit_logger.log_event(make_event(AuditEventType.ANALYSIS_STARTED, "doc-1", "run-1"))
        audit_logger.log_event(make_event(document_id="doc-2"))

        assert len(audit_logger.get_events(document_id="doc-1")) == 2
        assert len(audit_logger.get_events(run_id="run-1")) == 1
        started = audit_logger.get_events(event_type=AuditEventType.ANALYSIS_STARTED)
        assert [e.run_id for e in started] == ["run-1"]

    def test_time_window(self, audit_logger):
        audit_logger.log_event(make_event())
        future = datetime.now(timezone.utc) + timedelta(hours=1)
        assert audit_logger.get_events(start_time=future) == []

    def test_convenience_methods(self, audit_logger):
        audit_logger.log_document_ingested("doc-1", page_count=2, filename="a.pdf", user_id="u1")
        audit_logger.log_analysis_started("doc-1", "run-1")
        audit_logger.log_clause_degraded("doc-1", "run-1", "cl-1", "degraded", ["timed out"])
        audit_logger.log_review_action(
            "doc-1", "run-1", suggestion_id="sg-1", clause_id="cl-1",
            action="edit", status="edited", user_id="u1", edited_text="New text.",
        )
        audit_logger.log_document_composed("doc-1", "run-1", change_count=1)
        audit_logger.log_export_completed("doc-1", "run-1", "revised", "docx")
        audit_logger.log_analysis_completed("doc-1", "run-1", "complete", 8, 4, 0.12345)

        types = {e.event_type for e in audit_logger.get_events(document_id="doc-1")}
        assert types == set(AuditEventType)

        review = audit_logger.get_events(event_type=AuditEventType.REVIEW_ACTION)[0]
        assert review.user_id == "u1"
        assert review.details["edited_text"] == "New text."

        completed = audit_logger.get_events(event_type=AuditEventType.ANALYSIS_COMPLETED)[0]
        assert completed.details["processing_time"] == 0.123


class TestExport:
    """Tests for audit log export."""

    def test_json_export_has_review_decisions(self, audit_logger):
        audit_logger.log_review_action(
            "doc-1", "run-1", suggestion_id="sg-1", clause_id="cl-1",
            action="accept", status="accepted",
        )
        data = json.loads(audit_logger.export_log("doc-1", format="json"))

        assert data["document_id"] == "doc-1"
        assert data["event_count"] == 1
        assert data["review_decisions"][0]["suggestion_id"] == "sg-1"
        assert data["review_decisions"][0]["status"] == "accepted"

    def test_csv_export(self, audit_logger):
        audit_logger.log_document_ingested("doc-1", page_count=1)
        rows = list(csv.reader(io.StringIO(audit_logger.export_log("doc-1", format="csv"))))

        assert rows[0][:2] == ["id", "event_type"]
        assert rows[1][1] == "document_ingested"
        assert json.loads(rows[1][6]) == {"filename": None, "page_count": 1}

    def test_unsupported_format(self, audit_logger):
        with pytest.raises(ValueError):
            audit_logger.export_log("doc-1", format="xml")


class TestRunHistory:
    def test_record_and_update_run(self, audit_logger, run):
        audit_logger.record_run(run)
        audit_logger.record_run(run)

        runs = audit_logger.get_runs(run.document_id)
        assert len(runs) == 1
        assert runs[0]["run_id"] == run.id
        assert runs[0]["status"] == "complete"
        assert runs[0]["clause_count"] == 8
        assert runs[0]["suggestion_count"] == 4
        assert runs[0]["risk_counts"] == {"safe": 4, "medium": 2, "high": 2}


class TestOwnership:
    def test_close_only_owned_manager(self):
        db_manager = MagicMock()
        logger = AuditLogger(db_manager=db_manager)
        db_manager.init_database.assert_called_once()

        logger.close()
        db_manager.close.assert_not_called()
