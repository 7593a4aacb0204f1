"""SQLAlchemy models for the audit trail."""

import uuid
from datetime import datetime, timezone

from sqlalchemy import (
    Column,
    DateTime,
    Float,
    Index,
    Integer,
    JSON,
    String,
    CheckConstraint,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.types import TypeDecorator


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _new_id() -> str:
    return str(uuid.uuid4())


class JSONType(TypeDecorator):
    """Platform-independent JSON type.

    Uses JSONB for PostgreSQL and JSON for other databases (like SQLite).
    """
    impl = JSON
    cache_ok = True

    def load_dialect_impl(self, dialect):
        if dialect.name == 'postgresql':
            return dialect.type_descriptor(JSONB())
        else:
            return dialect.type_descriptor(JSON())


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""
    pass


class AuditEventModel(Base):
    """Audit events table model."""
    __tablename__ = "audit_events"

    id = Column(String(36), primary_key=True, default=_new_id)
    event_type = Column(String(50), nullable=False)
    timestamp = Column(DateTime(timezone=True), default=_utcnow)
    document_id = Column(String(255), nullable=True)
    run_id = Column(String(36), nullable=True)
    user_id = Column(String(100), nullable=True)
    details = Column(JSONType)
    metadata_ = Column("metadata", JSONType)

    __table_args__ = (
        Index("idx_audit_events_event_type", "event_type"),
        Index("idx_audit_events_timestamp", "timestamp"),
        Index("idx_audit_events_document_id", "document_id"),
        Index("idx_audit_events_run_id", "run_id"),
    )


class AnalysisRunModel(Base):
    """Analysis runs table model: one row per finished run."""
    __tablename__ = "analysis_runs"

    id = Column(String(36), primary_key=True)
    document_id = Column(String(255), nullable=False)
    filename = Column(String(255), nullable=True)
    status = Column(String(20), nullable=False)
    clause_count = Column(Integer, default=0)
    suggestion_count = Column(Integer, default=0)
    overall_confidence = Column(Integer, default=0)
    overall_risk_score = Column(Integer, default=0)
    risk_counts = Column(JSONType)
    errors = Column(JSONType)
    processing_time = Column(Float, default=0.0)
    started_at = Column(DateTime(timezone=True), default=_utcnow)
    finished_at = Column(DateTime(timezone=True), nullable=True)

    __table_args__ = (
        CheckConstraint(
            "status IN ('complete', 'incomplete', 'failed')",
            name="check_run_status",
        ),
        Index("idx_analysis_runs_document_id", "document_id"),
        Index("idx_analysis_runs_started_at", "started_at"),
    )
