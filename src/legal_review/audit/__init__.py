"""Audit trail for the Legal Review pipeline."""

from .audit_logger import AuditLogger
from .database import DatabaseManager, get_database_url
from .models import (
    AnalysisRunModel,
    AuditEventModel,
    Base,
)

__all__ = [
    "AuditLogger",
    "DatabaseManager",
    "get_database_url",
    "AnalysisRunModel",
    "AuditEventModel",
    "Base",
]
