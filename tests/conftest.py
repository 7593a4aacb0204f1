"""Shared fixtures for the Legal Review test suite."""

import threading
import time

import pytest

from legal_review.audit.audit_logger import AuditLogger
from legal_review.audit.database import DatabaseManager
from legal_review.fixtures import (
    SAMPLE_DOCUMENT_ID,
    fixture_capabilities,
    sample_document,
    sample_pages,
)
from legal_review.interfaces.capabilities import IClauseClassifier
from legal_review.models.clause import content_hash
from legal_review.pipeline import AnalysisPipeline, PipelineConfig
from legal_review.review.review_manager import ReviewManager


class SlowClassifier(IClauseClassifier):
    """Wraps a classifier and stalls on one particular clause."""

    def __init__(self, inner, slow_text: str, delay: float = 1.0):
        self.inner = inner
        self.slow_hash = content_hash(slow_text)
        self.delay = delay

    def classify(self, text, context=None):
        if content_hash(text) == self.slow_hash:
            time.sleep(self.delay)
        return self.inner.classify(text, context)


class FailingClassifier(IClauseClassifier):
    """Wraps a classifier and raises on one particular clause."""

    def __init__(self, inner, failing_text: str):
        self.inner = inner
        self.failing_hash = content_hash(failing_text)

    def classify(self, text, context=None):
        if content_hash(text) == self.failing_hash:
            raise RuntimeError("model backend unavailable")
        return self.inner.classify(text, context)


class CancellingClassifier(IClauseClassifier):
    """Sets a cancel event on its first call."""

    def __init__(self, inner, cancel_event: threading.Event):
        self.inner = inner
        self.cancel_event = cancel_event
        self.calls = 0
        self._lock = threading.Lock()

    def classify(self, text, context=None):
        with self._lock:
            self.calls += 1
        self.cancel_event.set()
        return self.inner.classify(text, context)


@pytest.fixture
def slow_classifier():
    return SlowClassifier


@pytest.fixture
def failing_classifier():
    return FailingClassifier


@pytest.fixture
def cancelling_classifier():
    return CancellingClassifier


@pytest.fixture
def capabilities():
    return fixture_capabilities()


@pytest.fixture
def pipeline_config():
    return PipelineConfig(max_workers=4, capability_timeout=2.0)


@pytest.fixture
def pipeline(pipeline_config, capabilities):
    pipeline = AnalysisPipeline(pipeline_config, **capabilities)
    yield pipeline
    pipeline.close()


@pytest.fixture
def document():
    return sample_document()


@pytest.fixture
def pages():
    return sample_pages()


@pytest.fixture
def run(pipeline, document):
    return pipeline.analyze(document)


@pytest.fixture
def audit_logger():
    """Audit logger backed by an in-memory SQLite database."""
    db_manager = DatabaseManager(database_url="sqlite:///:memory:")
    logger = AuditLogger(db_manager=db_manager)
    yield logger
    db_manager.close()


@pytest.fixture
def manager(pipeline_config, capabilities, audit_logger):
    pipeline = AnalysisPipeline(pipeline_config, audit_logger=audit_logger, **capabilities)
    manager = ReviewManager(pipeline=pipeline)
    yield manager
    manager.close()


@pytest.fixture
def submitted_run(manager, pages):
    return manager.submit(SAMPLE_DOCUMENT_ID, pages, filename="service-agreement.pdf")
