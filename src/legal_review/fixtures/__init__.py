"""Seed data and deterministic capability stubs."""

from .seed import SAMPLE_DOCUMENT_ID, SEED_CLAUSES, SeedClause, sample_document, sample_pages
from .stubs import (
    FixtureClassifier,
    FixtureRewriteEngine,
    FixtureRiskScorer,
    FixtureTranslator,
    fixture_capabilities,
)

__all__ = [
    "SAMPLE_DOCUMENT_ID",
    "SEED_CLAUSES",
    "SeedClause",
    "sample_document",
    "sample_pages",
    "FixtureClassifier",
    "FixtureRewriteEngine",
    "FixtureRiskScorer",
    "FixtureTranslator",
    "fixture_capabilities",
]
