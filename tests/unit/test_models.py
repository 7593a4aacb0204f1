"""Unit tests for the core data models and enumerations."""

import pytest

from legal_review.exceptions import (
    CapabilityTimeout,
    ConcurrencyConflict,
    ErrorCollector,
    SegmentationError,
    ValidationError,
)
from legal_review.models.clause import Suggestion, content_hash, make_clause_id
from legal_review.models.document import ComposedDocument, Document, Page
from legal_review.models.enums import ClauseType, RiskLevel, SuggestionStatus


class TestRiskLevel:
    """Tests for the three-level risk ordinal."""

    def test_ordering(self):
        assert RiskLevel.SAFE < RiskLevel.MEDIUM < RiskLevel.HIGH
        assert max([RiskLevel.MEDIUM, RiskLevel.HIGH, RiskLevel.SAFE]) is RiskLevel.HIGH

    def test_low_is_an_alias_of_safe(self):
        assert RiskLevel.normalize("low") is RiskLevel.SAFE
        assert RiskLevel.normalize("Low") is RiskLevel.SAFE
        assert RiskLevel.normalize(" HIGH ") is RiskLevel.HIGH

    def test_unknown_level_rejected(self):
        with pytest.raises(ValueError):
            RiskLevel.normalize("critical")

    @pytest.mark.parametrize("score,expected", [
        (0, RiskLevel.SAFE),
        (39, RiskLevel.SAFE),
        (40, RiskLevel.MEDIUM),
        (69, RiskLevel.MEDIUM),
        (70, RiskLevel.HIGH),
        (100, RiskLevel.HIGH),
    ])
    def test_from_score_thresholds(self, score, expected):
        assert RiskLevel.from_score(score) is expected


class TestClauseType:
    """Tests for clause type parsing and labels."""

    def test_label(self):
        assert ClauseType.INTELLECTUAL_PROPERTY.label == "Intellectual Property"
        assert ClauseType.PAYMENT_TERMS.label == "Payment Terms"

    def test_parse_accepts_value_and_label(self):
        assert ClauseType.parse("governing_law") is ClauseType.GOVERNING_LAW
        assert ClauseType.parse("Governing Law") is ClauseType.GOVERNING_LAW
        assert ClauseType.parse("dispute-resolution") is ClauseType.DISPUTE_RESOLUTION

    def test_parse_rejects_unknown(self):
        with pytest.raises(ValueError):
            ClauseType.parse("warranty")


class TestSuggestionStatus:
    def test_applied_states(self):
        assert SuggestionStatus.ACCEPTED.is_applied
        assert SuggestionStatus.EDITED.is_applied
        assert not SuggestionStatus.REJECTED.is_applied
        assert not SuggestionStatus.PENDING.is_applied

    def test_terminal_states(self):
        assert not SuggestionStatus.PENDING.is_terminal
        assert SuggestionStatus.REJECTED.is_terminal


class TestClauseIdentity:
    """Tests for stable clause identifiers."""

    def test_content_hash_ignores_whitespace_and_case(self):
        assert content_hash("Net 30  days\nfrom invoice") == content_hash("net 30 days from INVOICE")

    def test_clause_id_format(self):
        clause_id = make_clause_id("Payment is due in 30 days.", page=2, ordinal=1)
        assert clause_id.startswith("cl-")
        assert clause_id.endswith("-p2-1")
        assert len(clause_id.split("-")[1]) == 12

    def test_duplicate_text_gets_distinct_ids(self):
        first = make_clause_id("Boilerplate.", page=1, ordinal=1)
        second = make_clause_id("Boilerplate.", page=1, ordinal=2)
        assert first != second


class TestSuggestion:
    def test_effective_text_prefers_edit(self):
        suggestion = Suggestion(
            id="sg-1", clause_id="cl-1", original_text="a", suggested_text="b", reasoning="r"
        )
        assert suggestion.effective_text == "b"
        suggestion.edited_text = "c"
        assert suggestion.effective_text == "c"


class TestDocument:
    def test_from_pages(self):
        document = Document.from_pages("doc-1", [(1, "First page"), (2, None)])
        assert document.page_count == 2
        assert document.page_text(2) == ""
        assert document.content_length == len("Firstpage")

    def test_page_text_unknown_page(self):
        document = Document.from_pages("doc-1", [(1, "x")])
        with pytest.raises(KeyError):
            document.page_text(5)

    def test_composed_text_keeps_page_boundaries(self):
        composed = ComposedDocument(
            document_id="doc-1",
            run_id="run-1",
            pages=(Page(1, "one"), Page(2, "two")),
            changes=(),
        )
        assert composed.text == "one\ftwo"
        assert composed.page_numbers() == [1, 2]


class TestExceptions:
    """Tests for the error taxonomy."""

    def test_to_dict(self):
        error = ValidationError("Edited text must not be empty", location="sg-1")
        data = error.to_dict()
        assert data["error_type"] == "ValidationError"
        assert data["location"] == "sg-1"
        assert data["retryable"] is False
        assert "Location: sg-1" in str(error)

    def test_conflict_is_retryable(self):
        error = ConcurrencyConflict("raced", expected_version=1, actual_version=2)
        assert error.retryable
        assert error.to_dict()["retryable"] is True

    def test_segmentation_error_is_validation_error(self):
        assert issubclass(SegmentationError, ValidationError)

    def test_timeout_carries_capability(self):
        error = CapabilityTimeout("slow", capability="translator", timeout=1.5)
        assert error.capability == "translator"
        assert error.timeout == 1.5


class TestErrorCollector:
    def test_collects_errors_and_warnings(self):
        collector = ErrorCollector("run-1")
        collector.add_warning("translator call exceeded 1s", location="cl-abc")
        assert collector.warnings == ["translator call exceeded 1s (at cl-abc)"]
        assert not collector.has_errors()

        collector.add_error(SegmentationError("Overlapping clause spans"))
        summary = collector.get_summary()
        assert summary["error_count"] == 1
        assert summary["warning_count"] == 1
        assert summary["has_fatal_errors"] is True
